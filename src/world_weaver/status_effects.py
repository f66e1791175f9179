"""Timed status effects on the player, and the rules that classify effect sources."""
from __future__ import annotations

import enum
import re
from dataclasses import dataclass


class EffectKind(enum.Enum):
    """What using an item or ability does."""
    HEAL = "heal"
    SPEED = "speed"
    STRENGTH = "strength"
    RANDOM_BUFF = "random_buff"
    NONE = "none"


_CONSUMABLE_HEAL_RE = re.compile(r"heal|potion|elixir", re.IGNORECASE)
_ABILITY_HEAL_RE = re.compile(r"heal|potion", re.IGNORECASE)
_SPEED_RE = re.compile(r"speed", re.IGNORECASE)
_STRENGTH_RE = re.compile(r"strength", re.IGNORECASE)

# Effect types a status-effect description may mention, checked in order
_STATUS_TYPE_KEYWORDS = (
    ("speed", re.compile(r"speed|haste|swift|slow", re.IGNORECASE)),
    ("strength", re.compile(r"strength|might|power", re.IGNORECASE)),
    ("charisma", re.compile(r"charisma|charm|persua", re.IGNORECASE)),
    ("agility", re.compile(r"agility|dodge|nimble", re.IGNORECASE)),
)


def classify_consumable(name: str) -> EffectKind:
    """Healing-themed consumables heal; everything else grants a random buff."""
    if _CONSUMABLE_HEAL_RE.search(name or ""):
        return EffectKind.HEAL
    return EffectKind.RANDOM_BUFF


def classify_ability(name: str) -> EffectKind:
    name = name or ""
    if _ABILITY_HEAL_RE.search(name):
        return EffectKind.HEAL
    if _SPEED_RE.search(name):
        return EffectKind.SPEED
    if _STRENGTH_RE.search(name):
        return EffectKind.STRENGTH
    return EffectKind.RANDOM_BUFF


def classify_status_text(text: str) -> str | None:
    """Return the effect type a status-effect description refers to, if any."""
    for effect_type, pattern in _STATUS_TYPE_KEYWORDS:
        if pattern.search(text or ""):
            return effect_type
    return None


@dataclass
class StatusEffect:
    name: str
    type: str  # "speed" or a skill name such as "strength"
    value: float
    time: float  # seconds remaining


class StatusEffectManager:
    """Unordered collection of active effects. Effects of one type stack additively."""

    def __init__(self):
        self.effects: list[StatusEffect] = []

    def apply(self, name: str, effect_type: str, value: float, duration: float) -> StatusEffect:
        effect = StatusEffect(name=name, type=effect_type, value=value, time=duration)
        self.effects.append(effect)
        return effect

    def tick(self, dt: float) -> list[str]:
        """Decay every effect by *dt*. Returns the names of effects that expired."""
        expired: list[str] = []
        for effect in self.effects:
            effect.time -= dt
            if effect.time <= 0:
                expired.append(effect.name)
        if expired:
            self.effects = [e for e in self.effects if e.time > 0]
        return expired

    def total(self, effect_type: str) -> float:
        """Sum of values over active effects of *effect_type*."""
        return sum(e.value for e in self.effects if e.type == effect_type)

    def speed_multiplier(self) -> float:
        return 1.0 + self.total("speed")

    def __len__(self) -> int:
        return len(self.effects)
