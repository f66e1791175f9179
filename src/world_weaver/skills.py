"""Skill checks, hotkey abilities, and the shared effect application rules."""
from __future__ import annotations

from world_weaver.settings import (
    ABILITY_BUFF_DURATION,
    ABILITY_BUFF_VALUE,
    ABILITY_COOLDOWN,
    ABILITY_HEAL,
    ABILITY_RANDOM_BUFF_VALUE,
    ABILITY_SLOTS,
    RANDOM_BUFF_TYPES,
    SKILL_CHECK_OFFSET,
)
from world_weaver.status_effects import EffectKind


def skill_check(base: float, bonus: float, difficulty: float, roll: float) -> bool:
    """Pass iff roll < base + bonus - difficulty + 0.5.

    The 0.5 offset centres the odds: average skill (0.5) against a
    mid-range NPC (0.6) passes about 40% of the time.
    """
    return roll < base + bonus - difficulty + SKILL_CHECK_OFFSET


def perform_skill_check(player, effects, skill: str, difficulty: float, rng) -> bool:
    """Roll a check of the player's *skill*, boosted by matching status effects."""
    base = player.skill_level(skill)
    bonus = effects.total(skill)
    return skill_check(base, bonus, difficulty, rng.random())


def pick_random_buff(rng) -> str:
    return RANDOM_BUFF_TYPES[int(rng.random() * len(RANDOM_BUFF_TYPES))]


def apply_effect(kind: EffectKind, name: str, player, effects, rng, messages, *,
                 heal_amount: int, buff_value: float, random_value: float,
                 duration: float) -> str | None:
    """Apply an item or ability effect.

    Returns the effect type that was buffed, or None for heals and no-ops.
    """
    if kind is EffectKind.HEAL:
        player.heal(heal_amount)
        messages.add(f"Healed {heal_amount} HP")
        return None
    if kind is EffectKind.SPEED:
        buff = "speed"
    elif kind is EffectKind.STRENGTH:
        buff = "strength"
    elif kind is EffectKind.RANDOM_BUFF:
        buff = pick_random_buff(rng)
        buff_value = random_value
    else:
        return None
    effects.apply(name, buff, buff_value, duration)
    return buff


class AbilityBar:
    """The first few catalog abilities, bound to hotkeys 1..N, each with a cooldown."""

    def __init__(self, abilities=(), slots: int = ABILITY_SLOTS):
        self.abilities = list(abilities)[:slots]
        self.cooldowns: dict[str, float] = {ab.id: 0.0 for ab in self.abilities}

    def get(self, index: int):
        if 0 <= index < len(self.abilities):
            return self.abilities[index]
        return None

    def ready(self, ability_id: str) -> bool:
        return self.cooldowns.get(ability_id, 0.0) <= 0

    def tick(self, dt: float) -> None:
        for ability_id, remaining in self.cooldowns.items():
            self.cooldowns[ability_id] = max(0.0, remaining - dt)

    def activate(self, index: int, player, effects, rng, messages) -> bool:
        """Use the ability in slot *index*. Returns True if it fired."""
        ability = self.get(index)
        if ability is None:
            return False
        if not self.ready(ability.id):
            messages.add(f"{ability.name} is on cooldown")
            return False
        apply_effect(
            ability.effect_kind, ability.name, player, effects, rng, messages,
            heal_amount=ABILITY_HEAL,
            buff_value=ABILITY_BUFF_VALUE,
            random_value=ABILITY_RANDOM_BUFF_VALUE,
            duration=ABILITY_BUFF_DURATION,
        )
        self.cooldowns[ability.id] = ABILITY_COOLDOWN
        messages.add(f"Used ability: {ability.name}")
        return True
