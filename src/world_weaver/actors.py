import math
from dataclasses import dataclass, field

from world_weaver.content import PLAYER_SPEAKER
from world_weaver.settings import (
    NPC_DIFFICULTY_MIN,
    NPC_DIFFICULTY_SPAN,
    NPC_SKILLS,
    NPC_WANDER_CHANCE,
    NPC_WANDER_SPEED,
    NPC_ZONE_MARGIN,
    PLAYER_BASE_SPEED,
    PLAYER_MAX_HP,
    PLAYER_START_GOLD,
    PLAYER_START_SKILLS,
    WORLD_TOP,
)


@dataclass
class Player:
    x: float = 0.0
    y: float = 0.0
    base_speed: float = PLAYER_BASE_SPEED
    speed: float = PLAYER_BASE_SPEED
    intent_x: int = 0  # -1, 0 or 1 from held movement keys
    intent_y: int = 0
    hp: int = PLAYER_MAX_HP
    max_hp: int = PLAYER_MAX_HP
    gold: int = PLAYER_START_GOLD
    skills: dict[str, float] = field(default_factory=lambda: dict(PLAYER_START_SKILLS))

    @property
    def vx(self) -> float:
        return self.intent_x * self.speed

    @property
    def vy(self) -> float:
        return self.intent_y * self.speed

    def skill_level(self, skill: str) -> float:
        return self.skills.get(skill, 0.0)

    def heal(self, amount: int) -> int:
        """Restore HP up to the maximum. Returns HP actually restored."""
        before = self.hp
        self.hp = min(self.max_hp, self.hp + amount)
        return self.hp - before

    def take_damage(self, amount: int) -> bool:
        """Apply damage. Returns True if the player fainted."""
        self.hp -= amount
        return self.hp <= 0


@dataclass
class NPC:
    id: str
    dialogue_id: str | None
    x: float
    y: float
    zone_index: int
    skill: str
    difficulty: float
    kind: str = ""
    dx: float = 0.0
    dy: float = 0.0

    @property
    def display_name(self) -> str:
        return display_name(self.id)

    def copy_for_interior(self, x: float, y: float) -> "NPC":
        """The same character, placed inside its house with its own wander state."""
        return NPC(
            id=self.id, dialogue_id=self.dialogue_id, x=x, y=y,
            zone_index=self.zone_index, skill=self.skill,
            difficulty=self.difficulty, kind=self.kind,
        )


def display_name(npc_id: str) -> str:
    """'npc_old_miller' -> 'Old Miller'."""
    name = npc_id[4:] if npc_id.startswith("npc_") else npc_id
    return " ".join(w[:1].upper() + w[1:] for w in name.replace("_", " ").split(" "))


def maybe_change_heading(npc: NPC, rng, chance: float = NPC_WANDER_CHANCE,
                         speed: float = NPC_WANDER_SPEED) -> None:
    if rng.random() < chance:
        angle = rng.random() * math.pi * 2
        npc.dx = math.cos(angle) * speed
        npc.dy = math.sin(angle) * speed


def bounce_within(npc: NPC, min_x: float, max_x: float, min_y: float, max_y: float) -> None:
    """Clamp the NPC to the box and reflect its velocity off any wall it hit."""
    if npc.x < min_x:
        npc.x = min_x
        npc.dx = abs(npc.dx)
    if npc.x > max_x:
        npc.x = max_x
        npc.dx = -abs(npc.dx)
    if npc.y < min_y:
        npc.y = min_y
        npc.dy = abs(npc.dy)
    if npc.y > max_y:
        npc.y = max_y
        npc.dy = -abs(npc.dy)


def wander(npc: NPC, dt: float, rng, bounds, chance: float = NPC_WANDER_CHANCE,
           speed: float = NPC_WANDER_SPEED) -> None:
    """Advance one NPC: occasionally re-aim, move, then bounce inside *bounds*."""
    maybe_change_heading(npc, rng, chance, speed)
    npc.x += npc.dx * dt
    npc.y += npc.dy * dt
    bounce_within(npc, *bounds)


def zone_bounds(zone, bottom: float, margin: float = NPC_ZONE_MARGIN):
    """(min_x, max_x, min_y, max_y) an NPC homed in *zone* may roam."""
    return zone.x + margin, zone.right - margin, WORLD_TOP, bottom - margin


# ---------------------------------------------------------------------------
# NPC creation
# ---------------------------------------------------------------------------

def assign_dialogues(catalog) -> list[tuple[str, str | None, str, str | None]]:
    """Pair NPC ids with dialogue ids. Returns (npc_id, dialogue_id, kind, home_zone).

    With NPCs in the world spec, each takes the dialogue whose opening speaker
    is its id, else the next unclaimed dialogue. Without them, every dialogue
    spawns an NPC named after its opening speaker (or npc_<n>).
    """
    dialogues = catalog.dialogues
    if not catalog.world.npcs:
        result = []
        seen: set[str] = set()
        for idx, dlg in enumerate(dialogues):
            npc_id = f"npc_{idx + 1}"
            first = dlg.first_node
            if first is not None and first.speaker.lower() != PLAYER_SPEAKER:
                npc_id = first.speaker
            if npc_id in seen:
                npc_id = f"{npc_id}_{idx + 1}"
            seen.add(npc_id)
            result.append((npc_id, dlg.id, "", None))
        return result

    by_speaker: dict[str, str] = {}
    for dlg in dialogues:
        first = dlg.first_node
        if first is not None:
            by_speaker.setdefault(first.speaker, dlg.id)
    claimed = {by_speaker[n.id] for n in catalog.world.npcs if n.id in by_speaker}
    unclaimed = [d.id for d in dialogues if d.id not in claimed]

    result = []
    for npc_def in catalog.world.npcs:
        dialogue_id = by_speaker.get(npc_def.id)
        if dialogue_id is None and unclaimed:
            dialogue_id = unclaimed.pop(0)
        result.append((npc_def.id, dialogue_id, npc_def.kind, npc_def.home_zone))
    return result


def make_npcs(catalog, zones, screen_height: float, rng) -> list[NPC]:
    """Create NPCs with a random skill and difficulty, spread across zones."""
    npcs = []
    zone_ids = [z.id for z in zones]
    zone_count = len(zones)
    if zone_count == 0:
        return npcs
    for idx, (npc_id, dialogue_id, kind, home_zone) in enumerate(assign_dialogues(catalog)):
        if home_zone in zone_ids:
            zone_index = zone_ids.index(home_zone)
        else:
            zone_index = idx % zone_count
        zone = zones[zone_index]
        npcs.append(NPC(
            id=npc_id,
            dialogue_id=dialogue_id,
            x=zone.x + zone.width * 0.5,
            y=screen_height * 0.4 + rng.random() * screen_height * 0.1,
            zone_index=zone_index,
            skill=NPC_SKILLS[int(rng.random() * len(NPC_SKILLS))],
            difficulty=NPC_DIFFICULTY_MIN + rng.random() * NPC_DIFFICULTY_SPAN,
            kind=kind,
        ))
    return npcs
