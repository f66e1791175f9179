"""Quest state machine: start, item spawning, and skill-checked deliveries."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from world_weaver.items import WorldObject
from world_weaver.settings import SKILL_CHECK_FAIL_DAMAGE, WORLD_TOP
from world_weaver.skills import perform_skill_check

logger = logging.getLogger(__name__)

NOT_STARTED = "not-started"
IN_PROGRESS = "in-progress"
COMPLETED = "completed"

# Quest items never spawn closer than this to the bottom of the world
SPAWN_BOTTOM_MARGIN = 40
# Re-rolls allowed when a spawn point lands inside an obstacle or building
SPAWN_ATTEMPTS = 10


@dataclass
class QuestState:
    id: str
    title: str
    is_main: bool
    steps: tuple  # QuestStepDef records
    status: str = NOT_STARTED
    current_step: int = 0
    step_assignments: list[str | None] = field(default_factory=list)

    @property
    def step(self):
        """The step awaiting delivery, or None once the quest is finished."""
        if self.status != IN_PROGRESS or self.current_step >= len(self.steps):
            return None
        return self.steps[self.current_step]

    @property
    def assignee(self) -> str | None:
        if self.step is None:
            return None
        return self.step_assignments[self.current_step]


def assign_steps(quest_index: int, step_count: int, npc_ids: list[str]) -> list[str | None]:
    """Round-robin: step i of quest q goes to npcs[(q + i) % n]."""
    if not npc_ids:
        return [None] * step_count
    return [npc_ids[(quest_index + i) % len(npc_ids)] for i in range(step_count)]


class QuestLog:
    """Runtime state for every catalog quest.

    Operations that touch the wider world take the owning Simulation, which
    provides the player, inventory, objects, zones and RNG.
    """

    def __init__(self, quest_defs=(), npc_ids=()):
        npc_ids = list(npc_ids)
        self.quests: list[QuestState] = [
            QuestState(
                id=qdef.id,
                title=qdef.title,
                is_main=qdef.is_main,
                steps=qdef.steps,
                step_assignments=assign_steps(qi, len(qdef.steps), npc_ids),
            )
            for qi, qdef in enumerate(quest_defs)
        ]
        self._by_id = {}
        for quest in self.quests:
            self._by_id.setdefault(quest.id, quest)

    def get(self, quest_id: str) -> QuestState | None:
        return self._by_id.get(quest_id)

    def __iter__(self):
        return iter(self.quests)

    def __len__(self) -> int:
        return len(self.quests)

    def start(self, quest_id: str, sim) -> bool:
        """Move a not-started quest to in-progress and spawn its first items."""
        quest = self.get(quest_id)
        if quest is None:
            logger.debug("Ignoring start of unknown quest %r", quest_id)
            return False
        if quest.status != NOT_STARTED:
            sim.messages.add(f"{quest.title} is already started")
            return False
        quest.current_step = 0
        if not quest.steps:
            # Nothing to deliver
            quest.status = COMPLETED
            logger.info("Quest %s has no steps; marked completed", quest.id)
            return True
        quest.status = IN_PROGRESS
        sim.messages.add(f"Started quest: {quest.title}")
        logger.info("Started quest %s", quest.id)
        self.spawn_items_for_step(quest, 0, sim)
        return True

    def spawn_items_for_step(self, quest: QuestState, step_index: int, sim) -> list[WorldObject]:
        """Drop the step's required items somewhere in the world.

        Items a dialogue can grant, items the player holds and items already
        lying on the ground are skipped, so calling this twice spawns nothing
        new the second time.
        """
        if not 0 <= step_index < len(quest.steps):
            return []
        step = quest.steps[step_index]
        on_ground = {obj.item_id for obj in sim.objects}
        spawned = []
        for item_id in step.requires_item_ids:
            if item_id in sim.catalog.dialogue_granted_items:
                continue
            if sim.inventory.has(item_id) or item_id in on_ground:
                continue
            x, y = self._spawn_point(sim)
            obj = WorldObject(item_id=item_id, x=x, y=y)
            sim.objects.append(obj)
            on_ground.add(item_id)
            spawned.append(obj)
        return spawned

    @staticmethod
    def _spawn_point(sim) -> tuple[float, float]:
        """Random point in a random zone, re-rolled while it lands in a solid rect."""
        solids = list(sim.obstacles) + list(sim.buildings)
        for _ in range(SPAWN_ATTEMPTS):
            zone = sim.zones[int(sim.rng.random() * len(sim.zones))]
            x = zone.x + sim.rng.random() * zone.width
            y = WORLD_TOP + sim.rng.random() * (sim.world_bottom - SPAWN_BOTTOM_MARGIN - WORLD_TOP)
            if not any(rect.contains(x, y) for rect in solids):
                break
        else:
            logger.debug("No free spawn point after %d attempts", SPAWN_ATTEMPTS)
        return x, y

    def deliverable_for(self, npc_id: str, inventory) -> QuestState | None:
        """First in-progress quest whose current step this NPC accepts and the player can fill."""
        for quest in self.quests:
            if quest.assignee is None or quest.assignee != npc_id:
                continue
            if inventory.has_all(quest.step.requires_item_ids):
                return quest
        return None

    def deliver(self, npc, sim) -> bool:
        """Hand the current step's items to *npc*. Returns True if a step advanced.

        One skill check against the NPC is rolled; failing it costs HP but the
        step still advances.
        """
        quest = self.deliverable_for(npc.id, sim.inventory) if npc is not None else None
        if quest is None:
            sim.messages.add("You do not have the required items")
            return False
        step = quest.step
        if perform_skill_check(sim.player, sim.effects, npc.skill, npc.difficulty, sim.rng):
            sim.messages.add(f"Skill check passed ({npc.skill})")
        else:
            sim.messages.add(f"Skill check failed ({npc.skill})")
            sim.damage(SKILL_CHECK_FAIL_DAMAGE)
        for item_id in step.requires_item_ids:
            sim.inventory.remove(item_id)
        sim.equipment.unequip_missing(sim.inventory)

        quest.current_step += 1
        if quest.current_step >= len(quest.steps):
            quest.status = COMPLETED
            sim.player.gold += sim.config.quest_reward_gold
            sim.messages.add(f"Quest completed: {quest.title}")
            logger.info("Completed quest %s", quest.id)
        else:
            sim.player.gold += sim.config.step_reward_gold
            sim.messages.add(f"Step completed: {step.goal}")
            logger.info("Quest %s advanced to step %d", quest.id, quest.current_step)
            self.spawn_items_for_step(quest, quest.current_step, sim)
        return True
