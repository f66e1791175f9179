"""The single owner of all runtime state for one play session.

Nothing here touches the pygame display, so a Simulation can be built and
stepped headless from a Catalog alone.
"""
from __future__ import annotations

import enum
import logging
import math
import random

from world_weaver.actors import NPC, Player, make_npcs, wander, zone_bounds
from world_weaver.config import GameConfig
from world_weaver.dialogue import DialogueEngine
from world_weaver.influence import InfluenceTracker
from world_weaver.items import Equipment, Inventory, Shop, collect_pickups, use_item
from world_weaver.messages import MessageLog
from world_weaver.quests import QuestLog
from world_weaver.settings import (
    FAINT_GOLD_PENALTY,
    INTERIOR_WANDER_CHANCE,
    INTERIOR_WANDER_SPEED,
    NPC_PICK_RADIUS,
    PLAYER_HALF_EXTENT,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    WORLD_TOP,
)
from world_weaver.skills import AbilityBar
from world_weaver.spatial import (
    Interior,
    build_buildings,
    build_obstacles,
    build_zones,
    clamp,
    interior_size,
    layout_zones,
    resolve_collisions,
    world_bottom,
)
from world_weaver.status_effects import StatusEffectManager

logger = logging.getLogger(__name__)

OVERLAYS = ("inventory", "quests", "status", "shop")

# Interior occupants start a quarter of the room above centre
OCCUPANT_START_FRACTION = 0.25
# Interior occupants keep this far from the side and top/bottom walls
OCCUPANT_WALL_X = 20
OCCUPANT_WALL_Y = 40


class Mode(enum.Enum):
    """Which layer receives pointer input, highest priority first."""
    OVERLAY = "overlay"
    TALK = "talk"
    INTERIOR = "interior"
    WORLD = "world"


class Simulation:
    def __init__(self, catalog, config: GameConfig | None = None,
                 screen_size: tuple[int, int] = (SCREEN_WIDTH, SCREEN_HEIGHT),
                 rng=None):
        self.catalog = catalog
        self.config = config or GameConfig()
        self.rng = rng if rng is not None else random.Random(self.config.seed)
        self.screen_width, self.screen_height = screen_size

        # World
        self.zones = build_zones(catalog.world.zones, self.screen_width)
        self.npcs: list[NPC] = make_npcs(catalog, self.zones, self.screen_height, self.rng)
        self.buildings = build_buildings(self.npcs, self.zones, self.screen_height, self.rng)
        self.obstacles = build_obstacles(self.zones, self.screen_height, self.rng)
        self.interiors: list[Interior] = self._build_interiors()
        self.objects = []  # WorldObject pickups

        # Player
        self.player = Player(x=self.screen_width / 2, y=self.world_bottom / 2,
                             gold=self.config.start_gold)
        self.effects = StatusEffectManager()
        self.abilities = AbilityBar(catalog.abilities)
        self.inventory = Inventory()
        self.equipment = Equipment()
        self.messages = MessageLog()
        self.influence = InfluenceTracker()

        self.quests = QuestLog(catalog.quests, [npc.id for npc in self.npcs])
        self.dialogue = DialogueEngine(
            catalog, self.inventory, self.player, self.messages, self.influence,
            grant_gold=self.config.grant_reward_gold,
            repeat_rewards=self.config.reward_repeat_grants,
        )
        self.shop = Shop(catalog.items)

        # Interaction state
        self.talk = None  # DialogueSession
        self.open_overlay: str | None = None
        self.current_interior: Interior | None = None
        self.previous_position: tuple[float, float] = (self.player.x, self.player.y)

        logger.info("Simulation ready: %d zones, %d NPCs, %d quests",
                    len(self.zones), len(self.npcs), len(self.quests))

    def _build_interiors(self) -> list[Interior]:
        width, height = interior_size(self.screen_width, self.screen_height)
        by_id = {npc.id: npc for npc in self.npcs}
        interiors = []
        for idx, building in enumerate(self.buildings):
            npc = by_id[building.npc_id]
            interiors.append(Interior(
                id=f"interior_{idx}",
                npc_id=npc.id,
                width=width,
                height=height,
                occupant=npc.copy_for_interior(0.0, -height * OCCUPANT_START_FRACTION),
            ))
        return interiors

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    @property
    def world_bottom(self) -> float:
        return world_bottom(self.screen_height)

    @property
    def in_interior(self) -> bool:
        return self.current_interior is not None

    @property
    def mode(self) -> Mode:
        if self.open_overlay is not None:
            return Mode.OVERLAY
        if self.talk is not None:
            return Mode.TALK
        if self.in_interior:
            return Mode.INTERIOR
        return Mode.WORLD

    def npc(self, npc_id: str | None) -> NPC | None:
        for npc in self.npcs:
            if npc.id == npc_id:
                return npc
        return None

    def interior_for(self, npc_id: str) -> Interior | None:
        for interior in self.interiors:
            if interior.npc_id == npc_id:
                return interior
        return None

    def pick_npc_at(self, x: float, y: float) -> NPC | None:
        """NPC within pick radius of (x, y) in the current space's coordinates."""
        if self.in_interior:
            candidates = [self.current_interior.occupant]
        else:
            candidates = self.npcs
        for npc in candidates:
            if npc is not None and math.hypot(npc.x - x, npc.y - y) < NPC_PICK_RADIUS:
                return npc
        return None

    # ------------------------------------------------------------------
    # Frame update
    # ------------------------------------------------------------------

    def update(self, dt: float) -> None:
        """Advance the session by *dt* seconds (clamped)."""
        dt = min(dt, self.config.max_frame_dt)
        p = self.player
        p.x += p.vx * dt
        p.y += p.vy * dt
        if self.in_interior:
            self._update_interior(dt)
        else:
            self._update_world(dt)

        self.messages.tick(dt)
        self.abilities.tick(dt)
        self.effects.tick(dt)
        p.speed = p.base_speed * self.effects.speed_multiplier()

    def _update_world(self, dt: float) -> None:
        p = self.player
        half = PLAYER_HALF_EXTENT
        p.x = clamp(p.x, half, self.screen_width - half)
        p.y = clamp(p.y, WORLD_TOP, self.world_bottom - half)

        bottom = self.world_bottom
        for npc in self.npcs:
            wander(npc, dt, self.rng, zone_bounds(self.zones[npc.zone_index], bottom))

        p.x, p.y = resolve_collisions(p.x, p.y, self.obstacles, self.buildings, half)

        collected, remaining = collect_pickups(self.objects, p.x, p.y)
        self.objects[:] = remaining
        for obj in collected:
            if self.inventory.add_unique(obj.item_id):
                self.messages.add(f"Collected {self.catalog.item_name(obj.item_id)}")

    def _update_interior(self, dt: float) -> None:
        interior = self.current_interior
        p = self.player
        p.x, p.y = interior.clamp_point(p.x, p.y)
        occupant = interior.occupant
        if occupant is not None:
            half_w = interior.width / 2 - OCCUPANT_WALL_X
            half_h = interior.height / 2 - OCCUPANT_WALL_Y
            wander(occupant, dt, self.rng, (-half_w, half_w, -half_h, half_h),
                   chance=INTERIOR_WANDER_CHANCE, speed=INTERIOR_WANDER_SPEED)

    def resize(self, width: int, height: int) -> None:
        self.screen_width, self.screen_height = width, height
        layout_zones(self.zones, width)

    # ------------------------------------------------------------------
    # Buildings
    # ------------------------------------------------------------------

    def enter_building(self, building) -> bool:
        interior = self.interior_for(building.npc_id)
        if interior is None:
            return False
        self.previous_position = (self.player.x, self.player.y)
        self.current_interior = interior
        self.player.x, self.player.y = interior.spawn
        return True

    def exit_building(self) -> bool:
        if not self.in_interior:
            return False
        self.current_interior = None
        self.player.x, self.player.y = self.previous_position
        return True

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------

    def damage(self, amount: int) -> None:
        """Hurt the player; at zero HP they faint and wake at the world centre."""
        if not self.player.take_damage(amount):
            return
        p = self.player
        p.hp = p.max_hp
        p.gold = max(0, p.gold - FAINT_GOLD_PENALTY)
        self.current_interior = None
        self.talk = None
        p.x, p.y = self.screen_width / 2, self.world_bottom / 2
        self.messages.add("You fainted! Lost some gold.")
        logger.info("Player fainted")

    # ------------------------------------------------------------------
    # Conversation
    # ------------------------------------------------------------------

    def start_talk(self, npc_id: str) -> bool:
        npc = self.npc(npc_id)
        self.talk = self.dialogue.start(npc)
        return self.talk is not None

    def choose_option(self, index: int) -> None:
        if self.talk is not None:
            self.talk = self.dialogue.choose(self.talk, index)

    def can_deliver(self) -> bool:
        if self.talk is None:
            return False
        return self.quests.deliverable_for(self.talk.npc_id, self.inventory) is not None

    def deliver(self) -> bool:
        if self.talk is None:
            return False
        return self.quests.deliver(self.npc(self.talk.npc_id), self)

    def close_talk(self) -> None:
        self.talk = None

    # ------------------------------------------------------------------
    # Player actions
    # ------------------------------------------------------------------

    def start_quest(self, quest_id: str) -> bool:
        return self.quests.start(quest_id, self)

    def use_item(self, item_id: str) -> None:
        use_item(item_id, self.catalog, self.inventory, self.equipment,
                 self.player, self.effects, self.rng, self.messages)

    def purchase(self, item_id: str) -> bool:
        for item in self.shop.stock:
            if item.item_id == item_id:
                return self.shop.purchase(item, self.player, self.inventory, self.messages)
        return False

    def activate_ability(self, index: int) -> bool:
        return self.abilities.activate(index, self.player, self.effects, self.rng, self.messages)

    def toggle_overlay(self, name: str) -> None:
        if name not in OVERLAYS:
            return
        self.open_overlay = None if self.open_overlay == name else name
        if self.open_overlay == "shop":
            self.shop.restock(self.rng, self.config.shop_stock_size)

    def close_overlay(self) -> None:
        self.open_overlay = None
