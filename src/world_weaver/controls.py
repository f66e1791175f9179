"""Input handling: pointer hit-testing, the (mode, hit) -> Action table, and keys.

Pointer input goes through three separate steps so each can be tested alone:

    hit = hit_test(sim, x, y)          # what is under the pointer
    action = dispatch(sim.mode, hit)   # what that means in the current mode
    apply_action(sim, action)          # do it
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

import pygame

from world_weaver import ui_layout
from world_weaver.simulation import Mode

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Hits
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class UiHit:
    kind: str
    value: object = None


@dataclass(frozen=True)
class DoorHit:
    building_id: str


@dataclass(frozen=True)
class InteriorDoorHit:
    pass


@dataclass(frozen=True)
class NpcHit:
    npc_id: str


@dataclass(frozen=True)
class NoHit:
    pass


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EnterBuilding:
    building_id: str


@dataclass(frozen=True)
class ExitBuilding:
    pass


@dataclass(frozen=True)
class StartTalk:
    npc_id: str


@dataclass(frozen=True)
class SelectOption:
    index: int


@dataclass(frozen=True)
class Deliver:
    pass


@dataclass(frozen=True)
class CloseTalk:
    pass


@dataclass(frozen=True)
class StartQuest:
    quest_id: str


@dataclass(frozen=True)
class UseItem:
    item_id: str


@dataclass(frozen=True)
class Purchase:
    item_id: str


@dataclass(frozen=True)
class CloseOverlay:
    pass


@dataclass(frozen=True)
class ToggleOverlay:
    name: str


@dataclass(frozen=True)
class ActivateAbility:
    index: int


@dataclass(frozen=True)
class NoAction:
    pass


# ---------------------------------------------------------------------------
# Hit testing
# ---------------------------------------------------------------------------

def interior_origin(sim) -> tuple[float, float]:
    """Screen position of an interior's local (0, 0)."""
    return sim.screen_width / 2, sim.world_bottom / 2


def _ui_hit(elements, x: float, y: float):
    element = ui_layout.element_at(elements, x, y)
    if element is None:
        return None
    return UiHit(element.kind, element.value)


def hit_test(sim, x: float, y: float):
    """Classify what lies under screen point (x, y) for the current mode."""
    mode = sim.mode
    if mode is Mode.OVERLAY:
        panel = ui_layout.overlay_panel(sim)
        hit = _ui_hit(panel.elements, x, y) if panel else None
        return hit or NoHit()
    if mode is Mode.TALK:
        panel = ui_layout.talk_panel(sim)
        hit = _ui_hit(panel.elements, x, y) if panel else None
        return hit or NoHit()

    hit = _ui_hit(ui_layout.bottom_bar(sim), x, y)
    if hit is not None:
        return hit

    if mode is Mode.INTERIOR:
        ox, oy = interior_origin(sim)
        lx, ly = x - ox, y - oy
        if sim.current_interior.door_rect().contains(lx, ly):
            return InteriorDoorHit()
        npc = sim.pick_npc_at(lx, ly)
        return NpcHit(npc.id) if npc else NoHit()

    for building in sim.buildings:
        if building.door_rect().contains(x, y):
            return DoorHit(building.id)
    npc = sim.pick_npc_at(x, y)
    return NpcHit(npc.id) if npc else NoHit()


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

_OVERLAY_TARGETS = {
    ui_layout.START_QUEST: StartQuest,
    ui_layout.USE_ITEM: UseItem,
    ui_layout.PURCHASE: Purchase,
}

_BAR_TARGETS = {
    ui_layout.TOGGLE_OVERLAY: ToggleOverlay,
    ui_layout.ABILITY: ActivateAbility,
}


def dispatch(mode: Mode, hit):
    """Map a hit to the action it triggers in *mode*.

    A click that lands on nothing closes whatever panel is open.
    """
    if mode is Mode.OVERLAY:
        if isinstance(hit, UiHit) and hit.kind in _OVERLAY_TARGETS:
            return _OVERLAY_TARGETS[hit.kind](hit.value)
        return CloseOverlay()

    if mode is Mode.TALK:
        if isinstance(hit, UiHit):
            if hit.kind == ui_layout.OPTION:
                return SelectOption(hit.value)
            if hit.kind == ui_layout.DELIVER:
                return Deliver()
        return CloseTalk()

    if isinstance(hit, UiHit) and hit.kind in _BAR_TARGETS:
        return _BAR_TARGETS[hit.kind](hit.value)
    if isinstance(hit, NpcHit):
        return StartTalk(hit.npc_id)
    if mode is Mode.INTERIOR and isinstance(hit, InteriorDoorHit):
        return ExitBuilding()
    if mode is Mode.WORLD and isinstance(hit, DoorHit):
        return EnterBuilding(hit.building_id)
    return NoAction()


def apply_action(sim, action) -> None:
    if isinstance(action, EnterBuilding):
        for building in sim.buildings:
            if building.id == action.building_id:
                sim.enter_building(building)
                break
    elif isinstance(action, ExitBuilding):
        sim.exit_building()
    elif isinstance(action, StartTalk):
        sim.start_talk(action.npc_id)
    elif isinstance(action, SelectOption):
        sim.choose_option(action.index)
    elif isinstance(action, Deliver):
        sim.deliver()
    elif isinstance(action, CloseTalk):
        sim.close_talk()
    elif isinstance(action, StartQuest):
        sim.start_quest(action.quest_id)
    elif isinstance(action, UseItem):
        sim.use_item(action.item_id)
    elif isinstance(action, Purchase):
        sim.purchase(action.item_id)
    elif isinstance(action, CloseOverlay):
        sim.close_overlay()
    elif isinstance(action, ToggleOverlay):
        sim.toggle_overlay(action.name)
    elif isinstance(action, ActivateAbility):
        sim.activate_ability(action.index)


def pointer_down(sim, x: float, y: float):
    """Full pointer pipeline. Returns the action that was applied."""
    action = dispatch(sim.mode, hit_test(sim, x, y))
    logger.debug("Pointer (%d, %d) -> %s", x, y, action)
    apply_action(sim, action)
    return action


# ---------------------------------------------------------------------------
# Keyboard
# ---------------------------------------------------------------------------

MOVE_KEYS = {
    pygame.K_LEFT: (-1, 0), pygame.K_a: (-1, 0),
    pygame.K_RIGHT: (1, 0), pygame.K_d: (1, 0),
    pygame.K_UP: (0, -1), pygame.K_w: (0, -1),
    pygame.K_DOWN: (0, 1), pygame.K_s: (0, 1),
}

ABILITY_KEYS = {
    pygame.K_1: 0, pygame.K_2: 1, pygame.K_3: 2, pygame.K_4: 3, pygame.K_5: 4,
}

OVERLAY_KEYS = {
    pygame.K_i: "inventory",
    pygame.K_q: "quests",
    pygame.K_c: "status",
    pygame.K_p: "shop",
}


def key_down(sim, key: int) -> None:
    p = sim.player
    if key in MOVE_KEYS:
        dx, dy = MOVE_KEYS[key]
        if dx:
            p.intent_x = dx
        if dy:
            p.intent_y = dy
    elif key in ABILITY_KEYS:
        sim.activate_ability(ABILITY_KEYS[key])
    elif key in OVERLAY_KEYS:
        sim.toggle_overlay(OVERLAY_KEYS[key])
    elif key == pygame.K_ESCAPE:
        if sim.open_overlay is not None:
            sim.close_overlay()
        else:
            sim.close_talk()


def key_up(sim, key: int) -> None:
    """Releasing a direction stops movement only if still heading that way."""
    if key not in MOVE_KEYS:
        return
    p = sim.player
    dx, dy = MOVE_KEYS[key]
    if dx and p.intent_x == dx:
        p.intent_x = 0
    if dy and p.intent_y == dy:
        p.intent_y = 0
