"""Screen layout for panels and the bottom button band.

Everything here is pure: given a Simulation it returns rectangles, text and
click targets. The renderer draws these elements and the controls module
hit-tests against the very same list, so what you see is what you click.
"""
from __future__ import annotations

import textwrap
from dataclasses import dataclass, field

from world_weaver.actors import display_name
from world_weaver.items import item_price
from world_weaver.quests import NOT_STARTED
from world_weaver.settings import ABILITY_SLOTS, SAFE_BOTTOM, UI_ROW_HEIGHT, UI_ROW_PADDING
from world_weaver.spatial import Rect

# Click target kinds
START_QUEST = "start_quest"
USE_ITEM = "use_item"
PURCHASE = "purchase"
OPTION = "option"
DELIVER = "deliver"
CLOSE_TALK = "close_talk"
TOGGLE_OVERLAY = "toggle_overlay"
ABILITY = "ability"

LINE_HEIGHT = 16
TITLE_OFFSET = 10
CONTENT_OFFSET = 40
TALK_BUTTON_HEIGHT = 40
TALK_BUTTON_SPACING = 46
TALK_LINE_HEIGHT = 18
# Rough glyph width used to wrap dialogue text without a font
APPROX_CHAR_WIDTH = 7

OVERLAY_BUTTONS = (("inventory", "Inventory [I]"), ("quests", "Quests [Q]"),
                   ("status", "Status [C]"), ("shop", "Shop [P]"))
OVERLAY_BUTTON_WIDTH = 130


@dataclass
class UiElement:
    rect: Rect
    text: str = ""
    style: str = "text"  # "title", "text", "dim", "box" or "button"
    kind: str | None = None  # set on clickable elements
    value: object = None

    @property
    def clickable(self) -> bool:
        return self.kind is not None


@dataclass
class Panel:
    rect: Rect
    elements: list[UiElement] = field(default_factory=list)

    def targets(self) -> list[UiElement]:
        return [e for e in self.elements if e.clickable]


def element_at(elements, x: float, y: float) -> UiElement | None:
    for element in elements:
        if element.clickable and element.rect.contains(x, y):
            return element
    return None


def centered_panel(screen_w: float, screen_h: float, max_w: float, max_h: float) -> Rect:
    """A panel centred in the world area above the bottom band."""
    w = min(max_w, screen_w - 40)
    h = min(max_h, screen_h - SAFE_BOTTOM - 40)
    return Rect((screen_w - w) / 2, (screen_h - SAFE_BOTTOM - h) / 2, w, h)


class _Cursor:
    """Accumulates text rows down a panel."""

    def __init__(self, panel: Panel, title: str):
        self.panel = panel
        self.x = panel.rect.x + 16
        self.y = panel.rect.y + TITLE_OFFSET
        self.width = panel.rect.width - 32
        self.add(title, style="title", height=30)

    def add(self, text: str, style: str = "text", indent: int = 0, height: int = LINE_HEIGHT,
            kind: str | None = None, value=None, width: float | None = None) -> UiElement:
        element = UiElement(
            Rect(self.x + indent, self.y, width if width is not None else self.width - indent, height),
            text=text, style=style, kind=kind, value=value,
        )
        self.panel.elements.append(element)
        self.y += height
        return element

    def gap(self, amount: int = 8) -> None:
        self.y += amount


# ---------------------------------------------------------------------------
# Overlays
# ---------------------------------------------------------------------------

def quests_panel(sim) -> Panel:
    panel = Panel(centered_panel(sim.screen_width, sim.screen_height, 420, 500))
    cur = _Cursor(panel, "Quests")
    for quest in sim.quests:
        status = quest.status.replace("-", " ")
        cur.add(f"{quest.title} ({status})")
        if quest.status == NOT_STARTED:
            cur.add("Start", style="button", height=28, width=80,
                    kind=START_QUEST, value=quest.id)
            cur.gap()
        else:
            step = quest.step
            if step is not None:
                cur.add(f"> {step.goal}", style="dim")
                assignee = quest.assignee
                cur.add(f"Deliver to: {display_name(assignee) if assignee else 'nobody'}", style="dim")
                if step.requires_item_ids:
                    cur.add("Required items:", style="dim")
                    for item_id in step.requires_item_ids:
                        cur.add(f"- {sim.catalog.item_name(item_id)}", style="dim", indent=8)
            cur.gap()
        cur.gap()
    return panel


def inventory_panel(sim) -> Panel:
    panel = Panel(centered_panel(sim.screen_width, sim.screen_height, 380, 500))
    cur = _Cursor(panel, "Inventory")
    cur.add("Equipped:", style="dim")
    for slot, item_id in sim.equipment.slots.items():
        name = sim.catalog.item_name(item_id) if item_id else "(none)"
        cur.add(f"{slot}: {name}", indent=8)
    cur.gap()
    cur.add("Items:", style="dim")
    for item_id in sim.inventory:
        item = sim.catalog.item(item_id)
        category = item.category if item else "unknown"
        label = f"{sim.catalog.item_name(item_id)} [{category}]"
        if sim.equipment.is_equipped(item_id):
            label += " (equipped)"
        cur.add(label, indent=8, kind=USE_ITEM, value=item_id)
    return panel


def status_panel(sim) -> Panel:
    panel = Panel(centered_panel(sim.screen_width, sim.screen_height, 360, 420))
    cur = _Cursor(panel, "Status")
    p = sim.player
    cur.add(f"HP: {p.hp}/{p.max_hp}")
    cur.add(f"Gold: {p.gold}")
    cur.add(f"Speed: {p.speed:.0f}")
    cur.add("Skills:")
    for skill, level in p.skills.items():
        bonus = sim.effects.total(skill)
        suffix = f" (+{bonus:.2f})" if bonus else ""
        cur.add(f"- {skill}: {level:.2f}{suffix}", indent=8)
    cur.gap()
    cur.add("Active Effects:")
    for effect in sim.effects.effects:
        cur.add(f"- {effect.name} ({effect.time:.1f}s)", indent=8)
        sdef = sim.catalog.status_effect_named(effect.name)
        if sdef is not None and sdef.effect:
            cur.add(sdef.effect, style="dim", indent=16)
    return panel


def shop_panel(sim) -> Panel:
    panel = Panel(centered_panel(sim.screen_width, sim.screen_height, 380, 500))
    cur = _Cursor(panel, "Shop")
    cur.add(f"Gold: {sim.player.gold}")
    cur.gap(4)
    cur.add("Items for sale:", style="dim")
    for item in sim.shop.stock:
        price = item_price(item)
        style = "text" if sim.player.gold >= price else "dim"
        cur.add(f"{item.name} [{item.category}] - {price}g", style=style, indent=8,
                kind=PURCHASE, value=item.item_id)
    return panel


OVERLAY_LAYOUTS = {
    "quests": quests_panel,
    "inventory": inventory_panel,
    "status": status_panel,
    "shop": shop_panel,
}


def overlay_panel(sim) -> Panel | None:
    layout = OVERLAY_LAYOUTS.get(sim.open_overlay)
    return layout(sim) if layout else None


# ---------------------------------------------------------------------------
# Conversation
# ---------------------------------------------------------------------------

def wrap_text(text: str, width: float) -> list[str]:
    chars = max(10, int(width // APPROX_CHAR_WIDTH))
    return textwrap.wrap(text, chars) or [""]


def talk_panel(sim) -> Panel | None:
    session = sim.talk
    if session is None:
        return None
    node = session.node
    deliverable = sim.can_deliver()

    w = min(460, sim.screen_width - 40)
    lines = wrap_text(node.text, w - 60)
    text_height = 60 + len(lines) * TALK_LINE_HEIGHT
    button_count = len(node.options) + (1 if deliverable else 0) + 1
    h = text_height + button_count * TALK_BUTTON_SPACING + 60
    x = (sim.screen_width - w) / 2
    y = sim.screen_height - SAFE_BOTTOM - h - 20
    panel = Panel(Rect(x, y, w, h))

    panel.elements.append(UiElement(Rect(x + 16, y + 12, w - 32, 24),
                                    text=display_name(session.speaker), style="title"))
    panel.elements.append(UiElement(Rect(x + 14, y + 40, w - 28, text_height), style="box"))
    ty = y + 50
    for line in lines:
        panel.elements.append(UiElement(Rect(x + 24, ty, w - 48, TALK_LINE_HEIGHT), text=line))
        ty += TALK_LINE_HEIGHT

    oy = y + 40 + text_height + 10
    for index, option in enumerate(node.options):
        panel.elements.append(UiElement(Rect(x + 14, oy, w - 28, TALK_BUTTON_HEIGHT),
                                        text=option.choice_text, style="button",
                                        kind=OPTION, value=index))
        oy += TALK_BUTTON_SPACING
    if deliverable:
        panel.elements.append(UiElement(Rect(x + 14, oy, w - 28, TALK_BUTTON_HEIGHT),
                                        text="Deliver items", style="button", kind=DELIVER))
        oy += TALK_BUTTON_SPACING
    panel.elements.append(UiElement(Rect(x + 14, oy, w - 28, TALK_BUTTON_HEIGHT),
                                    text="Close", style="button", kind=CLOSE_TALK))
    return panel


# ---------------------------------------------------------------------------
# Bottom band
# ---------------------------------------------------------------------------

def bottom_bar(sim) -> list[UiElement]:
    """Ability slots on the first row, overlay toggles on the second."""
    top = sim.screen_height - SAFE_BOTTOM + UI_ROW_PADDING
    elements = []
    x = UI_ROW_PADDING
    for index in range(ABILITY_SLOTS):
        ability = sim.abilities.get(index)
        label = f"{index + 1}"
        if ability is not None:
            remaining = sim.abilities.cooldowns.get(ability.id, 0.0)
            label = f"{index + 1} {ability.name}"
            if remaining > 0:
                label += f" ({remaining:.0f}s)"
        elements.append(UiElement(Rect(x, top, UI_ROW_HEIGHT * 2, UI_ROW_HEIGHT), text=label,
                                  style="button", kind=ABILITY if ability else None, value=index))
        x += UI_ROW_HEIGHT * 2 + UI_ROW_PADDING

    y = top + UI_ROW_HEIGHT + UI_ROW_PADDING
    x = UI_ROW_PADDING
    for name, label in OVERLAY_BUTTONS:
        elements.append(UiElement(Rect(x, y, OVERLAY_BUTTON_WIDTH, UI_ROW_HEIGHT), text=label,
                                  style="button", kind=TOGGLE_OVERLAY, value=name))
        x += OVERLAY_BUTTON_WIDTH + UI_ROW_PADDING
    return elements
