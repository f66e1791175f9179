from __future__ import annotations

import math
from dataclasses import dataclass

from world_weaver.settings import (
    CONSUMABLE_BUFF_DURATION,
    CONSUMABLE_BUFF_VALUE,
    CONSUMABLE_HEAL,
    PICKUP_RADIUS,
    PRICE_DEFAULT,
    PRICE_EQUIPMENT,
    PRICE_QUEST,
    SHOP_STOCK_SIZE,
)
from world_weaver.skills import apply_effect


class Inventory:
    """Item ids the player carries. Order is acquisition order; duplicates allowed."""

    def __init__(self, items=()):
        self.items: list[str] = list(items)

    def add(self, item_id: str) -> None:
        self.items.append(item_id)

    def add_unique(self, item_id: str) -> bool:
        """Add *item_id* unless already held. Returns True if it was added."""
        if item_id in self.items:
            return False
        self.items.append(item_id)
        return True

    def remove(self, item_id: str) -> bool:
        """Remove one occurrence. Returns False if the item was not held."""
        try:
            self.items.remove(item_id)
        except ValueError:
            return False
        return True

    def has(self, item_id: str) -> bool:
        return item_id in self.items

    def has_all(self, item_ids) -> bool:
        return all(item_id in self.items for item_id in item_ids)

    def get_count(self, item_id: str) -> int:
        return self.items.count(item_id)

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __contains__(self, item_id: str) -> bool:
        return item_id in self.items


class Equipment:
    """Tracks which item id is equipped in each slot."""
    SLOTS = ("weapon", "armor")

    def __init__(self):
        self.slots: dict[str, str | None] = {s: None for s in self.SLOTS}

    def toggle(self, item) -> bool:
        """Equip *item* in its category's slot, or unequip it if already there.

        Returns True if the item is now equipped. Equipping replaces whatever
        the slot held.
        """
        slot = item.category
        if slot not in self.slots:
            return False
        if self.slots[slot] == item.item_id:
            self.slots[slot] = None
            return False
        self.slots[slot] = item.item_id
        return True

    def is_equipped(self, item_id: str) -> bool:
        return item_id in self.slots.values()

    def unequip_missing(self, inventory) -> list[str]:
        """Empty every slot whose item the inventory no longer holds."""
        dropped = []
        for slot, item_id in self.slots.items():
            if item_id is not None and not inventory.has(item_id):
                self.slots[slot] = None
                dropped.append(item_id)
        return dropped


@dataclass
class WorldObject:
    """A collectible item lying in the world."""
    item_id: str
    x: float
    y: float


def collect_pickups(objects: list[WorldObject], px: float, py: float,
                    radius: float = PICKUP_RADIUS) -> tuple[list[WorldObject], list[WorldObject]]:
    """Split *objects* into (collected, remaining) by distance from (px, py)."""
    collected, remaining = [], []
    for obj in objects:
        if math.hypot(obj.x - px, obj.y - py) < radius:
            collected.append(obj)
        else:
            remaining.append(obj)
    return collected, remaining


def item_price(item) -> int:
    if item.category in ("weapon", "armor"):
        return PRICE_EQUIPMENT
    if item.category == "quest":
        return PRICE_QUEST
    return PRICE_DEFAULT


def use_item(item_id: str, catalog, inventory: Inventory, equipment: Equipment,
             player, effects, rng, messages) -> None:
    """Click behaviour for an inventory entry: toggle gear, consume or refuse.

    Items the player does not hold do nothing.
    """
    item = catalog.item(item_id)
    if item is None or not inventory.has(item_id):
        return
    if item.category in Equipment.SLOTS:
        if equipment.toggle(item):
            messages.add(f"Equipped {item.name}")
        else:
            messages.add(f"Unequipped {item.name}")
    elif item.category == "consumable":
        buffed = apply_effect(
            item.effect_kind, item.name, player, effects, rng, messages,
            heal_amount=CONSUMABLE_HEAL,
            buff_value=CONSUMABLE_BUFF_VALUE,
            random_value=CONSUMABLE_BUFF_VALUE,
            duration=CONSUMABLE_BUFF_DURATION,
        )
        if buffed is not None:
            messages.add(f"Used {item.name}")
        inventory.remove(item_id)
    else:
        messages.add(f"Cannot use {item.name}")


class Shop:
    """A random handful of catalog items, re-drawn every time the shop opens."""

    def __init__(self, catalog_items=()):
        self.catalog_items = list(catalog_items)
        self.stock: list = []

    def restock(self, rng, size: int = SHOP_STOCK_SIZE) -> None:
        count = min(size, len(self.catalog_items))
        self.stock = rng.sample(self.catalog_items, count)

    def purchase(self, item, player, inventory: Inventory, messages) -> bool:
        price = item_price(item)
        if player.gold < price:
            messages.add("Not enough gold")
            return False
        player.gold -= price
        inventory.add(item.item_id)
        self.stock = [s for s in self.stock if s.item_id != item.item_id]
        messages.add(f"Bought {item.name}")
        return True
