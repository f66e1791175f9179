import random

from world_weaver.items import (
    Equipment,
    Inventory,
    Shop,
    WorldObject,
    collect_pickups,
    item_price,
)


def test_inventory_list_semantics():
    inv = Inventory()
    inv.add("a")
    inv.add("a")
    assert not inv.add_unique("a")
    assert inv.add_unique("b")
    assert inv.get_count("a") == 2
    assert inv.remove("a")
    assert inv.get_count("a") == 1
    assert not inv.remove("zzz")
    assert inv.has_all(["a", "b"])
    assert inv.has_all([])
    assert list(inv) == ["a", "b"]


def test_prices(catalog):
    assert item_price(catalog.item("sword")) == 30
    assert item_price(catalog.item("vest")) == 30
    assert item_price(catalog.item("token")) == 10
    assert item_price(catalog.item("potion")) == 20


def test_equipment_toggle(catalog):
    eq = Equipment()
    sword = catalog.item("sword")
    assert eq.toggle(sword)
    assert eq.slots["weapon"] == "sword"
    assert not eq.toggle(sword)
    assert eq.slots["weapon"] is None
    assert not eq.toggle(catalog.item("potion"))


def test_equipping_second_weapon_replaces_first(sim):
    sim.inventory.add("sword")
    sim.inventory.add("dagger")
    sim.use_item("sword")
    sim.use_item("dagger")
    assert sim.equipment.slots["weapon"] == "dagger"
    assert not sim.equipment.is_equipped("sword")
    assert sim.inventory.has("sword")
    assert "Equipped Rusty Dagger" in sim.messages


def test_unequip_missing_clears_slots_for_items_no_longer_held(catalog):
    inv = Inventory(["sword", "vest"])
    eq = Equipment()
    eq.toggle(catalog.item("sword"))
    eq.toggle(catalog.item("vest"))
    inv.remove("sword")
    assert eq.unequip_missing(inv) == ["sword"]
    assert eq.slots == {"weapon": None, "armor": "vest"}


def test_collect_pickups_by_radius():
    objects = [WorldObject("near", 105, 100), WorldObject("far", 200, 100)]
    collected, remaining = collect_pickups(objects, 100, 100)
    assert [o.item_id for o in collected] == ["near"]
    assert [o.item_id for o in remaining] == ["far"]


def test_shop_restock_samples_without_replacement(catalog):
    shop = Shop(catalog.items)
    shop.restock(random.Random(4), 6)
    ids = [i.item_id for i in shop.stock]
    assert len(ids) == 6
    assert len(set(ids)) == 6
    shop.restock(random.Random(4), 20)
    assert len(shop.stock) == len(catalog.items)


def test_purchase(sim, catalog):
    sim.shop.stock = [catalog.item("sword"), catalog.item("vest")]
    assert sim.player.gold == 50
    assert sim.purchase("sword")
    assert sim.player.gold == 20
    assert sim.inventory.has("sword")
    assert [i.item_id for i in sim.shop.stock] == ["vest"]
    assert "Bought Short Sword" in sim.messages


def test_purchase_without_gold_changes_nothing(sim, catalog):
    sim.shop.stock = [catalog.item("vest")]
    sim.player.gold = 29
    assert not sim.purchase("vest")
    assert sim.player.gold == 29
    assert not sim.inventory.has("vest")
    assert len(sim.shop.stock) == 1
    assert "Not enough gold" in sim.messages


def test_purchase_of_item_not_in_stock(sim):
    sim.shop.stock = []
    assert not sim.purchase("sword")
    assert sim.player.gold == 50


def test_use_equipment(sim):
    sim.inventory.add("sword")
    sim.use_item("sword")
    assert sim.equipment.slots["weapon"] == "sword"
    assert "Equipped Short Sword" in sim.messages
    sim.use_item("sword")
    assert sim.equipment.slots["weapon"] is None
    assert "Unequipped Short Sword" in sim.messages
    assert sim.inventory.has("sword")


def test_use_healing_consumable(sim):
    sim.inventory.add("potion")
    sim.player.hp = 50
    sim.use_item("potion")
    assert sim.player.hp == 80
    assert not sim.inventory.has("potion")
    assert "Healed 30 HP" in sim.messages


def test_use_buff_consumable(sim, fixed_random):
    sim.rng = fixed_random(0.0)
    sim.inventory.add("tonic")
    sim.use_item("tonic")
    effect = sim.effects.effects[0]
    assert (effect.name, effect.type, effect.value, effect.time) == ("Ember Tonic", "speed", 0.3, 15.0)
    assert "Used Ember Tonic" in sim.messages
    assert not sim.inventory.has("tonic")


def test_quest_items_cannot_be_used(sim):
    sim.inventory.add("token")
    sim.use_item("token")
    assert sim.inventory.has("token")
    assert "Cannot use Token" in sim.messages


def test_unheld_items_do_nothing(sim):
    sim.player.hp = 50
    sim.use_item("potion")
    sim.use_item("sword")
    assert sim.player.hp == 50
    assert sim.equipment.slots == {"weapon": None, "armor": None}
    assert len(sim.messages) == 0


def test_used_up_consumable_cannot_be_used_again(sim):
    sim.inventory.add("potion")
    sim.player.hp = 20
    sim.use_item("potion")
    sim.use_item("potion")
    assert sim.player.hp == 50
