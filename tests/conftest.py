import random

import pytest

from world_weaver.config import GameConfig
from world_weaver.content import build_catalog
from world_weaver.simulation import Simulation

WORLD = {
    "zones": [{"id": "north", "name": "North Field"}, {"id": "south", "name": "South Field"}],
    "npcs": [
        {"id": "npc_a", "kind": "villager", "home_zone": "north"},
        {"id": "npc_b", "kind": "merchant", "home_zone": "south"},
    ],
}

DIALOGUES = {
    "dialogues": [
        {
            "id": "dlg_a",
            "nodes": [
                {
                    "node_id": "start",
                    "speaker": "npc_a",
                    "text": "Hello there.",
                    "options": [
                        {"choice_text": "Tell me more", "to_id": "mid", "tags": ["demiurge_affinity"]},
                        {"choice_text": "Bye"},
                        {"choice_text": "Broken", "to_id": "nowhere"},
                    ],
                },
                {
                    "node_id": "mid",
                    "speaker": "npc_a",
                    "text": "Take this token.",
                    "grants_item_ids": ["token"],
                    "options": [{"choice_text": "Back", "to_id": "start"}],
                },
            ],
        },
        {
            "id": "dlg_b",
            "nodes": [
                {"node_id": "hello", "speaker": "npc_b", "text": "A gift.", "grants_item_ids": ["gift"]},
            ],
        },
    ]
}

QUESTS = {
    "quests": [
        {
            "id": "q_main",
            "title": "Main Quest",
            "is_main": True,
            "steps": [
                {"goal": "Show the token", "requires_item_ids": ["token"]},
                {"goal": "Find the relic", "requires_item_ids": ["relic"]},
                {"goal": "Report back", "requires_item_ids": []},
            ],
        },
        {
            "id": "q_side",
            "title": "Side Quest",
            "steps": [{"goal": "Pick a herb", "requires_item_ids": ["herb"]}],
        },
    ]
}

ITEMS = {
    "items": [
        {"item_id": "token", "name": "Token", "category": "quest"},
        {"item_id": "relic", "name": "Relic", "category": "quest"},
        {"item_id": "herb", "name": "Herb", "category": "quest"},
        {"item_id": "gift", "name": "Gift", "category": "quest"},
        {"item_id": "potion", "name": "Minor Potion", "category": "consumable"},
        {"item_id": "tonic", "name": "Ember Tonic", "category": "consumable"},
        {"item_id": "sword", "name": "Short Sword", "category": "weapon"},
        {"item_id": "dagger", "name": "Rusty Dagger", "category": "weapon"},
        {"item_id": "vest", "name": "Leather Vest", "category": "armour"},
    ]
}

ABILITIES = {
    "abilities": [
        {"id": "ab_heal", "name": "Healing Touch"},
        {"id": "ab_speed", "name": "Speed Surge"},
        {"id": "ab_strength", "name": "Strength of Stone"},
        {"id": "ab_luck", "name": "Lucky Star"},
        {"id": "ab_fifth", "name": "Fifth Sense"},
        {"id": "ab_sixth", "name": "Sixth Sense"},
    ]
}

STATUS_EFFECTS = {
    "status_effects": [{"id": "se_speed", "name": "Speed Surge", "effect": "Move faster."}]
}


class FixedRandom:
    """Stand-in RNG whose every draw returns the same value."""

    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value

    def sample(self, population, k):
        return list(population)[:k]


@pytest.fixture
def catalog():
    return build_catalog(
        world=WORLD,
        dialogues=DIALOGUES,
        quests=QUESTS,
        items=ITEMS,
        abilities=ABILITIES,
        status_effects=STATUS_EFFECTS,
    )


@pytest.fixture
def sim(catalog):
    return Simulation(catalog, GameConfig(), rng=random.Random(7))


@pytest.fixture
def open_sim(sim):
    """A simulation with nothing in the way of the player."""
    sim.obstacles.clear()
    sim.buildings.clear()
    return sim


@pytest.fixture
def fixed_random():
    return FixedRandom
