"""Content ingestion: JSON descriptors -> typed, immutable catalog records.

The descriptors are produced by an external generator and are often
incomplete, so every tolerance for malformed input lives here. Downstream
code can rely on the records having the documented fields and defaults:

    world_spec.json      {"zones": [{id, name}], "npcs": [{id, kind, home_zone}]}
    dialogue.json        {"dialogues": [{id, nodes: [...]}]}
    quests.json          {"quests": [{id, title, is_main, steps: [...]}]}
    inventory.json       {"items": [{item_id, name, category}]}
    abilities.json       {"abilities": [{id, name, description}]}
    status_effects.json  {"status_effects": [{id, name, effect}]}

Each file may also be a bare JSON array. Missing or unreadable files load as
empty collections.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field

from world_weaver.status_effects import (
    EffectKind,
    classify_ability,
    classify_consumable,
    classify_status_text,
)

logger = logging.getLogger(__name__)

PLAYER_SPEAKER = "player"
ITEM_CATEGORIES = ("consumable", "weapon", "armor", "quest")

WORLD_FILE = "world_spec.json"
DIALOGUE_FILE = "dialogue.json"
QUESTS_FILE = "quests.json"
INVENTORY_FILE = "inventory.json"
ABILITIES_FILE = "abilities.json"
STATUS_FILE = "status_effects.json"


class ContentError(ValueError):
    """A single descriptor record is unusable and will be skipped."""


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ZoneDef:
    id: str
    name: str


@dataclass(frozen=True)
class NpcDef:
    id: str
    kind: str = ""
    home_zone: str | None = None


@dataclass(frozen=True)
class WorldSpec:
    zones: tuple[ZoneDef, ...] = ()
    npcs: tuple[NpcDef, ...] = ()


@dataclass(frozen=True)
class DialogueOption:
    choice_text: str
    to_id: str | None = None
    grants_item_ids: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class DialogueNode:
    node_id: str
    text: str
    speaker: str = PLAYER_SPEAKER
    grants_item_ids: tuple[str, ...] = ()
    options: tuple[DialogueOption, ...] = ()


@dataclass(frozen=True)
class DialogueDef:
    id: str
    nodes: tuple[DialogueNode, ...] = ()
    _index: dict[str, DialogueNode] = field(default_factory=dict, compare=False, repr=False)

    def __post_init__(self):
        index = {}
        for node in self.nodes:
            # First definition wins on duplicate ids
            index.setdefault(node.node_id, node)
        object.__setattr__(self, "_index", index)

    @property
    def first_node(self) -> DialogueNode | None:
        return self.nodes[0] if self.nodes else None

    def node(self, node_id: str | None) -> DialogueNode | None:
        if node_id is None:
            return None
        return self._index.get(node_id)

    def granted_item_ids(self) -> set[str]:
        """Every item id this dialogue can hand out, from nodes or options."""
        granted: set[str] = set()
        for node in self.nodes:
            granted.update(node.grants_item_ids)
            for option in node.options:
                granted.update(option.grants_item_ids)
        return granted


@dataclass(frozen=True)
class QuestStepDef:
    goal: str
    location_hint: str = ""
    requires_item_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class QuestDef:
    id: str
    title: str
    is_main: bool = False
    steps: tuple[QuestStepDef, ...] = ()


@dataclass(frozen=True)
class ItemDef:
    item_id: str
    name: str
    category: str = "unknown"
    effect_kind: EffectKind = EffectKind.NONE


@dataclass(frozen=True)
class AbilityDef:
    id: str
    name: str
    description: str = ""
    effect_kind: EffectKind = EffectKind.RANDOM_BUFF


@dataclass(frozen=True)
class StatusEffectDef:
    id: str
    name: str
    effect: str = ""
    effect_type: str | None = None


class Catalog:
    """Read-only reference data for one session, indexed for lookups."""

    def __init__(self, world=None, dialogues=(), quests=(), items=(), abilities=(),
                 status_effects=()):
        self.world: WorldSpec = world or WorldSpec()
        self.dialogues: tuple[DialogueDef, ...] = tuple(dialogues)
        self.quests: tuple[QuestDef, ...] = tuple(quests)
        self.items: tuple[ItemDef, ...] = tuple(items)
        self.abilities: tuple[AbilityDef, ...] = tuple(abilities)
        self.status_effects: tuple[StatusEffectDef, ...] = tuple(status_effects)

        self._items = {}
        for item in self.items:
            self._items.setdefault(item.item_id, item)
        self._dialogues = {}
        for dlg in self.dialogues:
            self._dialogues.setdefault(dlg.id, dlg)
        self.dialogue_granted_items: frozenset[str] = frozenset(
            item_id for dlg in self.dialogues for item_id in dlg.granted_item_ids()
        )

    def item(self, item_id: str) -> ItemDef | None:
        return self._items.get(item_id)

    def item_name(self, item_id: str) -> str:
        item = self._items.get(item_id)
        return item.name if item else item_id

    def dialogue(self, dialogue_id: str | None) -> DialogueDef | None:
        if dialogue_id is None:
            return None
        return self._dialogues.get(dialogue_id)

    def status_effect_named(self, name: str) -> StatusEffectDef | None:
        for sdef in self.status_effects:
            if sdef.name == name:
                return sdef
        return None


# ---------------------------------------------------------------------------
# Normalization helpers
# ---------------------------------------------------------------------------

def _as_list(value) -> list:
    return list(value) if isinstance(value, (list, tuple)) else []


def _as_str(value, default: str = "") -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return default


def _id_list(value) -> tuple[str, ...]:
    return tuple(s for s in (_as_str(v) for v in _as_list(value)) if s)


def _require_dict(raw, what: str) -> dict:
    if not isinstance(raw, dict):
        raise ContentError(f"{what} is not an object: {raw!r}")
    return raw


def _parse_many(raw_list, parser, what: str) -> list:
    """Parse each record, skipping (and logging) the ones that fail."""
    parsed = []
    for idx, raw in enumerate(_as_list(raw_list)):
        try:
            parsed.append(parser(raw, idx))
        except ContentError as exc:
            logger.warning("Skipping %s #%d: %s", what, idx, exc)
    return parsed


def _unwrap(data, key: str):
    """Descriptors are either {key: [...]} or a bare array."""
    if isinstance(data, dict):
        return data.get(key, [])
    return data


# ---------------------------------------------------------------------------
# Record parsers
# ---------------------------------------------------------------------------

def parse_zone(raw, idx: int) -> ZoneDef:
    raw = _require_dict(raw, "zone")
    zone_id = _as_str(raw.get("id"), f"zone_{idx + 1}")
    return ZoneDef(id=zone_id, name=_as_str(raw.get("name"), zone_id))


def parse_npc(raw, idx: int) -> NpcDef:
    raw = _require_dict(raw, "npc")
    npc_id = _as_str(raw.get("id"))
    if not npc_id:
        raise ContentError("npc has no id")
    return NpcDef(
        id=npc_id,
        kind=_as_str(raw.get("kind")),
        home_zone=_as_str(raw.get("home_zone")) or None,
    )


def parse_world(data) -> WorldSpec:
    if not isinstance(data, dict):
        return WorldSpec()
    return WorldSpec(
        zones=tuple(_parse_many(data.get("zones"), parse_zone, "zone")),
        npcs=tuple(_parse_many(data.get("npcs"), parse_npc, "npc")),
    )


def parse_option(raw, idx: int) -> DialogueOption:
    raw = _require_dict(raw, "option")
    return DialogueOption(
        choice_text=_as_str(raw.get("choice_text"), "..."),
        to_id=_as_str(raw.get("to_id")) or None,
        grants_item_ids=_id_list(raw.get("grants_item_ids")),
        tags=_id_list(raw.get("tags")),
    )


def parse_node(raw, idx: int) -> DialogueNode:
    raw = _require_dict(raw, "node")
    return DialogueNode(
        node_id=_as_str(raw.get("node_id"), f"node_{idx + 1}"),
        text=_as_str(raw.get("text")),
        speaker=_as_str(raw.get("speaker")) or PLAYER_SPEAKER,
        grants_item_ids=_id_list(raw.get("grants_item_ids")),
        options=tuple(_parse_many(raw.get("options"), parse_option, "option")),
    )


def parse_dialogue(raw, idx: int) -> DialogueDef:
    raw = _require_dict(raw, "dialogue")
    return DialogueDef(
        id=_as_str(raw.get("id"), f"dialogue_{idx + 1}"),
        nodes=tuple(_parse_many(raw.get("nodes"), parse_node, "node")),
    )


def parse_step(raw, idx: int) -> QuestStepDef:
    raw = _require_dict(raw, "step")
    return QuestStepDef(
        goal=_as_str(raw.get("goal"), f"Step {idx + 1}"),
        location_hint=_as_str(raw.get("location_hint")),
        requires_item_ids=_id_list(raw.get("requires_item_ids")),
    )


def parse_quest(raw, idx: int) -> QuestDef:
    raw = _require_dict(raw, "quest")
    quest_id = _as_str(raw.get("id"), f"quest_{idx + 1}")
    return QuestDef(
        id=quest_id,
        title=_as_str(raw.get("title"), quest_id),
        is_main=bool(raw.get("is_main", False)),
        steps=tuple(_parse_many(raw.get("steps"), parse_step, "step")),
    )


def parse_item(raw, idx: int) -> ItemDef:
    raw = _require_dict(raw, "item")
    item_id = _as_str(raw.get("item_id"))
    if not item_id:
        raise ContentError("item has no item_id")
    name = _as_str(raw.get("name"), item_id)
    category = _as_str(raw.get("category"), "unknown").lower()
    if category == "armour":
        category = "armor"
    kind = classify_consumable(name) if category == "consumable" else EffectKind.NONE
    return ItemDef(item_id=item_id, name=name, category=category, effect_kind=kind)


def parse_ability(raw, idx: int) -> AbilityDef:
    raw = _require_dict(raw, "ability")
    ability_id = _as_str(raw.get("id"), f"ability_{idx + 1}")
    name = _as_str(raw.get("name"), ability_id)
    return AbilityDef(
        id=ability_id,
        name=name,
        description=_as_str(raw.get("description")),
        effect_kind=classify_ability(name),
    )


def parse_status_effect(raw, idx: int) -> StatusEffectDef:
    raw = _require_dict(raw, "status effect")
    status_id = _as_str(raw.get("id"), f"status_{idx + 1}")
    name = _as_str(raw.get("name"), status_id)
    effect = _as_str(raw.get("effect"))
    return StatusEffectDef(
        id=status_id,
        name=name,
        effect=effect,
        effect_type=classify_status_text(f"{name} {effect}"),
    )


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def build_catalog(world=None, dialogues=None, quests=None, items=None,
                  abilities=None, status_effects=None) -> Catalog:
    """Build a Catalog from already-decoded JSON documents."""
    return Catalog(
        world=parse_world(world),
        dialogues=_parse_many(_unwrap(dialogues, "dialogues"), parse_dialogue, "dialogue"),
        quests=_parse_many(_unwrap(quests, "quests"), parse_quest, "quest"),
        items=_parse_many(_unwrap(items, "items"), parse_item, "item"),
        abilities=_parse_many(_unwrap(abilities, "abilities"), parse_ability, "ability"),
        status_effects=_parse_many(
            _unwrap(status_effects, "status_effects"), parse_status_effect, "status effect"
        ),
    )


def _read_json(path: str):
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        logger.warning("Content file missing: %s", path)
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as exc:
        logger.warning("Could not read %s: %s", path, exc)
    return None


def load_content(data_dir: str) -> Catalog:
    """Load every descriptor in *data_dir* into a Catalog."""
    def read(name):
        return _read_json(os.path.join(data_dir, name))

    catalog = build_catalog(
        world=read(WORLD_FILE),
        dialogues=read(DIALOGUE_FILE),
        quests=read(QUESTS_FILE),
        items=read(INVENTORY_FILE),
        abilities=read(ABILITIES_FILE),
        status_effects=read(STATUS_FILE),
    )
    logger.info(
        "Loaded content from %s: %d zones, %d dialogues, %d quests, %d items",
        data_dir, len(catalog.world.zones), len(catalog.dialogues),
        len(catalog.quests), len(catalog.items),
    )
    return catalog
