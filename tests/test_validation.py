from world_weaver.content import build_catalog
from world_weaver.validation import validate_catalog


def test_clean_catalog_has_no_warnings():
    catalog = build_catalog(
        dialogues=[{"id": "d", "nodes": [
            {"node_id": "a", "text": "hi", "options": [{"choice_text": "go", "to_id": "b"}]},
            {"node_id": "b", "text": "bye"},
        ]}],
        quests=[{"id": "q", "title": "Q", "steps": [{"goal": "g", "requires_item_ids": ["x"]}]}],
        items=[{"item_id": "x", "name": "X", "category": "quest"}],
    )
    assert validate_catalog(catalog) == []


def test_broken_references_are_reported(caplog):
    catalog = build_catalog(
        world={"zones": [{"id": "z"}], "npcs": [{"id": "npc_x", "home_zone": "elsewhere"}]},
        dialogues=[
            {"id": "d", "nodes": [
                {"node_id": "a", "text": "hi", "grants_item_ids": ["ghost"],
                 "options": [{"choice_text": "go", "to_id": "missing"}]},
                {"node_id": "a", "text": "again"},
            ]},
            {"id": "empty", "nodes": []},
        ],
        quests=[
            {"id": "q", "title": "Q", "steps": [{"goal": "g", "requires_item_ids": ["phantom"]}]},
            {"id": "stepless", "title": "Nothing"},
        ],
    )
    warnings = validate_catalog(catalog)
    joined = "\n".join(warnings)
    assert "unknown node 'missing'" in joined
    assert "Duplicate node id 'a'" in joined
    assert "grants unknown item 'ghost'" in joined
    assert "[empty] Dialogue has no nodes" in joined
    assert "requires unknown item 'phantom'" in joined
    assert "[stepless] Quest has no steps" in joined
    assert "home zone 'elsewhere'" in joined
    assert len(caplog.records) == len(warnings)


def test_option_grants_and_npcs_without_dialogue_are_reported():
    catalog = build_catalog(
        world={"zones": [{"id": "z"}], "npcs": [{"id": "npc_x"}, {"id": "npc_y"}]},
        dialogues=[{"id": "d", "nodes": [
            {"node_id": "a", "text": "hi",
             "options": [{"choice_text": "take", "grants_item_ids": ["ghost"]}]},
        ]}],
    )
    warnings = validate_catalog(catalog)
    assert "[d] Option 'take' on 'a' grants unknown item 'ghost'" in warnings
    assert "[npc_y] NPC has no dialogue" in warnings
    assert not any(w.startswith("[npc_x]") for w in warnings)
