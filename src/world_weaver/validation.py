"""Content validation: catches broken references once, at load time."""

from __future__ import annotations

import logging

from world_weaver.actors import assign_dialogues

logger = logging.getLogger(__name__)


def validate_catalog(catalog) -> list[str]:
    """Return list of warning messages for a catalog's cross references.

    Nothing here is fatal: the simulation tolerates every problem reported,
    usually by ending the affected interaction early.
    """
    warnings: list[str] = []

    def warn(msg):
        warnings.append(msg)
        logger.warning(msg)

    # --- Dialogue graphs ---
    for dlg in catalog.dialogues:
        if not dlg.nodes:
            warn(f"[{dlg.id}] Dialogue has no nodes")
            continue
        seen: set[str] = set()
        for node in dlg.nodes:
            if node.node_id in seen:
                warn(f"[{dlg.id}] Duplicate node id '{node.node_id}'")
            seen.add(node.node_id)
            for option in node.options:
                if option.to_id is not None and dlg.node(option.to_id) is None:
                    warn(f"[{dlg.id}] Option '{option.choice_text}' on '{node.node_id}' "
                         f"targets unknown node '{option.to_id}'")
                for item_id in option.grants_item_ids:
                    if catalog.item(item_id) is None:
                        warn(f"[{dlg.id}] Option '{option.choice_text}' on '{node.node_id}' "
                             f"grants unknown item '{item_id}'")
            for item_id in node.grants_item_ids:
                if catalog.item(item_id) is None:
                    warn(f"[{dlg.id}] Node '{node.node_id}' grants unknown item '{item_id}'")

    # --- Quest requirements ---
    for quest in catalog.quests:
        if not quest.steps:
            warn(f"[{quest.id}] Quest has no steps")
        for i, step in enumerate(quest.steps):
            for item_id in step.requires_item_ids:
                if catalog.item(item_id) is None:
                    warn(f"[{quest.id}] Step {i} requires unknown item '{item_id}'")

    # --- NPC home zones ---
    zone_ids = {z.id for z in catalog.world.zones}
    for npc in catalog.world.npcs:
        if npc.home_zone and npc.home_zone not in zone_ids:
            warn(f"[{npc.id}] NPC home zone '{npc.home_zone}' not found")

    # --- NPC dialogues ---
    for npc_id, dialogue_id, _kind, _zone in assign_dialogues(catalog):
        if dialogue_id is None:
            warn(f"[{npc_id}] NPC has no dialogue")

    return warnings
