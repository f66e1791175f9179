"""Conversation traversal over per-NPC dialogue graphs."""
from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class DialogueSession:
    """An open conversation: who we are talking to and where in the graph we are."""
    npc_id: str
    dialogue_id: str
    node: object  # DialogueNode

    @property
    def options(self):
        return self.node.options

    @property
    def speaker(self) -> str:
        return self.node.speaker or self.npc_id


class DialogueEngine:
    """Starts conversations, follows chosen options and hands out granted items.

    Grant rule: an item the player already holds is never added again. The
    small gold reward is paid when the item is actually added, or on every
    grant when *repeat_rewards* is set.
    """

    def __init__(self, catalog, inventory, player, messages, influence,
                 grant_gold: int = 5, repeat_rewards: bool = False):
        self.catalog = catalog
        self.inventory = inventory
        self.player = player
        self.messages = messages
        self.influence = influence
        self.grant_gold = grant_gold
        self.repeat_rewards = repeat_rewards

    def start(self, npc) -> DialogueSession | None:
        """Open a conversation at the first node of *npc*'s dialogue."""
        if npc is None:
            return None
        dialogue = self.catalog.dialogue(npc.dialogue_id)
        if dialogue is None or dialogue.first_node is None:
            logger.debug("NPC %s has no usable dialogue", npc.id)
            return None
        session = DialogueSession(npc_id=npc.id, dialogue_id=dialogue.id, node=dialogue.first_node)
        self.grant_items(session.node.grants_item_ids)
        return session

    def choose(self, session: DialogueSession, index: int) -> DialogueSession | None:
        """Pick option *index*. Returns the session, or None once the talk is over.

        An out-of-range index leaves the session untouched.
        """
        options = session.node.options
        if not 0 <= index < len(options):
            return session
        option = options[index]
        self.grant_items(option.grants_item_ids)
        self.influence.record_all(option.tags)
        if option.to_id is None:
            return None
        dialogue = self.catalog.dialogue(session.dialogue_id)
        next_node = dialogue.node(option.to_id) if dialogue else None
        if next_node is None:
            logger.debug("Dialogue %s: option points at missing node %r",
                         session.dialogue_id, option.to_id)
            return None
        session.node = next_node
        self.grant_items(next_node.grants_item_ids)
        return session

    def grant_items(self, item_ids) -> list[str]:
        """Give each item to the player. Returns the ids actually added."""
        added = []
        for item_id in item_ids:
            if self.inventory.add_unique(item_id):
                added.append(item_id)
                self.messages.add(f"Received {self.catalog.item_name(item_id)}")
                self.player.gold += self.grant_gold
            elif self.repeat_rewards:
                self.player.gold += self.grant_gold
        return added
