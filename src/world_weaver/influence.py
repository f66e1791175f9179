"""Hidden influence tally fed by tags on the dialogue options the player picks."""
from __future__ import annotations

from world_weaver.settings import (
    INFLUENCE_DAMPING,
    INFLUENCE_NEGATIVE_TAG,
    INFLUENCE_POSITIVE_TAG,
)

TIERS = (1.0, 0.75, 0.5, 0.25)


class InfluenceTracker:
    def __init__(self):
        self.positive = 0.0
        self.negative = 0.0

    def record(self, tag: str, weight: float = 1.0) -> None:
        """Count a tag; tags other than the two tracked ones are ignored."""
        if tag == INFLUENCE_POSITIVE_TAG:
            self.positive += weight
        elif tag == INFLUENCE_NEGATIVE_TAG:
            self.negative += weight

    def record_all(self, tags) -> None:
        for tag in tags:
            self.record(tag)

    def value(self) -> float:
        total = self.positive + self.negative + INFLUENCE_DAMPING
        return max(0.0, min(1.0, self.positive / total))

    def tier(self) -> float:
        """Snap value() down to the nearest quarter."""
        v = self.value()
        for tier in TIERS:
            if v >= tier:
                return tier
        return 0.0
