import pytest

from world_weaver.influence import InfluenceTracker
from world_weaver.messages import MessageLog


def test_influence_starts_neutral():
    tracker = InfluenceTracker()
    assert tracker.value() == 0.0
    assert tracker.tier() == 0.0


def test_influence_value_and_tier():
    tracker = InfluenceTracker()
    tracker.record_all(["demiurge_affinity"] * 10 + ["unrelated"])
    assert tracker.value() == pytest.approx(0.5)
    assert tracker.tier() == 0.5
    tracker.record("resistance", weight=5)
    assert tracker.value() == pytest.approx(10 / 25)
    assert tracker.tier() == 0.25


def test_influence_never_reaches_one_without_weight():
    tracker = InfluenceTracker()
    tracker.record("demiurge_affinity", weight=1000)
    assert tracker.tier() == 0.75
    assert tracker.value() < 1.0


def test_messages_expire():
    log = MessageLog()
    log.add("hello")
    log.add("short", duration=1.0)
    log.tick(1.0)
    assert log.texts() == ["hello"]
    log.tick(2.0)
    assert len(log) == 0
