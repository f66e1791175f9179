import pytest

from world_weaver.actors import Player
from world_weaver.content import AbilityDef
from world_weaver.messages import MessageLog
from world_weaver.skills import AbilityBar, perform_skill_check, skill_check
from world_weaver.status_effects import (
    EffectKind,
    StatusEffectManager,
    classify_ability,
    classify_consumable,
    classify_status_text,
)


def test_charisma_check_passes_on_low_roll():
    # 0.05 < 0.5 + 0 - 0.4 + 0.5
    assert skill_check(0.5, 0.0, 0.4, 0.05)


@pytest.mark.parametrize("base,bonus,difficulty,roll,expected", [
    (0.5, 0.0, 0.5, 0.5, False),   # threshold is exclusive
    (0.5, 0.0, 0.5, 0.49, True),
    (0.0, 0.0, 0.8, 0.0, False),   # hopeless
    (1.0, 0.0, 0.4, 0.99, True),   # certain
    (0.5, 0.3, 0.8, 0.45, True),   # buffs help
])
def test_skill_check_boundaries(base, bonus, difficulty, roll, expected):
    assert skill_check(base, bonus, difficulty, roll) is expected


def test_skill_check_is_pure():
    results = {skill_check(0.5, 0.1, 0.6, 0.3) for _ in range(10)}
    assert results == {True}


def test_perform_skill_check_adds_matching_effects(fixed_random):
    player = Player()
    effects = StatusEffectManager()
    # Needs roll < 0.5 + bonus - 0.8 + 0.5 = 0.2 + bonus
    assert not perform_skill_check(player, effects, "strength", 0.8, fixed_random(0.3))
    effects.apply("Might", "strength", 0.5, 10)
    effects.apply("Haste", "speed", 1.0, 10)
    assert perform_skill_check(player, effects, "strength", 0.8, fixed_random(0.3))
    assert not perform_skill_check(player, effects, "charisma", 0.8, fixed_random(0.3))


def test_unknown_skill_counts_as_zero(fixed_random):
    assert not perform_skill_check(Player(), StatusEffectManager(), "stealth", 0.5, fixed_random(0.0))


def test_effects_stack_and_expire():
    effects = StatusEffectManager()
    effects.apply("A", "speed", 0.5, 1.0)
    effects.apply("B", "speed", 0.3, 2.0)
    assert effects.speed_multiplier() == pytest.approx(1.8)
    assert effects.tick(0.5) == []
    assert effects.tick(0.5) == ["A"]
    assert len(effects) == 1
    assert effects.speed_multiplier() == pytest.approx(1.3)
    effects.tick(5)
    assert effects.speed_multiplier() == 1.0


def test_classifiers():
    assert classify_consumable("Elixir of Dawn") is EffectKind.HEAL
    assert classify_consumable("Smoke Bomb") is EffectKind.RANDOM_BUFF
    assert classify_ability("Potion Craft") is EffectKind.HEAL
    assert classify_ability("Elixir Mastery") is EffectKind.RANDOM_BUFF
    assert classify_status_text("Nimble feet") == "agility"
    assert classify_status_text("Nothing special") is None


def _bar(*names):
    return AbilityBar([AbilityDef(id=f"ab{i}", name=n, effect_kind=classify_ability(n))
                       for i, n in enumerate(names)])


def test_ability_bar_holds_five_slots():
    bar = _bar("a", "b", "c", "d", "e", "f")
    assert len(bar.abilities) == 5
    assert bar.get(5) is None
    assert bar.get(-1) is None


def test_ability_cooldown(fixed_random):
    bar = _bar("Speed Surge")
    player, effects, messages = Player(), StatusEffectManager(), MessageLog()
    assert bar.activate(0, player, effects, fixed_random(0.0), messages)
    assert effects.total("speed") == 0.5
    assert bar.cooldowns["ab0"] == 30.0
    assert "Used ability: Speed Surge" in messages

    assert not bar.activate(0, player, effects, fixed_random(0.0), messages)
    assert "Speed Surge is on cooldown" in messages
    assert len(effects) == 1

    bar.tick(31)
    assert bar.cooldowns["ab0"] == 0.0
    assert bar.activate(0, player, effects, fixed_random(0.0), messages)


def test_healing_ability(fixed_random):
    bar = _bar("Healing Touch")
    player, messages = Player(hp=50), MessageLog()
    bar.activate(0, player, StatusEffectManager(), fixed_random(0.0), messages)
    assert player.hp == 75
    assert "Healed 25 HP" in messages


def test_random_ability_buff(fixed_random):
    bar = _bar("Lucky Star")
    effects = StatusEffectManager()
    bar.activate(0, Player(), effects, fixed_random(0.9), MessageLog())
    assert effects.effects[0].type == "strength"
    assert effects.effects[0].value == 0.3
    assert effects.effects[0].time == 10.0


def test_empty_slot_does_nothing(fixed_random):
    messages = MessageLog()
    assert not _bar().activate(2, Player(), StatusEffectManager(), fixed_random(0.0), messages)
    assert len(messages) == 0
