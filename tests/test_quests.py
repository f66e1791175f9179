from world_weaver.content import QuestStepDef
from world_weaver.quests import COMPLETED, IN_PROGRESS, NOT_STARTED, assign_steps
from world_weaver.settings import WORLD_TOP
from world_weaver.spatial import Obstacle


def _quest(sim, quest_id):
    return sim.quests.get(quest_id)


def test_step_assignments_round_robin(sim):
    assert _quest(sim, "q_main").step_assignments == ["npc_a", "npc_b", "npc_a"]
    assert _quest(sim, "q_side").step_assignments == ["npc_b"]


def test_assignments_without_npcs():
    assert assign_steps(0, 2, []) == [None, None]


def test_start_moves_to_in_progress(sim):
    assert sim.start_quest("q_side")
    quest = _quest(sim, "q_side")
    assert quest.status == IN_PROGRESS
    assert quest.current_step == 0
    assert "Started quest: Side Quest" in sim.messages


def test_starting_twice_changes_nothing(sim):
    sim.start_quest("q_side")
    objects = list(sim.objects)
    assert not sim.start_quest("q_side")
    quest = _quest(sim, "q_side")
    assert quest.status == IN_PROGRESS
    assert quest.current_step == 0
    assert sim.objects == objects


def test_unknown_quest_is_a_no_op(sim):
    assert not sim.start_quest("q_missing")


def test_start_spawns_required_items_inside_the_world(sim):
    sim.start_quest("q_side")
    assert [o.item_id for o in sim.objects] == ["herb"]
    herb = sim.objects[0]
    assert 0 <= herb.x <= sim.screen_width
    assert 80 <= herb.y <= sim.world_bottom - 40


def test_spawning_is_idempotent(sim):
    sim.start_quest("q_side")
    quest = _quest(sim, "q_side")
    assert sim.quests.spawn_items_for_step(quest, 0, sim) == []
    assert len(sim.objects) == 1


def test_held_and_dialogue_items_are_not_spawned(sim):
    sim.inventory.add("herb")
    sim.start_quest("q_side")
    sim.start_quest("q_main")  # first step needs the dialogue-granted token
    assert sim.objects == []


def test_deliver_requires_items(sim):
    sim.start_quest("q_side")
    assert sim.quests.deliverable_for("npc_b", sim.inventory) is None
    assert not sim.quests.deliver(sim.npc("npc_b"), sim)
    assert "You do not have the required items" in sim.messages
    assert _quest(sim, "q_side").current_step == 0


def test_deliver_to_wrong_npc_is_refused(sim):
    sim.start_quest("q_side")
    sim.inventory.add("herb")
    assert sim.quests.deliverable_for("npc_a", sim.inventory) is None
    assert not sim.quests.deliver(sim.npc("npc_a"), sim)
    assert sim.inventory.has("herb")


def test_three_step_quest_rewards(sim, fixed_random):
    sim.rng = fixed_random(0.0)
    gold = sim.player.gold
    sim.start_quest("q_main")

    sim.inventory.add("token")
    assert sim.quests.deliver(sim.npc("npc_a"), sim)
    assert "Step completed: Show the token" in sim.messages
    assert not sim.inventory.has("token")
    # The relic is not granted by any dialogue, so it is dropped in the world
    assert [o.item_id for o in sim.objects] == ["relic"]

    sim.inventory.add("relic")
    assert sim.quests.deliver(sim.npc("npc_b"), sim)
    assert sim.quests.deliver(sim.npc("npc_a"), sim)

    quest = _quest(sim, "q_main")
    assert quest.status == COMPLETED
    assert quest.current_step == 3
    assert sim.player.gold == gold + 2 * 20 + 50
    assert "Quest completed: Main Quest" in sim.messages


def test_completed_quest_is_frozen(sim, fixed_random):
    sim.rng = fixed_random(0.0)
    sim.start_quest("q_side")
    sim.inventory.add("herb")
    sim.quests.deliver(sim.npc("npc_b"), sim)
    quest = _quest(sim, "q_side")
    assert quest.status == COMPLETED
    assert quest.step is None
    assert not sim.start_quest("q_side")
    assert not sim.quests.deliver(sim.npc("npc_b"), sim)
    assert quest.status == COMPLETED


def test_failed_check_hurts_but_advances(sim, fixed_random):
    sim.rng = fixed_random(0.99)
    sim.start_quest("q_side")
    sim.inventory.add("herb")
    assert sim.quests.deliver(sim.npc("npc_b"), sim)
    assert sim.player.hp == 90
    assert _quest(sim, "q_side").status == COMPLETED
    assert not sim.inventory.has("herb")
    skill = sim.npc("npc_b").skill
    assert f"Skill check failed ({skill})" in sim.messages


def test_passed_check_message(sim, fixed_random):
    sim.rng = fixed_random(0.0)
    sim.start_quest("q_side")
    sim.inventory.add("herb")
    sim.quests.deliver(sim.npc("npc_b"), sim)
    assert f"Skill check passed ({sim.npc('npc_b').skill})" in sim.messages
    assert sim.player.hp == 100


def test_status_never_regresses(sim, fixed_random):
    sim.rng = fixed_random(0.0)
    order = [NOT_STARTED, IN_PROGRESS, COMPLETED]
    quest = _quest(sim, "q_main")
    seen = [quest.status]
    sim.start_quest("q_main")
    seen.append(quest.status)
    for item_id, npc_id in (("token", "npc_a"), ("relic", "npc_b"), (None, "npc_a"), (None, "npc_a")):
        if item_id:
            sim.inventory.add(item_id)
        sim.quests.deliver(sim.npc(npc_id), sim)
        sim.start_quest("q_main")
        seen.append(quest.status)
    ranks = [order.index(s) for s in seen]
    assert ranks == sorted(ranks)


def test_delivering_equipped_item_unequips_it(sim, fixed_random):
    sim.rng = fixed_random(0.0)
    quest = _quest(sim, "q_side")
    quest.steps = (QuestStepDef(goal="Hand over the sword", requires_item_ids=("sword",)),)
    sim.start_quest("q_side")
    sim.inventory.add("sword")
    sim.use_item("sword")
    assert sim.equipment.is_equipped("sword")
    assert sim.quests.deliver(sim.npc("npc_b"), sim)
    assert not sim.inventory.has("sword")
    assert sim.equipment.slots["weapon"] is None


class SequenceRandom:
    def __init__(self, values):
        self.values = list(values)

    def random(self):
        return self.values.pop(0)


def test_spawn_rerolls_points_inside_obstacles(open_sim):
    zone = open_sim.zones[0]
    open_sim.obstacles.append(Obstacle(zone.x - 5, WORLD_TOP - 5, 20, 20))
    open_sim.rng = SequenceRandom([0.0, 0.0, 0.0, 0.0, 0.5, 0.5])
    open_sim.start_quest("q_side")
    herb = open_sim.objects[0]
    assert herb.x == zone.x + 0.5 * zone.width
    assert herb.y == WORLD_TOP + 0.5 * (open_sim.world_bottom - 40 - WORLD_TOP)
    assert not open_sim.obstacles[0].contains(herb.x, herb.y)


def test_spawn_gives_up_after_repeated_blocked_rolls(open_sim, fixed_random):
    zone = open_sim.zones[0]
    open_sim.obstacles.append(Obstacle(zone.x - 5, WORLD_TOP - 5, 20, 20))
    open_sim.rng = fixed_random(0.0)
    open_sim.start_quest("q_side")
    assert [(o.x, o.y) for o in open_sim.objects] == [(zone.x, WORLD_TOP)]
