from greentransit.features.tasks.service import TASK_CATALOG, TaskEvaluator
from greentransit.models.profile import UserProfile


def _by_id(tasks):
    return {t.id: t for t in tasks}


def test_default_tasks_are_fresh():
    tasks = TaskEvaluator().default_tasks()
    assert [t.id for t in tasks] == list(range(1, 13))
    assert all(not t.completed and t.progress == 0 for t in tasks)


def test_green_walking_trip_completes_mode_tasks():
    evaluator = TaskEvaluator()
    profile = UserProfile(total_carbon_saved=0.384, streak_days=1)
    result = evaluator.evaluate(evaluator.default_tasks(), profile, mode="walking")

    tasks = _by_id(result.tasks)
    assert tasks[1].completed and tasks[5].completed and tasks[6].completed
    assert not tasks[7].completed
    assert result.rewards.points == 20 + 30 + 15
    assert result.rewards.completed_task_ids == (1, 5, 6)
    assert result.rewards.badges == ()

    # Threshold tasks carry partial progress
    assert round(tasks[2].progress, 2) == 7.68
    assert round(tasks[3].progress, 2) == 33.33


def test_car_trip_completes_nothing():
    evaluator = TaskEvaluator()
    result = evaluator.evaluate(evaluator.default_tasks(), UserProfile(), mode="car")
    assert result.rewards.points == 0
    assert not any(t.completed for t in result.tasks)


def test_reward_reported_once():
    evaluator = TaskEvaluator()
    first = evaluator.evaluate(evaluator.default_tasks(), UserProfile(), mode="bus")
    second = evaluator.evaluate(first.tasks, UserProfile(), mode="bus")
    assert first.rewards.points > 0
    assert second.rewards.points == 0
    assert second.rewards.completed_task_ids == ()


def test_specific_route_requires_tag():
    evaluator = TaskEvaluator()
    untagged = evaluator.evaluate(evaluator.default_tasks(), UserProfile(), mode="walking")
    assert not _by_id(untagged.tasks)[4].completed

    tagged = evaluator.evaluate(evaluator.default_tasks(), UserProfile(), mode="walking", route="dragon_pond_safe")
    assert _by_id(tagged.tasks)[4].completed
    assert 4 in tagged.rewards.completed_task_ids


def test_badges_and_events():
    evaluator = TaskEvaluator()
    profile = UserProfile(streak_days=3, total_carbon_saved=10.5)
    result = evaluator.evaluate(evaluator.default_tasks(), profile, mode="car", route="station_route")

    assert set(result.rewards.completed_task_ids) == {2, 3, 10, 12}
    assert list(result.rewards.badges) == ["Carbon Cutter", "Eco Expert", "Rail Fan", "Earth Guardian"]
    events = result.to_events()
    assert [e["payload"]["taskId"] for e in events] == [2, 3, 10, 12]
    assert all(e["type"] == "task.completed" for e in events)


def test_unreachable_modes_stay_open():
    evaluator = TaskEvaluator()
    result = evaluator.evaluate(evaluator.default_tasks(), UserProfile(), mode="cycling")
    tasks = _by_id(result.tasks)
    assert not tasks[9].completed
    assert not tasks[11].completed


def test_reset_clears_completion():
    evaluator = TaskEvaluator()
    done = evaluator.evaluate(evaluator.default_tasks(), UserProfile(), mode="walking").tasks
    assert any(t.completed for t in done)
    assert all(not t.completed for t in evaluator.reset())
    assert len(TASK_CATALOG) == 12
