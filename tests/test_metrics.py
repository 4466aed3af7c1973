from leadtime.metrics import compute_durations, compute_stats, split_by_cutoff
from leadtime.models import Stats

from helper import at, deployment, status


def test_basic_scenario():
    deployments = [deployment(1, 0), deployment(2, 60)]
    statuses = {1: status("success", 30), 2: None}
    assert compute_stats(deployments, statuses) == Stats(
        total=1, avg_duration_secs=30, min_duration_secs=30, max_duration_secs=30
    )


def test_cutoff_scenario():
    deployments = [deployment(1, 0), deployment(2, 60)]
    statuses = {1: status("success", 30), 2: None}

    older, newer = split_by_cutoff(deployments, at(45))

    assert [d.id for d in older] == [1]
    assert [d.id for d in newer] == [2]
    assert compute_stats(older, statuses).avg_duration_secs == 30
    assert compute_stats(newer, statuses) == Stats()


def test_split_is_stable_and_total():
    deployments = [deployment(i, offset) for i, offset in enumerate([50, 10, 100, 0, 100, 70])]
    older, newer = split_by_cutoff(deployments, at(60))
    assert [d.id for d in older] == [0, 1, 3]
    assert [d.id for d in newer] == [2, 4, 5]
    assert len(older) + len(newer) == len(deployments)


def test_deployment_at_cutoff_is_newer():
    older, newer = split_by_cutoff([deployment(1, 60)], at(60))
    assert older == []
    assert [d.id for d in newer] == [1]


def test_non_positive_durations_are_dropped():
    deployments = [deployment(1, 100), deployment(2, 100), deployment(3, 100)]
    statuses = {1: status("success", 100), 2: status("success", 40), 3: status("success", 160)}
    assert compute_durations(deployments, statuses) == [60]


def test_all_excluded_gives_zero_stats():
    deployments = [deployment(1, 100), deployment(2, 0)]
    statuses = {1: status("success", 50)}
    assert compute_stats(deployments, statuses) == Stats(0, 0, 0, 0)


def test_average_truncates():
    deployments = [deployment(1, 0), deployment(2, 0), deployment(3, 0)]
    statuses = {1: status("success", 10), 2: status("success", 10), 3: status("success", 11)}
    stats = compute_stats(deployments, statuses)
    assert stats == Stats(total=3, avg_duration_secs=10, min_duration_secs=10, max_duration_secs=11)


def test_fractional_seconds_truncate():
    from datetime import timedelta
    from leadtime.models import DeploymentStatus

    d = deployment(1, 0)
    s = DeploymentStatus(state="success", created_at=at(0) + timedelta(seconds=2, milliseconds=900))
    assert compute_durations([d], {1: s}) == [2]


def test_idempotent():
    deployments = [deployment(i, i * 5) for i in range(10)]
    statuses = {i: status("success", i * 5 + i + 1) for i in range(10)}
    assert compute_stats(deployments, statuses) == compute_stats(deployments, statuses)


def test_metrics_callback_receives_summary():
    seen = []
    compute_stats([deployment(1, 0)], {1: status("success", 12)}, metrics_callback=seen.append)
    assert seen == [
        {
            "deployments": 1,
            "total": 1,
            "avg_duration_secs": 12,
            "min_duration_secs": 12,
            "max_duration_secs": 12,
        }
    ]


def test_stats_from_durations_reports_deployment_count():
    from leadtime.metrics import stats_from_durations

    seen = []
    stats = stats_from_durations([5, 9], seen.append, deployment_count=4)
    assert stats == Stats(2, 7, 5, 9)
    assert seen[0]["deployments"] == 4
