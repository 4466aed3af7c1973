import asyncio

import pytest

from leadtime.collector import collect_statuses
from leadtime.errors import GitHubAPIError
from leadtime.resolver import StatusResolver

from helper import FakeGitHub, deployment, status


def _resolve(source, deployment_id, ticks=None):
    callback = (lambda: ticks.append(deployment_id)) if ticks is not None else None
    resolver = StatusResolver(source, "octo", "app", progress_callback=callback)
    return asyncio.run(resolver.resolve(deployment_id))


def test_success_found_after_failure():
    success = status("success", 40)
    source = FakeGitHub([], {7: [status("failure", 20), success]})
    assert _resolve(source, 7) == success
    assert source.status_calls == [("octo", "app", 7)]


def test_first_success_in_source_order_wins():
    later_listed = status("success", 10)
    source = FakeGitHub([], {1: [status("in_progress", 5), status("success", 90), later_listed]})
    assert _resolve(source, 1).created_at == status("success", 90).created_at


def test_no_success_is_absent_not_error():
    source = FakeGitHub([], {1: [status("pending", 5), status("failure", 9)], 2: []})
    assert _resolve(source, 1) is None
    assert _resolve(source, 2) is None


def test_progress_ticks_once_per_lookup():
    ticks = []
    source = FakeGitHub([], {1: [status("success", 3)], 2: []})
    _resolve(source, 1, ticks)
    _resolve(source, 2, ticks)
    assert ticks == [1, 2]


def test_failure_propagates_without_tick():
    ticks = []
    source = FakeGitHub([], {}, errors={3: GitHubAPIError("nope", status=500)})
    with pytest.raises(GitHubAPIError):
        _resolve(source, 3, ticks)
    assert ticks == []


def test_broken_progress_sink_does_not_change_results():
    success = status("success", 30)
    source = FakeGitHub([], {1: [success], 2: [status("failure", 5)]})

    def broken_sink():
        raise RuntimeError("progress bar already stopped")

    resolver = StatusResolver(source, "octo", "app", progress_callback=broken_sink)

    assert asyncio.run(resolver.resolve(1)) == success
    result = asyncio.run(collect_statuses(resolver, [deployment(1), deployment(2)], max_concurrency=2))
    assert result == {1: success, 2: None}
