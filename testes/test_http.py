import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
requests = pytest.importorskip("requests")

from contentful_migrator.utils.http import RateLimiter, with_retries


def make_response(status, headers=None):
    resp = requests.Response()
    resp.status_code = status
    resp.headers.update(headers or {})
    resp.url = "https://api.contentful.com/x"
    return resp


def sequence(*items):
    calls = []

    def fn():
        item = items[len(calls)]
        calls.append(item)
        if isinstance(item, Exception):
            raise item
        return item

    return fn, calls


def test_retries_throttling_using_retry_after():
    sleeps = []
    fn, calls = sequence(make_response(429, {"Retry-After": "2"}), make_response(200))
    resp = with_retries(fn, sleep_fn=sleeps.append)
    assert resp.status_code == 200
    assert sleeps == [2.0]
    assert len(calls) == 2


def test_contentful_reset_header_and_backoff():
    sleeps = []
    fn, _ = sequence(
        make_response(429, {"X-Contentful-RateLimit-Reset": "1"}),
        make_response(503),
        make_response(200),
    )
    with_retries(fn, base_delay=0.5, sleep_fn=sleeps.append)
    assert sleeps == [1.0, 1.0]


def test_client_errors_are_not_retried():
    fn, calls = sequence(make_response(404), make_response(200))
    with pytest.raises(requests.HTTPError):
        with_retries(fn, sleep_fn=lambda s: None)
    assert len(calls) == 1


def test_gives_up_after_max_attempts():
    fn, calls = sequence(*[make_response(500)] * 3)
    with pytest.raises(requests.HTTPError):
        with_retries(fn, max_attempts=3, sleep_fn=lambda s: None)
    assert len(calls) == 3


def test_connection_errors_are_retried():
    fn, calls = sequence(requests.ConnectionError("boom"), make_response(200))
    assert with_retries(fn, sleep_fn=lambda s: None).status_code == 200
    assert len(calls) == 2


def test_rate_limiter_sleeps_for_the_remaining_interval():
    clock = iter([100.0, 100.0, 100.05, 100.2])
    sleeps = []
    limiter = RateLimiter(rpm=600)
    limiter.wait(time_fn=lambda: next(clock), sleep_fn=sleeps.append)
    limiter.wait(time_fn=lambda: next(clock), sleep_fn=sleeps.append)
    assert sleeps == [pytest.approx(0.05)]
