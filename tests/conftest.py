"""Shared fixtures: a scripted Graph API session and a controllable clock"""

import json

import pytest
import requests

from metatasks.api.graph_client import GraphClient
from metatasks.services.container_poller import ContainerPoller


def make_response(status_code=200, payload=None, text=None):
    """Build a real requests.Response carrying a JSON (or raw) body"""
    response = requests.Response()
    response.status_code = status_code
    body = text if text is not None else json.dumps(payload if payload is not None else {})
    response._content = body.encode("utf-8")
    response.encoding = "utf-8"
    return response


class FakeGraphSession:
    """
    Stand-in for requests.Session keyed by (METHOD, endpoint).

    Each route holds a queue of responses; the last one repeats once the
    queue is drained. A queued exception instance is raised instead.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []
        self.closed = False

    def add(self, method, endpoint, *responses):
        self.routes.setdefault((method, endpoint), []).extend(responses)
        return self

    def request(self, method, url, params=None, json=None, headers=None, timeout=None):
        endpoint = url.split("/", 4)[4]
        self.calls.append(
            {
                "method": method,
                "endpoint": endpoint,
                "url": url,
                "params": dict(params or {}),
                "json": json,
                "headers": dict(headers or {}),
                "timeout": timeout,
            }
        )
        queue = self.routes.get((method, endpoint))
        if not queue:
            return make_response(404, {"error": {"message": f"No route for {method} {endpoint}", "code": 803}})
        result = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(result, BaseException):
            raise result
        return result

    def calls_to(self, method, endpoint):
        return [c for c in self.calls if c["method"] == method and c["endpoint"] == endpoint]

    def close(self):
        self.closed = True


class FakeClock:
    """Monotonic clock that only moves when sleep() is called"""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def session():
    return FakeGraphSession()


@pytest.fixture
def client(session):
    return GraphClient("test-token", session=session)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def poller(client, clock):
    return ContainerPoller(
        client,
        poll_interval=10,
        initial_delay=2,
        max_wait=300,
        sleep=clock.sleep,
        clock=clock,
    )
