"""Shared fixtures for activity feed tests."""
import json

import pytest

from storage.cache_store import CacheMiss


class FakeClock:
    """Manually advanced epoch clock."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class InMemoryCacheStore:
    """Cache store keeping entries in a dict with clock-based expiry."""

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.entries = {}
        self.get_calls = []
        self.set_calls = []

    def get(self, key: str) -> bytes:
        self.get_calls.append(key)
        entry = self.entries.get(key)
        if entry is None or entry[1] <= self.clock():
            raise CacheMiss(key)
        return entry[0]

    def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        self.set_calls.append((key, value, ttl_seconds))
        self.entries[key] = (value, self.clock() + ttl_seconds)

    def close(self) -> None:
        pass


def make_event(event_type, repo='octo/repo', payload=None, event_id='1'):
    """Build one event object shaped like the events API response."""
    return {
        'id': event_id,
        'type': event_type,
        'actor': {'login': 'octocat'},
        'repo': {'name': repo},
        'payload': payload or {},
        'created_at': '2024-01-15T10:00:00Z'
    }


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_cache(clock):
    return InMemoryCacheStore(clock)


@pytest.fixture
def sample_events():
    """Events of mixed types in origin order."""
    return [
        make_event(
            'PushEvent',
            payload={'commits': [{'message': 'msg1'}, {'message': 'msg2'}]},
            event_id='101'
        ),
        make_event('WatchEvent', payload={'action': 'started'}, event_id='102'),
        make_event(
            'CreateEvent',
            payload={'ref': 'feature-x', 'ref_type': 'branch'},
            event_id='103'
        ),
        make_event('PushEvent', payload={'commits': [{'message': 'msg3'}]}, event_id='104'),
        make_event('UnknownFutureEvent', event_id='105'),
    ]


@pytest.fixture
def sample_payload(sample_events):
    return json.dumps(sample_events).encode('utf-8')


@pytest.fixture
def event_factory():
    return make_event
