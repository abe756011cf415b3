"""Unit tests for ActivityPipeline, parse_events and filter_events."""
import json
from unittest.mock import Mock

import pytest

from pipeline.activity_pipeline import ActivityPipeline, filter_events, parse_events
from pipeline.errors import MalformedResponseError, TransportError, UserNotFoundError
from pipeline.retrieval import RetrievalCoordinator
from processor.models import Activity


def make_pipeline(payload=None, error=None):
    origin = Mock()
    if error is not None:
        origin.fetch_events.side_effect = error
    else:
        origin.fetch_events.return_value = payload
    return ActivityPipeline(RetrievalCoordinator(origin)), origin


class TestParseEvents:
    """Test cases for parse_events."""

    def test_parse_preserves_order(self, sample_payload):
        """Test that events come back in origin order."""
        events = parse_events(sample_payload)

        assert [event.id for event in events] == ['101', '102', '103', '104', '105']

    def test_parse_empty_array(self):
        """Test that an empty feed parses to no events."""
        assert parse_events(b'[]') == []

    @pytest.mark.parametrize('data', [
        b'not json',
        b'',
        b'\xff\xfe',
        b'{"message": "Not Found"}',
        b'[1, 2]',
        b'["PushEvent"]',
    ])
    def test_parse_malformed(self, data):
        """Test that non-array payloads raise MalformedResponseError."""
        with pytest.raises(MalformedResponseError) as exc_info:
            parse_events(data)

        assert exc_info.value.kind == 'malformed_response'


class TestFilterEvents:
    """Test cases for filter_events."""

    def test_filter_keeps_matching_subsequence(self, sample_payload):
        """Test that only exact type matches remain, in order."""
        events = parse_events(sample_payload)

        filtered = filter_events(events, 'PushEvent')

        assert [event.id for event in filtered] == ['101', '104']

    def test_filter_is_idempotent(self, sample_payload):
        """Test that filtering twice gives the same result."""
        events = parse_events(sample_payload)

        once = filter_events(events, 'PushEvent')

        assert filter_events(once, 'PushEvent') == once

    def test_filter_is_case_sensitive(self, sample_payload):
        """Test that matching is exact, not case-insensitive."""
        events = parse_events(sample_payload)

        assert filter_events(events, 'pushevent') == []
        assert filter_events(events, 'Push') == []

    @pytest.mark.parametrize('event_type', [None, ''])
    def test_no_filter_keeps_everything(self, sample_payload, event_type):
        """Test that an empty filter is a no-op."""
        events = parse_events(sample_payload)

        assert filter_events(events, event_type) == events


class TestActivityPipeline:
    """Test cases for ActivityPipeline class."""

    def test_run_classifies_in_order(self, sample_payload):
        """Test end-to-end classification of a mixed feed."""
        pipeline, origin = make_pipeline(sample_payload)

        activities = pipeline.run('octocat')

        assert activities == [
            Activity(event='PushEvent', message='Pushed 2 commits to octo/repo'),
            Activity(event='WatchEvent', message='Starred octo/repo'),
            Activity(
                event='CreateEvent',
                message='Created a new branch feature-x in octo/repo'
            ),
            Activity(event='PushEvent', message='Pushed 1 commits to octo/repo'),
            Activity(event='UnknownFutureEvent', message=''),
        ]
        origin.fetch_events.assert_called_once_with('octocat')

    def test_run_with_filter(self, sample_payload):
        """Test that the filter is applied before classification."""
        pipeline, _ = make_pipeline(sample_payload)

        activities = pipeline.run('octocat', event_type='PushEvent')

        assert [activity.message for activity in activities] == [
            'Pushed 2 commits to octo/repo',
            'Pushed 1 commits to octo/repo',
        ]

    def test_run_filter_without_matches(self, sample_payload):
        """Test that a filter with no matches yields no activities."""
        pipeline, _ = make_pipeline(sample_payload)

        assert pipeline.run('octocat', event_type='ReleaseEvent') == []

    def test_run_keeps_unknown_events(self, event_factory):
        """Test that unknown event types are not dropped."""
        payload = json.dumps([event_factory('UnknownFutureEvent')]).encode()
        pipeline, _ = make_pipeline(payload)

        assert pipeline.run('octocat') == [
            Activity(event='UnknownFutureEvent', message='')
        ]

    @pytest.mark.parametrize('error', [
        UserNotFoundError('doesnotexist'),
        TransportError('unreachable'),
    ])
    def test_run_propagates_retrieval_errors(self, error):
        """Test that retrieval failures abort the run."""
        pipeline, _ = make_pipeline(error=error)

        with pytest.raises(type(error)):
            pipeline.run('doesnotexist')

    def test_run_propagates_parse_errors(self):
        """Test that parse failures abort the run."""
        pipeline, _ = make_pipeline(b'<html>rate limited</html>')

        with pytest.raises(MalformedResponseError):
            pipeline.run('octocat')
