"""Activity pipeline: retrieve, parse, filter and classify events."""
import json
import logging
from typing import List, Optional

from pipeline.errors import MalformedResponseError
from pipeline.retrieval import RetrievalCoordinator
from processor.event_classifier import EventClassifier
from processor.models import Activity, RawEvent

logger = logging.getLogger(__name__)


def parse_events(data: bytes) -> List[RawEvent]:
    """
    Parse an events payload into raw events, keeping origin order.

    Args:
        data: JSON array of event objects

    Returns:
        List of RawEvent objects

    Raises:
        MalformedResponseError: If the payload is not a JSON array of objects
    """
    try:
        items = json.loads(data)
    except (ValueError, UnicodeDecodeError) as e:
        raise MalformedResponseError(f"failed on unmarshal body: {e}") from e

    if not isinstance(items, list):
        raise MalformedResponseError(
            f"failed on unmarshal body: expected an array, got {type(items).__name__}"
        )

    events = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise MalformedResponseError(
                f"failed on unmarshal body: element {index} is not an object"
            )
        events.append(RawEvent.from_dict(item))

    return events


def filter_events(events: List[RawEvent], event_type: Optional[str]) -> List[RawEvent]:
    """Keep events whose type equals event_type exactly; no filter when empty."""
    if not event_type:
        return list(events)
    return [event for event in events if event.type == event_type]


class ActivityPipeline:
    """Pipeline turning a username into an ordered list of activities."""

    def __init__(
        self,
        coordinator: RetrievalCoordinator,
        classifier: Optional[EventClassifier] = None
    ):
        self.coordinator = coordinator
        self.classifier = classifier or EventClassifier()

    def run(self, username: str, event_type: Optional[str] = None) -> List[Activity]:
        """
        Produce the activities for a user.

        Any retrieval or parse error aborts the run; no partial results.

        Args:
            username: GitHub username
            event_type: Optional exact event type to keep

        Returns:
            Activities in origin order
        """
        data = self.coordinator.retrieve(username)

        events = parse_events(data)
        logger.info(f"Parsed {len(events)} events for {username}")

        if event_type:
            events = filter_events(events, event_type)
            logger.info(f"{len(events)} events match filter {event_type}")

        return self.classifier.classify_events(events)
