"""Event classifier mapping raw GitHub events to activity messages."""
import logging
from typing import Dict, Iterable, List, NamedTuple, Optional

from processor.models import Activity, RawEvent

logger = logging.getLogger(__name__)


class SubActionRule(NamedTuple):
    """Message templates selected by a payload field."""
    field: str
    templates: Dict[str, str]
    default: Optional[str]


# Templates are formatted with: repo, ref, commits, forkee, member, number
SIMPLE_TEMPLATES = {
    'PushEvent': 'Pushed {commits} commits to {repo}',
    'ForkEvent': 'Forked repository to {forkee}',
    'GollumEvent': 'Created page in wiki to {repo}',
    'MemberEvent': 'Added a member {member} to {repo}',
    'PublicEvent': 'The repository {repo} is public',
    'PullRequestReviewEvent': 'Created pull request review in {repo}',
    'PullRequestReviewCommentEvent': 'Created pull request review comment in {repo}',
    'ReleaseEvent': 'Published release in {repo}',
    'SponsorshipEvent': 'Created sponsorship in {repo}',
    'WatchEvent': 'Starred {repo}',
}

SUB_ACTION_RULES = {
    'CreateEvent': SubActionRule(
        field='ref_type',
        templates={
            'repository': 'Created a new repository called {repo}',
            'branch': 'Created a new branch {ref} in {repo}',
        },
        default='Created a new tag {ref} in {repo}'
    ),
    'DeleteEvent': SubActionRule(
        field='ref_type',
        templates={
            'branch': 'Deleted branch {ref} in {repo}',
        },
        default='Deleted tag {ref} in {repo}'
    ),
    'IssueCommentEvent': SubActionRule(
        field='action',
        templates={
            'created': 'Created a new comment in {repo}',
            'edited': 'Edited a comment in {repo}',
        },
        default='Deleted a comment in {repo}'
    ),
    # Unlisted issue actions produce an empty message
    'IssuesEvent': SubActionRule(
        field='action',
        templates={
            'opened': 'Opened a new issue in {repo}',
            'edited': 'Edited a issue in {repo}',
            'closed': 'Closed a issue in {repo}',
            'reopened': 'Reopened a issue in {repo}',
            'assigned': 'Assigned a issue in {repo}',
            'unassigned': 'Unassigned a issue in {repo}',
            'labeled': 'Labeled a issue in {repo}',
            'unlabeled': 'Unlabeled a issue in {repo}',
        },
        default=None
    ),
    'PullRequestEvent': SubActionRule(
        field='action',
        templates={
            'opened': 'Opened pull request #{number} in {repo}',
            'edited': 'Edited pull request #{number} in {repo}',
            'closed': 'Closed pull request #{number} in {repo}',
            'reopened': 'Reopened pull request #{number} in {repo}',
            'assigned': 'Assigned pull request #{number} in {repo}',
            'unassigned': 'Unassigned pull request #{number} in {repo}',
            'review_requested': 'Review requested pull request #{number} in {repo}',
            'review_request_removed': 'Review request removed pull request #{number} in {repo}',
            'labeled': 'Labeled pull request #{number} in {repo}',
            'unlabeled': 'Unlabeled pull request #{number} in {repo}',
        },
        default='Synchronized pull request #{number} in {repo}'
    ),
    'PullRequestReviewThreadEvent': SubActionRule(
        field='action',
        templates={
            'resolved': 'Resolved pull request review thread in {repo}',
        },
        default='Unresolved pull request review thread in {repo}'
    ),
}


class EventClassifier:
    """Classifier turning raw events into normalized activities."""

    def __init__(
        self,
        simple_templates: Optional[Dict[str, str]] = None,
        sub_action_rules: Optional[Dict[str, SubActionRule]] = None
    ):
        """
        Initialize the classifier with its message tables.

        Args:
            simple_templates: Event type to message template
            sub_action_rules: Event type to payload-dependent templates
        """
        self.simple_templates = (
            SIMPLE_TEMPLATES if simple_templates is None else simple_templates
        )
        self.sub_action_rules = (
            SUB_ACTION_RULES if sub_action_rules is None else sub_action_rules
        )

    def classify_events(self, events: Iterable[RawEvent]) -> List[Activity]:
        """
        Classify events, preserving their order.

        Args:
            events: Raw events in origin order

        Returns:
            One Activity per event
        """
        activities = [self.classify(event) for event in events]

        unclassified = sum(1 for activity in activities if not activity.message)
        if unclassified:
            logger.debug(f"{unclassified} events produced an empty message")

        logger.info(f"Classified {len(activities)} events")
        return activities

    def classify(self, event: RawEvent) -> Activity:
        """
        Classify a single event. Never raises.

        Args:
            event: Raw event

        Returns:
            Activity carrying the event type and its message, which is empty
            for unrecognized type/action combinations
        """
        template = self._select_template(event)
        if template is None:
            return Activity(event=event.type, message='')

        return Activity(
            event=event.type,
            message=template.format(**self._template_fields(event))
        )

    def _select_template(self, event: RawEvent) -> Optional[str]:
        if event.type in self.simple_templates:
            return self.simple_templates[event.type]

        rule = self.sub_action_rules.get(event.type)
        if rule is None:
            return None

        key = getattr(event.payload, rule.field)
        return rule.templates.get(key, rule.default)

    def _template_fields(self, event: RawEvent) -> Dict[str, object]:
        payload = event.payload
        return {
            'repo': event.repo.name,
            'ref': payload.ref,
            'commits': len(payload.commits),
            'forkee': payload.forkee.full_name,
            'member': payload.member,
            'number': payload.number,
        }
