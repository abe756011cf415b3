"""Data models for GitHub events and normalized activities."""
from dataclasses import dataclass, field
from typing import Any, Dict, List


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ''


@dataclass
class Repo:
    """Repository an event happened in."""
    name: str = ''


@dataclass
class Commit:
    """Commit carried by a push payload."""
    message: str = ''


@dataclass
class Forkee:
    """Repository created by a fork."""
    full_name: str = ''


@dataclass
class Payload:
    """Type-dependent event payload; absent fields keep their zero value."""
    ref: str = ''
    ref_type: str = ''
    commits: List[Commit] = field(default_factory=list)
    forkee: Forkee = field(default_factory=Forkee)
    action: str = ''
    member: str = ''
    number: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> 'Payload':
        """
        Build a payload from a decoded JSON object.

        Args:
            data: Payload object from the events API (may be missing)

        Returns:
            Payload with every absent or mistyped field left at its zero value
        """
        data = _as_dict(data)

        commits = data.get('commits')
        if not isinstance(commits, list):
            commits = []

        # The live API sends the member as a user object
        member = data.get('member')
        if isinstance(member, dict):
            member = member.get('login')

        number = data.get('number')
        if not isinstance(number, int) or isinstance(number, bool):
            number = 0

        return cls(
            ref=_as_str(data.get('ref')),
            ref_type=_as_str(data.get('ref_type')),
            commits=[
                Commit(message=_as_str(_as_dict(commit).get('message')))
                for commit in commits
            ],
            forkee=Forkee(
                full_name=_as_str(_as_dict(data.get('forkee')).get('full_name'))
            ),
            action=_as_str(data.get('action')),
            member=_as_str(member),
            number=number
        )


@dataclass
class RawEvent:
    """One unprocessed activity record as delivered by the events API."""
    id: str = ''
    type: str = ''
    created_at: str = ''
    repo: Repo = field(default_factory=Repo)
    payload: Payload = field(default_factory=Payload)

    @classmethod
    def from_dict(cls, item: Dict[str, Any]) -> 'RawEvent':
        """
        Build an event from one element of the events API response.

        Args:
            item: Decoded JSON object for a single event

        Returns:
            RawEvent instance
        """
        return cls(
            id=_as_str(item.get('id')),
            type=_as_str(item.get('type')),
            created_at=_as_str(item.get('created_at')),
            repo=Repo(name=_as_str(_as_dict(item.get('repo')).get('name'))),
            payload=Payload.from_dict(item.get('payload'))
        )


@dataclass
class Activity:
    """Classified, human-readable representation of an event."""
    event: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {'event': self.event, 'message': self.message}
