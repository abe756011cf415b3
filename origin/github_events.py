"""HTTP client for the GitHub user events endpoint."""
import logging
from typing import Optional
from urllib.parse import quote

import requests

from pipeline.errors import TransportError, UserNotFoundError

logger = logging.getLogger(__name__)


class GitHubEventsClient:
    """Client fetching a user's public events from the GitHub REST API."""

    BASE_URL = "https://api.github.com"
    USER_AGENT = "github-activity"

    def __init__(
        self,
        timeout: int = 30,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the events client.

        Args:
            timeout: HTTP request timeout in seconds (default: 30)
            base_url: API root, defaults to the public GitHub API
            token: Optional token sent as a bearer credential
            session: Optional requests session to reuse
        """
        self.timeout = timeout
        self.base_url = (base_url or self.BASE_URL).rstrip('/')
        self.token = token
        self.session = session or requests.Session()

    def events_url(self, username: str) -> str:
        return f"{self.base_url}/users/{quote(username, safe='')}/events"

    def fetch_events(self, username: str) -> bytes:
        """
        Fetch the raw events payload for a user. No retries are made.

        Args:
            username: GitHub username

        Returns:
            Response body as bytes, unparsed

        Raises:
            UserNotFoundError: If the API answers 404
            TransportError: On network failure, timeout or any other non-2xx
        """
        url = self.events_url(username)
        headers = {
            'Accept': 'application/vnd.github+json',
            'User-Agent': self.USER_AGENT
        }
        if self.token:
            headers['Authorization'] = f"Bearer {self.token}"

        logger.info(f"Fetching events for {username} from {url}")

        try:
            response = self.session.get(url, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Request for {username} events failed: {e}")
            raise TransportError(f"failed on get events: {e}") from e

        if response.status_code == 404:
            raise UserNotFoundError(username)

        if not response.ok:
            logger.error(
                f"Events request for {username} returned HTTP {response.status_code}"
            )
            raise TransportError(
                f"failed on get events: HTTP {response.status_code}",
                status_code=response.status_code
            )

        data = response.content
        logger.info(f"Fetched {len(data)} bytes of events for {username}")
        return data

    def close(self) -> None:
        self.session.close()
