"""Command-line entry point for the GitHub activity feed."""
import contextlib
import json
import logging
import os
import time
from typing import Annotated, Optional

import typer

from origin.github_events import GitHubEventsClient
from pipeline.activity_pipeline import ActivityPipeline
from pipeline.errors import ActivityError
from pipeline.retrieval import RetrievalCoordinator
from presentation.renderers import render
from storage.cache_store import CacheStore, RedisCacheStore
from storage.dynamodb_cache import DynamoDBCacheStore

logger = logging.getLogger(__name__)

_RECORD_ATTRIBUTES = set(vars(logging.makeLogRecord({}))) | {'message', 'asctime'}


# Configure JSON logging
class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON, including any extra context fields."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRIBUTES and key not in log_data:
                log_data[key] = value

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(log_level: str = 'WARNING') -> None:
    """
    Configure logging with JSON formatter on stderr.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.WARNING))


def build_cache_store(
    redis_host: Optional[str],
    redis_port: int,
    cache_table: Optional[str]
) -> Optional[CacheStore]:
    """
    Build the configured cache store, if any.

    Args:
        redis_host: Redis host; enables the Redis store when set
        redis_port: Redis port
        cache_table: DynamoDB table; enables the DynamoDB store when set

    Returns:
        Cache store, or None when caching is disabled
    """
    if redis_host:
        return RedisCacheStore(host=redis_host, port=redis_port)
    if cache_table:
        return DynamoDBCacheStore(table_name=cache_table)
    return None


app = typer.Typer(
    add_completion=False,
    help="Show a GitHub user's recent public activity."
)


@app.command()
def main(
    username: Annotated[str, typer.Argument(help="GitHub username")],
    event: Annotated[
        Optional[str], typer.Option("--event", help="Event type to filter")
    ] = None,
    format_output: Annotated[
        str, typer.Option("--format-output", help="Output format: json, table or rows")
    ] = '',
    redis_host: Annotated[
        Optional[str],
        typer.Option("--redis-host", envvar="REDIS_HOST", help="Redis host to cache")
    ] = None,
    redis_port: Annotated[
        int, typer.Option("--redis-port", envvar="REDIS_PORT", help="Redis port to cache")
    ] = 6379,
    cache_table: Annotated[
        Optional[str],
        typer.Option("--cache-table", envvar="CACHE_TABLE_NAME", help="DynamoDB table to cache")
    ] = None,
    timeout: Annotated[
        int, typer.Option("--timeout", envvar="TIMEOUT_SECONDS", help="HTTP timeout in seconds")
    ] = 30,
    api_url: Annotated[
        Optional[str], typer.Option("--api-url", envvar="GITHUB_API_URL", help="GitHub API root")
    ] = None,
    log_level: Annotated[
        str, typer.Option("--log-level", envvar="LOG_LEVEL", help="Logging level")
    ] = 'WARNING',
) -> None:
    """Fetch, classify and print the public events of USERNAME."""
    setup_logging(log_level)

    if redis_host and cache_table:
        raise typer.BadParameter("use either --redis-host or --cache-table, not both")

    start_time = time.time()
    logger.info(
        "Activity run started",
        extra={
            'username': username,
            'event_filter': event,
            'cache': 'redis' if redis_host else 'dynamodb' if cache_table else None
        }
    )

    try:
        with contextlib.ExitStack() as stack:
            origin = GitHubEventsClient(
                timeout=timeout,
                base_url=api_url,
                token=os.environ.get('GITHUB_TOKEN')
            )
            stack.callback(origin.close)

            cache_store = build_cache_store(redis_host, redis_port, cache_table)
            if cache_store is not None:
                stack.enter_context(cache_store)

            pipeline = ActivityPipeline(RetrievalCoordinator(origin, cache_store))
            activities = pipeline.run(username, event)
    except ActivityError as e:
        logger.error(
            f"Activity run failed: {e}",
            extra={'error_type': e.kind}
        )
        typer.echo(f"Error ({e.kind}): {e}", err=True)
        raise typer.Exit(code=1)
    except Exception as e:
        logger.error(
            f"Activity run failed unexpectedly: {e}",
            extra={'error_type': type(e).__name__},
            exc_info=True
        )
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    render(activities, format_output)

    duration = time.time() - start_time
    logger.info(
        "Activity run completed",
        extra={
            'activities': len(activities),
            'duration_seconds': round(duration, 2)
        }
    )


if __name__ == '__main__':
    app()
