"""
Event publisher implementations.

Both satisfy IEventPublisher; which one a process uses is decided once,
at wiring time, by ``build_event_publisher``.
"""

import json
import logging
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from kiliniks.core.config import (
    EVENT_SOURCE,
    get_event_bus_name,
    get_event_publish_timeout,
    get_event_publisher_kind,
)
from kiliniks.core.exceptions import NotificationError
from kiliniks.domain.interfaces import IEventPublisher

logger = logging.getLogger(__name__)


class ConsolePublisher(IEventPublisher):
    """Inert publisher for local development: writes events to the log."""

    def publish(self, event_name: str, payload: Dict[str, Any]) -> None:
        logger.info(
            f"[EventPublished] {event_name}: "
            f"{json.dumps(payload, indent=2, default=str)}",
            extra={"context": {"event_name": event_name}},
        )


class EventBridgePublisher(IEventPublisher):
    """Publishes events to an Amazon EventBridge bus."""

    def __init__(
        self,
        bus_name: str,
        client=None,
        source: str = EVENT_SOURCE,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        self.bus_name = bus_name
        self.source = source
        self.timeout_seconds = (
            timeout_seconds
            if timeout_seconds is not None
            else get_event_publish_timeout()
        )
        self._client = client

    @property
    def client(self):
        # Created lazily so a missing region only fails the publish, not startup
        if self._client is None:
            self._client = boto3.client(
                "events",
                config=Config(
                    connect_timeout=self.timeout_seconds,
                    read_timeout=self.timeout_seconds,
                    retries={"total_max_attempts": 1, "mode": "standard"},
                ),
            )
        return self._client

    def publish(self, event_name: str, payload: Dict[str, Any]) -> None:
        logger.info(
            f"Publishing event {event_name} to {self.bus_name}",
            extra={"context": {"event_name": event_name, "bus": self.bus_name}},
        )
        try:
            response = self.client.put_events(
                Entries=[
                    {
                        "EventBusName": self.bus_name,
                        "Source": self.source,
                        "DetailType": event_name,
                        "Detail": json.dumps(payload, default=str),
                    }
                ]
            )
        except (BotoCoreError, ClientError) as e:
            raise NotificationError(
                f"Failed to publish {event_name} to {self.bus_name}: {e}"
            ) from e

        if response.get("FailedEntryCount", 0):
            errors = [
                entry.get("ErrorCode")
                for entry in response.get("Entries", [])
                if entry.get("ErrorCode")
            ]
            raise NotificationError(
                f"EventBridge rejected {event_name}: {', '.join(errors) or 'unknown error'}"
            )


def build_event_publisher(kind: Optional[str] = None) -> IEventPublisher:
    """Select the publisher implementation for this process."""
    kind = (kind or get_event_publisher_kind()).strip().lower()
    if kind == "console":
        return ConsolePublisher()
    if kind == "eventbridge":
        return EventBridgePublisher(get_event_bus_name())
    raise ValueError(f"Unknown event publisher: {kind}")
