"""
Module: poll.py
Description: Poll session configuration and statistics models.

Defines the validated PollConfiguration used to build a QueuePoller and
the PollStats counters the poller maintains for a single poll session.

Key Components:
- PollConfiguration: Batch size, wait time, visibility timeout and stop options
- PollStatsSnapshot: Immutable view of the session counters
- PollStats: Mutable counters owned by the poller

Dependencies: pydantic, datetime, typing
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict, ValidationError

from queue_poller.exceptions import ConfigurationError

MAX_NUMBER_OF_MESSAGES = 10
MAX_WAIT_TIME_SECONDS = 20
MAX_VISIBILITY_TIMEOUT = 43200


class PollConfiguration(BaseModel):
    """
    Configuration of a poll session.

    Values outside the ranges SQS accepts are rejected with
    ConfigurationError at construction, before any request is issued.

    Attributes:
        max_number_of_messages: Messages requested per receive (1-10)
        wait_time_seconds: Long-poll duration; None uses the queue default
        visibility_timeout: Seconds received messages stay hidden; None uses the queue default
        skip_delete: When True the poller never deletes messages
        idle_timeout: Stop after this many consecutive empty receives
        attribute_names: System attributes to request with each message
        message_attribute_names: User attributes to request with each message
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_number_of_messages: int = Field(
        default=MAX_NUMBER_OF_MESSAGES,
        ge=1,
        le=MAX_NUMBER_OF_MESSAGES,
        description="Messages requested per receive call"
    )
    wait_time_seconds: Optional[int] = Field(
        default=None,
        ge=0,
        le=MAX_WAIT_TIME_SECONDS,
        description="Long-poll duration in seconds"
    )
    visibility_timeout: Optional[int] = Field(
        default=None,
        ge=0,
        le=MAX_VISIBILITY_TIMEOUT,
        description="Visibility timeout in seconds"
    )
    skip_delete: bool = Field(default=False, description="Never delete handled messages")
    idle_timeout: Optional[int] = Field(
        default=None,
        ge=1,
        description="Consecutive empty receives before the session stops"
    )
    attribute_names: List[str] = Field(default_factory=list)
    message_attribute_names: List[str] = Field(default_factory=list)

    def __init__(self, **data):
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid poll configuration: {e}") from e

    @classmethod
    def from_settings(cls, settings) -> "PollConfiguration":
        """
        Build a configuration from the poll_* fields of Settings.

        Args:
            settings: Settings instance

        Returns:
            Validated PollConfiguration

        Raises:
            ConfigurationError: If the configured defaults are out of range
        """
        return cls(
            max_number_of_messages=settings.poll_max_number_of_messages,
            wait_time_seconds=settings.poll_wait_time_seconds,
            visibility_timeout=settings.poll_visibility_timeout,
            skip_delete=settings.poll_skip_delete,
            idle_timeout=settings.poll_idle_timeout,
        )


class PollStatsSnapshot(BaseModel):
    """
    Read-only view of poll session statistics.

    Handed to hooks and handlers; the poller keeps mutating its own
    PollStats, so a snapshot never changes after it is taken.
    """

    model_config = ConfigDict(frozen=True)

    request_count: int = 0
    received_message_count: int = 0
    consecutive_empty_receives: int = 0
    last_request_duration: Optional[float] = None
    delete_failure_count: int = 0
    error_count: int = 0
    polling_started_at: Optional[datetime] = None
    polling_stopped_at: Optional[datetime] = None
    last_message_received_at: Optional[datetime] = None

    @property
    def elapsed_time(self) -> float:
        """Seconds since polling started (until it stopped, if it has)."""
        if self.polling_started_at is None:
            return 0.0
        end = self.polling_stopped_at or datetime.now(timezone.utc)
        return (end - self.polling_started_at).total_seconds()


class PollStats(PollStatsSnapshot):
    """Mutable session counters. Only the polling task updates them."""

    model_config = ConfigDict(frozen=False)

    def snapshot(self) -> PollStatsSnapshot:
        """Return an immutable copy of the current counters."""
        return PollStatsSnapshot(**self.model_dump())

    def start(self) -> None:
        self.polling_started_at = datetime.now(timezone.utc)

    def stop(self) -> None:
        self.polling_stopped_at = datetime.now(timezone.utc)

    def record_request(self, duration: float) -> None:
        self.request_count += 1
        self.last_request_duration = duration

    def record_receive(self, message_count: int) -> None:
        """Update counters for a receive that returned message_count messages."""
        if message_count == 0:
            self.consecutive_empty_receives += 1
            return
        self.consecutive_empty_receives = 0
        self.received_message_count += message_count
        self.last_message_received_at = datetime.now(timezone.utc)

    def record_error(self) -> None:
        self.error_count += 1

    def record_delete_failures(self, count: int) -> None:
        self.delete_failure_count += count
