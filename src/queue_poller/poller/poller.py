"""
Module: poller.py
Description: Receive-process-delete polling loop over an SQS queue.

QueuePoller repeatedly receives batches of messages, hands each batch to
a user handler and deletes the handled messages, until a hook or the
handler raises StopPolling, stop() is called, or the idle timeout is
reached.

Key Components:
- QueuePoller: Poll loop with before-request and error hooks
- StopPolling / SkipDelete: Cooperative signals raised by hooks and handlers
- PollStats: Session counters, exposed to callbacks as immutable snapshots

Dependencies: botocore, structlog (via utils.logger)
"""

import inspect
import time
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from botocore.exceptions import BotoCoreError, ClientError

from queue_poller.config.settings import settings
from queue_poller.exceptions import (
    ConfigurationError,
    QueuePollerError,
    SkipDelete,
    StopPolling,
)
from queue_poller.models.message import Message
from queue_poller.models.poll import PollConfiguration, PollStats, PollStatsSnapshot
from queue_poller.models.response import BatchDeleteResult
from queue_poller.sqs_queue.base import QueueClient
from queue_poller.sqs_queue.sqs import SQSClient
from queue_poller.utils.batch_helpers import chunk_list
from queue_poller.utils.logger import get_logger

logger = get_logger(__name__)

Handler = Callable[[List[Message], PollStatsSnapshot], Any]
BeforeRequestHook = Callable[[PollStatsSnapshot], Any]
ErrorHook = Callable[[Exception, PollStatsSnapshot], Any]

# Errors from receive/delete calls that end one iteration, not the session
RECOVERABLE_ERRORS = (QueuePollerError, ClientError, BotoCoreError, OSError)


async def _invoke(callback: Callable[..., Any], *args: Any) -> Any:
    """Call a plain or async callback and return its result."""
    result = callback(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


class QueuePoller:
    """
    Long-running consumer of a single SQS queue.

    Each iteration runs the before-request hooks, receives one batch,
    invokes the handler with the batch and a stats snapshot, then deletes
    the batch with one delete_message_batch call unless skip_delete is set
    or the handler raised SkipDelete.

    Attributes:
        queue_url: URL of the polled queue
        config: Validated PollConfiguration
        client: QueueClient used for receive and delete calls

    Example:
        >>> poller = QueuePoller(queue_url, {"max_number_of_messages": 10, "idle_timeout": 3})
        >>> @poller.before_request
        ... def stop_after_100(stats):
        ...     if stats.received_message_count >= 100:
        ...         raise StopPolling()
        >>> stats = await poller.poll(lambda messages, stats: print(len(messages)))
    """

    def __init__(
        self,
        queue_url: str,
        config: Optional[Union[PollConfiguration, Mapping[str, Any]]] = None,
        client: Optional[QueueClient] = None
    ):
        """
        Initialize the poller.

        Args:
            queue_url: URL of the queue to poll
            config: PollConfiguration or a mapping of its fields
                (defaults to the poll_* values of Settings)
            client: Queue client (defaults to an SQSClient built from Settings)

        Raises:
            ConfigurationError: If queue_url is empty or the configuration is out of range
        """
        if not queue_url or not isinstance(queue_url, str):
            raise ConfigurationError("queue_url must be a non-empty string")

        if config is None:
            config = PollConfiguration.from_settings(settings)
        elif isinstance(config, Mapping):
            config = PollConfiguration(**config)
        elif not isinstance(config, PollConfiguration):
            raise ConfigurationError("config must be a PollConfiguration or a mapping")

        self.queue_url = queue_url
        self.config = config
        self.client = client or SQSClient()

        self._before_request_hooks: List[BeforeRequestHook] = []
        self._error_hooks: List[ErrorHook] = []
        self._stop_requested = False

        logger.info(
            "Queue poller initialized",
            queue_url=queue_url,
            max_number_of_messages=config.max_number_of_messages,
            wait_time_seconds=config.wait_time_seconds,
            visibility_timeout=config.visibility_timeout,
            skip_delete=config.skip_delete,
            idle_timeout=config.idle_timeout
        )

    def before_request(self, hook: BeforeRequestHook) -> BeforeRequestHook:
        """
        Register a hook called with a stats snapshot before every receive.

        Hooks run in registration order. Raising StopPolling ends the
        session without issuing the receive. Usable as a decorator.
        """
        self._before_request_hooks.append(hook)
        return hook

    def on_error(self, hook: ErrorHook) -> ErrorHook:
        """
        Register a hook called with (error, stats) when a receive or delete fails.

        Usable as a decorator.
        """
        self._error_hooks.append(hook)
        return hook

    def stop(self) -> None:
        """Ask the running poll session to end before its next receive."""
        self._stop_requested = True

    async def poll(self, handler: Handler) -> PollStatsSnapshot:
        """
        Run the poll loop until a stop condition fires.

        Args:
            handler: Called with (messages, stats) for every non-empty receive;
                may be a coroutine function

        Returns:
            Final statistics of the session

        Raises:
            QueuePollerError: If the very first receive fails
            Exception: Anything the handler raises other than StopPolling/SkipDelete
        """
        stats = PollStats()
        stats.start()
        self._stop_requested = False

        logger.info("Polling started", queue_url=self.queue_url)

        try:
            while not self._stop_requested:
                try:
                    for hook in self._before_request_hooks:
                        await _invoke(hook, stats.snapshot())
                except StopPolling:
                    logger.info("Stop requested by before-request hook", queue_url=self.queue_url)
                    break

                if self._stop_requested:
                    break

                messages = await self._receive(stats)
                if messages is None:
                    continue

                if not messages:
                    if self._idle_timeout_reached(stats):
                        logger.info(
                            "Idle timeout reached",
                            queue_url=self.queue_url,
                            consecutive_empty_receives=stats.consecutive_empty_receives
                        )
                        break
                    continue

                await self._process_batch(messages, stats, handler)

        finally:
            stats.stop()
            logger.info(
                "Polling stopped",
                queue_url=self.queue_url,
                request_count=stats.request_count,
                received_message_count=stats.received_message_count,
                error_count=stats.error_count
            )

        return stats.snapshot()

    def _idle_timeout_reached(self, stats: PollStats) -> bool:
        idle_timeout = self.config.idle_timeout
        return idle_timeout is not None and stats.consecutive_empty_receives >= idle_timeout

    async def _receive(self, stats: PollStats) -> Optional[List[Message]]:
        """
        Issue one receive request.

        Returns the received messages, or None when the request failed and
        the failure was reported to the error hooks. A failure on the first
        request of the session is raised instead.
        """
        started = time.monotonic()
        try:
            messages = await self.client.receive_message(
                self.queue_url,
                max_number_of_messages=self.config.max_number_of_messages,
                wait_time_seconds=self.config.wait_time_seconds,
                visibility_timeout=self.config.visibility_timeout,
                attribute_names=self.config.attribute_names or None,
                message_attribute_names=self.config.message_attribute_names or None
            )
        except RECOVERABLE_ERRORS as e:
            stats.record_request(time.monotonic() - started)
            if stats.request_count == 1:
                logger.error(
                    "First receive failed, aborting poll session",
                    queue_url=self.queue_url,
                    error=str(e),
                    error_type=type(e).__name__
                )
                raise
            await self._report_error(e, stats)
            return None

        stats.record_request(time.monotonic() - started)
        stats.record_receive(len(messages))
        return messages

    async def _process_batch(
        self,
        messages: List[Message],
        stats: PollStats,
        handler: Handler
    ) -> None:
        should_delete = not self.config.skip_delete

        try:
            await _invoke(handler, list(messages), stats.snapshot())
        except SkipDelete:
            logger.debug("Handler skipped delete", queue_url=self.queue_url, message_count=len(messages))
            should_delete = False
        except StopPolling:
            logger.info("Stop requested by handler", queue_url=self.queue_url)
            self._stop_requested = True

        if should_delete:
            await self._delete_batch(messages, stats)

    async def _delete_batch(self, messages: List[Message], stats: PollStats) -> None:
        # Entry ids are batch positions; message ids are not guaranteed distinct
        by_entry_id: Dict[str, Message] = {str(i): m for i, m in enumerate(messages)}
        entries = [
            {'id': entry_id, 'receipt_handle': message.receipt_handle}
            for entry_id, message in by_entry_id.items()
        ]

        try:
            result = await self.client.delete_message_batch(self.queue_url, entries)
        except RECOVERABLE_ERRORS as e:
            await self._report_error(e, stats)
            return

        if not result.is_successful:
            stats.record_delete_failures(len(result.failed))
            logger.warning(
                "Failed to delete handled messages",
                queue_url=self.queue_url,
                message_ids=[
                    by_entry_id[failure.id].message_id
                    for failure in result.failed
                    if failure.id in by_entry_id
                ],
                error_codes=[failure.code for failure in result.failed]
            )

    async def _report_error(self, error: Exception, stats: PollStats) -> None:
        stats.record_error()

        if not self._error_hooks:
            logger.warning(
                "Poll iteration failed, continuing",
                queue_url=self.queue_url,
                error=str(error),
                error_type=type(error).__name__
            )
            return

        snapshot = stats.snapshot()
        try:
            for hook in self._error_hooks:
                await _invoke(hook, error, snapshot)
        except StopPolling:
            logger.info("Stop requested by error hook", queue_url=self.queue_url)
            self._stop_requested = True

    async def delete_message(self, message: Message) -> None:
        """Delete one handled message (for sessions running with skip_delete)."""
        await self.client.delete_message(self.queue_url, message.receipt_handle)

    async def delete_messages(self, messages: List[Message]) -> List[BatchDeleteResult]:
        """
        Delete any number of messages, ten per batch request.

        Args:
            messages: Messages previously delivered to a handler

        Returns:
            One BatchDeleteResult per batch request issued
        """
        results = []
        for chunk in chunk_list(list(messages)):
            entries = [
                {'id': str(i), 'receipt_handle': message.receipt_handle}
                for i, message in enumerate(chunk)
            ]
            results.append(await self.client.delete_message_batch(self.queue_url, entries))
        return results

    async def change_message_visibility(self, message: Message, visibility_timeout: int) -> None:
        """Extend or shorten how long a handled message stays hidden."""
        await self.client.change_message_visibility(
            self.queue_url,
            message.receipt_handle,
            visibility_timeout
        )
