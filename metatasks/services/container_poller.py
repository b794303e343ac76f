"""Wait for an asynchronously processed media container to become publishable"""

import threading
import time
from enum import Enum
from typing import Callable, Optional

from tenacity import RetryError, Retrying, retry_if_exception, retry_if_result
from tenacity.stop import stop_base
from tenacity.wait import wait_base

from ..api.graph_client import GraphClient, decode_object
from ..models.media import ContainerStatus
from ..utils.exceptions import Cancelled, ProcessingFailed, ProcessingTimeout
from ..utils.logger import get_logger

logger = get_logger(__name__)


class PollState(str, Enum):
    POLLING = "polling"
    FINISHED = "finished"
    ERRORED = "errored"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


class stop_after_deadline(stop_base):
    """Stop once the injected clock has moved max_wait past start"""

    def __init__(self, clock: Callable[[], float], start: float, max_wait: float):
        self.clock = clock
        self.start = start
        self.max_wait = max_wait

    def __call__(self, retry_state) -> bool:
        return self.clock() - self.start >= self.max_wait


class wait_until_deadline(wait_base):
    """Wait poll_interval, cut short so the last attempt lands on the deadline"""

    def __init__(self, clock: Callable[[], float], start: float, max_wait: float, poll_interval: float):
        self.clock = clock
        self.start = start
        self.max_wait = max_wait
        self.poll_interval = poll_interval

    def __call__(self, retry_state) -> float:
        remaining = self.start + self.max_wait - self.clock()
        return max(0.0, min(self.poll_interval, remaining))


def _not_ready_error(exc: BaseException) -> bool:
    # Only ordinary errors mean "not ready yet"; host interrupts propagate
    return isinstance(exc, Exception) and not isinstance(exc, (ProcessingFailed, Cancelled))


class ContainerPoller:
    """
    Poll GET /{container_id}?fields=status_code until the container is ready.

    FINISHED returns. ERROR fails at once with ProcessingFailed. Any other
    status, and any failure reading the status, means "not ready yet" and
    polling continues until max_wait, which fails with ProcessingTimeout.
    Setting cancel_event aborts the wait with Cancelled.
    The last wait is shortened so no poll happens after max_wait.
    KeyboardInterrupt and SystemExit are never retried.
    """

    def __init__(
        self,
        client: GraphClient,
        poll_interval: float = 10,
        initial_delay: float = 2,
        max_wait: float = 300,
        status_read_timeout: float = 30,
        cancel_event: Optional[threading.Event] = None,
        sleep: Optional[Callable[[float], None]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = client
        self.poll_interval = poll_interval
        self.initial_delay = initial_delay
        self.max_wait = max_wait
        self.status_read_timeout = status_read_timeout
        self.cancel_event = cancel_event
        self._sleep = sleep
        self._clock = clock
        self.state: Optional[PollState] = None
        self.polls = 0

    def await_ready(self, container_id: str) -> None:
        """
        Block until container_id reaches FINISHED

        Raises:
            ProcessingFailed: Provider reported ERROR
            ProcessingTimeout: Still not ready after max_wait
            Cancelled: cancel_event was set while waiting
        """
        self.state = PollState.POLLING
        self.polls = 0
        start = self._clock()
        logger.info(
            "Waiting for media processing",
            container_id=container_id,
            poll_interval=self.poll_interval,
            max_wait=self.max_wait,
        )

        try:
            self._pause(self.initial_delay, container_id)
            retrying = Retrying(
                stop=stop_after_deadline(self._clock, start, self.max_wait),
                wait=wait_until_deadline(self._clock, start, self.max_wait, self.poll_interval),
                retry=(
                    retry_if_result(lambda status: status != ContainerStatus.FINISHED)
                    | retry_if_exception(_not_ready_error)
                ),
                sleep=lambda seconds: self._pause(seconds, container_id),
            )
            retrying(self._check_status, container_id)
        except RetryError:
            self.state = PollState.TIMED_OUT
            elapsed = self._clock() - start
            logger.error(
                "Media processing timed out",
                container_id=container_id,
                elapsed=round(elapsed, 1),
                polls=self.polls,
            )
            raise ProcessingTimeout(container_id, elapsed) from None
        except ProcessingFailed:
            self.state = PollState.ERRORED
            logger.error("Media processing failed", container_id=container_id, polls=self.polls)
            raise
        except Cancelled:
            self.state = PollState.CANCELLED
            logger.warning("Media processing wait cancelled", container_id=container_id)
            raise

        self.state = PollState.FINISHED
        logger.info("Media processing completed", container_id=container_id, polls=self.polls)

    def _check_status(self, container_id: str) -> ContainerStatus:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise Cancelled(container_id)

        self.polls += 1
        try:
            response = self.client.request(
                "GET",
                container_id,
                params={"fields": "status_code"},
                timeout=(self.client.connection_timeout, self.status_read_timeout),
            )
        except Exception as e:
            logger.debug("Status read failed, will retry", container_id=container_id, error=str(e))
            raise

        if not response.ok:
            logger.debug(
                "Status read returned error, will retry",
                container_id=container_id,
                status_code=response.status_code,
            )
            return ContainerStatus.UNKNOWN

        status = ContainerStatus.parse(decode_object(response.text).get("status_code"))
        logger.debug("Container status", container_id=container_id, status=status.value)
        if status == ContainerStatus.ERROR:
            raise ProcessingFailed(container_id)
        return status

    def _pause(self, seconds: float, container_id: str) -> None:
        if self.cancel_event is None:
            (self._sleep or time.sleep)(seconds)
            return
        if self._sleep is None:
            interrupted = self.cancel_event.wait(seconds)
        else:
            self._sleep(seconds)
            interrupted = self.cancel_event.is_set()
        if interrupted:
            raise Cancelled(container_id)
