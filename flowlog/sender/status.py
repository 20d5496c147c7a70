import logging
from enum import Enum
from typing import TYPE_CHECKING, Optional

from flowlog.constants import MAX_RETRIES

if TYPE_CHECKING:
    from flowlog.transport import TransportResponse

logger = logging.getLogger(__name__)

NO_RESPONSE = -1


class SendOutcome(str, Enum):
    """
    What happens to the outstanding batch after an attempt.
    """

    DELIVERED = "delivered"
    REJECTED = "rejected"
    RETRY = "retry"
    DISCARDED = "discarded"


def _is_2xx(status: int) -> bool:
    return 200 <= status <= 299


def _is_4xx(status: int) -> bool:
    return 400 <= status <= 499


class SendStatus:
    """
    Send/retry bookkeeping of a single sender worker.

    ``retry_count`` counts transient failures of the outstanding batch. Once it
    goes past ``max_retries`` the batch is given up, so a batch is attempted at
    most ``1 + max_retries`` times.
    """

    def __init__(self, max_retries: int = MAX_RETRIES):
        self.max_retries = max_retries
        self.retry_last_send = False
        self.retry_count = 0
        self.initial_status()

    def initial_status(self) -> None:
        self.last_send_successful = False
        self.last_response_status = 0
        self.last_response: Optional[str] = None

    def response_status(self, response: "TransportResponse") -> None:
        """
        Classify an HTTP response.
        """
        self.last_response_status = response.status_code
        self.last_response = response.body

        if _is_2xx(response.status_code):
            self.last_send_successful = True
            return

        self.last_send_successful = False

        if _is_4xx(response.status_code):
            # A malformed request will not get correct by retrying
            self.retry_last_send = False
            return

        self.retry_last_send = True
        self.retry_count += 1

    def exception_status(self, error: Optional[BaseException] = None) -> None:
        """
        Record a failed attempt that produced no response.
        """
        self.last_send_successful = False
        self.last_response_status = NO_RESPONSE
        self.last_response = str(error) if error is not None else None
        self.retry_last_send = True
        self.retry_count += 1

    def _exhausted(self) -> bool:
        return self.retry_last_send and self.retry_count > self.max_retries

    def _status_message(self, batch_size: int) -> str:
        if self.last_send_successful:
            return (
                f"Succeeded in sending {batch_size} transactions. "
                f"HTTP status code: {self.last_response_status}"
            )

        if self._exhausted():
            return (
                f"Failed to send {batch_size} transactions after {self.retry_count} "
                "tries. Discarding the entries."
            )

        if self.last_response_status == NO_RESPONSE:
            return f"Failed to send transactions. Connection failed: {self.last_response}"

        message = (
            f"Failed to send transactions. HTTP status code: {self.last_response_status}"
            f" Response body: {self.last_response}"
        )
        if not self.retry_last_send:
            message += " Discarding the entries."
        return message

    def continuation_status(self, batch_size: int = 0) -> SendOutcome:
        """
        Log the attempt and decide what happens to the outstanding batch.

        Resets the retry bookkeeping once the batch is finished with.
        """
        if self.last_send_successful:
            logger.debug(self._status_message(batch_size))
        else:
            logger.error(self._status_message(batch_size))

        if self.last_send_successful:
            outcome = SendOutcome.DELIVERED
        elif self._exhausted():
            outcome = SendOutcome.DISCARDED
        elif self.retry_last_send:
            return SendOutcome.RETRY
        else:
            outcome = SendOutcome.REJECTED

        self.retry_last_send = False
        self.retry_count = 0
        return outcome
