from typing import NamedTuple, Protocol


class TransportResponse(NamedTuple):
    """
    Outcome of one delivery attempt.
    """

    status_code: int
    body: str = ""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code <= 299

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code <= 499


class Transport(Protocol):
    """
    Delivers an encoded batch of transactions to the log service.
    """

    def send(self, payload: bytes) -> TransportResponse:
        """
        Send a request body.

        Raises:
            TransportError: On connection failures and timeouts.
        """
        ...

    def close(self) -> None:
        """Release any held connections."""
        ...
