from http import HTTPStatus
from typing import Optional, Union


class KrakenError(Exception):
    """Base class for every error raised by the Kraken connector."""


class KrakenConfigurationError(KrakenError, ValueError):
    """Credential material or settings are missing or invalid. Raised before any network call."""


class KrakenSignatureError(KrakenConfigurationError):
    """The API secret cannot be used to sign requests (e.g. it is not valid base64)."""


class KrakenRequestError(KrakenError, IOError):
    """
    A request did not produce the expected typed result.

    `status` is the HTTP status returned by the exchange, or BAD_REQUEST when the transport failed
    before any status was received.
    """

    def __init__(self, status: Union[int, HTTPStatus], message: Optional[str] = None):
        self.status = _as_http_status(status)
        super().__init__(message or f"Request failed with HTTP status {int(self.status)}.")


class KrakenResponseDecodeError(KrakenRequestError):
    """The response body is not JSON or does not match the result shape of the endpoint."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(HTTPStatus.BAD_REQUEST, message or "Response body does not match the expected shape.")


def _as_http_status(status: Union[int, HTTPStatus]) -> Union[int, HTTPStatus]:
    try:
        return HTTPStatus(int(status))
    except ValueError:
        # non standard codes sent by proxies are kept as plain integers
        return int(status)
