from __future__ import annotations

from typing import Any


class MailpitError(Exception):
    """Base class for every failure raised by :class:`MailpitClient`."""


class MailpitResponseError(MailpitError):
    """The server answered with a status other than 200."""

    def __init__(self, message: str, status_code: int, reason: str, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason
        self.body = body


class MailpitNoResponseError(MailpitError):
    """The request went out but nothing came back (network failure, timeout)."""


class MailpitRequestError(MailpitError):
    """The request could not be built or dispatched."""


class MailpitUnexpectedError(MailpitError):
    """Any non-transport failure, e.g. a 200 body that does not decode."""
