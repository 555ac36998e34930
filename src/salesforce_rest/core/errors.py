# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Structured errors raised by the Salesforce REST client.

Every error derives from :class:`SalesforceError` and is tagged by its ``code``:

- ``configuration_error`` (:class:`ConfigurationError`): the transport could not be
  assembled from the supplied collaborators.
- ``http_error`` (:class:`HttpError`): the server rejected the request with a
  non-success status.
- ``transport_error`` (:class:`TransportError`): the request could not be carried
  out (connection, timeout, TLS, proxy or I/O failure).

Callers can branch on ``code`` or on the class; both are exhaustive.
"""

from __future__ import annotations

import datetime as _dt
from typing import Any, Dict, Optional

import requests

from . import _error_codes as ec


class SalesforceError(Exception):
    """Base structured error for the Salesforce REST client."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        subcode: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        source: Optional[str] = None,
        is_transient: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.subcode = subcode
        self.status_code = status_code
        self.details = details or {}
        self.source = source or "client"
        self.is_transient = is_transient
        self.timestamp = _dt.datetime.now(_dt.timezone.utc).isoformat().replace("+00:00", "Z")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "subcode": self.subcode,
            "status_code": self.status_code,
            "details": self.details,
            "source": self.source,
            "is_transient": self.is_transient,
            "timestamp": self.timestamp,
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"{self.__class__.__name__}(code={self.code!r}, subcode={self.subcode!r}, message={self.message!r})"


class ConfigurationError(SalesforceError):
    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=ec.CONFIGURATION_ERROR, subcode=subcode, details=details, source="client")


class HttpError(SalesforceError):
    """
    Application-level rejection: the server answered with a non-success status.

    :param status_code: HTTP status returned by the server.
    :type status_code: :class:`int`
    :param body: Response body text, or ``None`` when the response had no body.
    :type body: :class:`str` | None
    """

    def __init__(self, status_code: int, body: Optional[str]) -> None:
        super().__init__(
            f"Invalid response [{status_code}]: {body}",
            code=ec.HTTP_ERROR,
            subcode=ec.http_subcode(status_code),
            status_code=status_code,
            details={"body": body},
            source="server",
            is_transient=status_code in ec.TRANSIENT_STATUS_CODES,
        )
        self.body = body


class TransportError(SalesforceError):
    """
    Transport-level failure: the request to ``url`` could not be completed.

    The original exception is available as :attr:`cause` and is chained as
    ``__cause__`` when raised with ``raise ... from``.
    """

    def __init__(self, url: str, cause: BaseException) -> None:
        super().__init__(
            f"Salesforce HTTP request failed [{url}]",
            code=ec.TRANSPORT_ERROR,
            subcode=_transport_subcode(cause),
            details={"url": url, "cause": repr(cause)},
            source="client",
            is_transient=True,
        )
        self.url = url
        self.cause = cause


def _transport_subcode(cause: BaseException) -> str:
    # ProxyError and SSLError both derive from ConnectionError
    if isinstance(cause, requests.exceptions.ProxyError):
        return ec.TRANSPORT_PROXY
    if isinstance(cause, requests.exceptions.SSLError):
        return ec.TRANSPORT_SSL
    if isinstance(cause, requests.exceptions.Timeout):
        return ec.TRANSPORT_TIMEOUT
    if isinstance(cause, requests.exceptions.ConnectionError):
        return ec.TRANSPORT_CONNECTION
    return ec.TRANSPORT_IO


__all__ = ["SalesforceError", "ConfigurationError", "HttpError", "TransportError"]
