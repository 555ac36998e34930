# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

import io
from typing import Iterator, Optional

import requests

from .errors import TransportError

DEFAULT_CHUNK_SIZE = 8192


class ResponseBodyStream(io.RawIOBase):
    """
    Readable byte stream over a live, streamed response body.

    The caller owns the stream and must close it; closing releases the underlying
    connection. Use it as a context manager::

        with client.query("SELECT Id FROM Account") as body:
            payload = body.read()

    Transport failures while reading surface as
    :class:`~salesforce_rest.core.errors.TransportError` for the request URL.
    """

    def __init__(self, response: requests.Response, url: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        super().__init__()
        self._response = response
        self._url = url
        self._chunks: Iterator[bytes] = response.iter_content(chunk_size=chunk_size)
        self._pending = b""

    @property
    def url(self) -> str:
        return self._url

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def headers(self):
        return self._response.headers

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed stream.")
        while not self._pending:
            chunk = self._next_chunk()
            if chunk is None:
                return 0
            self._pending = chunk
        view = memoryview(buffer).cast("B")
        n = min(len(view), len(self._pending))
        view[:n] = self._pending[:n]
        self._pending = self._pending[n:]
        return n

    def close(self) -> None:
        if self.closed:
            return
        try:
            self._response.close()
        finally:
            super().close()

    def _next_chunk(self) -> Optional[bytes]:
        try:
            return next(self._chunks, None)
        except requests.exceptions.RequestException as exc:
            raise TransportError(self._url, exc) from exc


__all__ = ["ResponseBodyStream"]
