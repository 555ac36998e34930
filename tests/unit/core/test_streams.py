# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import io
import json

import pytest
import requests

from salesforce_rest.core import _error_codes as ec
from salesforce_rest.core.errors import TransportError
from salesforce_rest.core.streams import ResponseBodyStream

URL = "https://example.my.salesforce.com/services/data/v58.0/query?q=x"


class FailingRaw(io.BytesIO):
    """Raw body that breaks after the first read."""

    def __init__(self, first):
        super().__init__(first)
        self._reads = 0

    def read(self, *args):
        self._reads += 1
        if self._reads > 1:
            raise requests.exceptions.ChunkedEncodingError("connection broken")
        return super().read(*args)


@pytest.fixture
def request_():
    return requests.Request("GET", URL).prepare()


def test_read_all(request_, response_factory):
    body = b'{"totalSize":1,"done":true,"records":[]}'
    stream = ResponseBodyStream(response_factory(request_, 200, body), URL)
    assert stream.read() == body
    assert stream.read() == b""
    stream.close()


def test_small_reads_across_chunks(request_, response_factory):
    stream = ResponseBodyStream(response_factory(request_, 200, b"abcdefghij"), URL, chunk_size=4)
    assert stream.read(3) == b"abc"
    # raw reads stop at chunk boundaries
    assert stream.read(3) == b"d"
    assert stream.read() == b"efghij"


def test_works_with_json_and_buffered_reader(request_, response_factory):
    stream = ResponseBodyStream(response_factory(request_, 200, b'{"a": [1, 2]}'), URL)
    with io.BufferedReader(stream) as reader:
        assert json.load(reader) == {"a": [1, 2]}


def test_exposes_status_and_headers(request_, response_factory):
    response = response_factory(request_, 200, b"", headers={"Sforce-Limit-Info": "api-usage=1/15000"})
    stream = ResponseBodyStream(response, URL)
    assert stream.status_code == 200
    assert stream.headers["sforce-limit-info"] == "api-usage=1/15000"
    assert stream.url == URL
    assert stream.readable()


def test_close_releases_response(request_, response_factory):
    response = response_factory(request_, 200, b"unread")
    with ResponseBodyStream(response, URL) as stream:
        assert not stream.closed
    assert stream.closed
    assert response.was_closed


def test_close_is_idempotent(request_, response_factory):
    stream = ResponseBodyStream(response_factory(request_, 200, b""), URL)
    stream.close()
    stream.close()


def test_read_after_close(request_, response_factory):
    stream = ResponseBodyStream(response_factory(request_, 200, b"abc"), URL)
    stream.close()
    with pytest.raises(ValueError):
        stream.read()


def test_mid_transfer_failure_is_transport_error(request_, response_factory):
    response = response_factory(request_, 200)
    response.raw = FailingRaw(b"first-chunk")
    stream = ResponseBodyStream(response, URL, chunk_size=11)

    assert stream.read(11) == b"first-chunk"
    with pytest.raises(TransportError) as ei:
        stream.read(11)

    assert ei.value.url == URL
    assert ei.value.subcode == ec.TRANSPORT_IO
    assert isinstance(ei.value.__cause__, requests.exceptions.ChunkedEncodingError)
