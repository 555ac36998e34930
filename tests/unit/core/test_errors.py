# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import pytest
import requests

from salesforce_rest.core import _error_codes as ec
from salesforce_rest.core.errors import ConfigurationError, HttpError, SalesforceError, TransportError


def test_http_error_fields():
    err = HttpError(401, '[{"errorCode":"INVALID_SESSION_ID"}]')
    assert isinstance(err, SalesforceError)
    assert err.message == 'Invalid response [401]: [{"errorCode":"INVALID_SESSION_ID"}]'
    assert err.code == ec.HTTP_ERROR
    assert err.subcode == "http_401"
    assert err.source == "server"
    assert err.details == {"body": '[{"errorCode":"INVALID_SESSION_ID"}]'}


def test_http_error_without_body():
    err = HttpError(500, None)
    assert str(err) == "Invalid response [500]: None"
    assert err.body is None


@pytest.mark.parametrize("status, transient", [(400, False), (404, False), (429, True), (502, True), (504, True)])
def test_http_error_transient_hint(status, transient):
    assert HttpError(status, "").is_transient is transient


@pytest.mark.parametrize(
    "cause, subcode",
    [
        (requests.exceptions.ConnectionError("refused"), ec.TRANSPORT_CONNECTION),
        (requests.exceptions.ConnectTimeout("slow"), ec.TRANSPORT_TIMEOUT),
        (requests.exceptions.ReadTimeout("slow"), ec.TRANSPORT_TIMEOUT),
        (requests.exceptions.SSLError("handshake"), ec.TRANSPORT_SSL),
        (requests.exceptions.ProxyError("proxy down"), ec.TRANSPORT_PROXY),
        (requests.exceptions.ChunkedEncodingError("cut"), ec.TRANSPORT_IO),
    ],
)
def test_transport_error_subcodes(cause, subcode):
    err = TransportError("https://x.com/a", cause)
    assert err.subcode == subcode
    assert err.cause is cause
    assert err.url == "https://x.com/a"
    assert err.message == "Salesforce HTTP request failed [https://x.com/a]"


def test_configuration_error():
    err = ConfigurationError("bad tls", subcode=ec.CONFIGURATION_TLS)
    assert err.code == ec.CONFIGURATION_ERROR
    assert err.source == "client"
    assert err.is_transient is False


def test_to_dict_round_trips_fields():
    data = TransportError("https://x.com/a", requests.exceptions.ConnectionError("refused")).to_dict()
    assert data["code"] == ec.TRANSPORT_ERROR
    assert data["is_transient"] is True
    assert data["details"]["url"] == "https://x.com/a"
    assert data["timestamp"].endswith("Z")
    assert set(data) == {
        "message",
        "code",
        "subcode",
        "status_code",
        "details",
        "source",
        "is_transient",
        "timestamp",
    }


def test_codes_are_exhaustive():
    kinds = {ConfigurationError("x").code, HttpError(400, "").code, TransportError("u", OSError()).code}
    assert kinds == {ec.CONFIGURATION_ERROR, ec.HTTP_ERROR, ec.TRANSPORT_ERROR}
