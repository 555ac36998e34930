# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Shared pytest fixtures and configuration for Salesforce REST client tests.

This module provides a counting token provider, a standard configuration and
a fake transport adapter that records prepared requests and replays canned
responses without touching the network.
"""

import io

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from salesforce_rest.core.config import SalesforceConfiguration


class CountingTokenProvider:
    """Token supplier returning ``token-1``, ``token-2``, ... and counting calls."""

    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return f"token-{self.calls}"


class TrackingResponse(requests.Response):
    """Response remembering whether it was closed."""

    was_closed = False

    def close(self):
        self.was_closed = True
        super().close()


def make_response(request, status=200, body=b"", headers=None):
    response = TrackingResponse()
    response.status_code = status
    response.raw = io.BytesIO(body)
    response.headers = CaseInsensitiveDict(headers or {})
    response.encoding = "utf-8"
    response.url = request.url
    response.request = request
    return response


class FakeAdapter(BaseAdapter):
    """Adapter replaying queued ``(status, body)`` tuples or raising queued exceptions."""

    def __init__(self, responses=None):
        super().__init__()
        self._responses = list(responses or [])
        self.requests = []
        self.kwargs = []
        self.sent = []
        self.closed = False

    def send(self, request, **kwargs):
        self.requests.append(request)
        self.kwargs.append(kwargs)
        if not self._responses:
            raise AssertionError("No more responses")
        item = self._responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        status, body = item
        response = make_response(request, status, body)
        self.sent.append(response)
        return response

    def close(self):
        self.closed = True


@pytest.fixture
def token_provider():
    return CountingTokenProvider()


@pytest.fixture
def sample_instance_url():
    """Standard test instance URL."""
    return "https://example.my.salesforce.com"


@pytest.fixture
def config(sample_instance_url, token_provider):
    return SalesforceConfiguration(
        instance_url=sample_instance_url,
        version="58.0",
        response_timeout_millis=5000,
        access_token_provider=token_provider,
    )


@pytest.fixture
def mount_fake():
    """Mount a :class:`FakeAdapter` on a client's session and return it."""

    def _mount(client, responses):
        adapter = FakeAdapter(responses)
        client._session.mount("https://", adapter)
        client._session.mount("http://", adapter)
        return adapter

    return _mount


@pytest.fixture
def response_factory():
    """Build a :class:`TrackingResponse` for a prepared request."""
    return make_response
