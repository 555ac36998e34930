# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote, urlencode

import requests

from .common.constants import (
    BEARER_PREFIX,
    COMPOSITE_TREE_PATH,
    DESCRIBE_SUFFIX,
    HEADER_AUTHORIZATION,
    HEADER_CONTENT_TYPE,
    JSON_MEDIA_TYPE,
    QUERY_PARAMETER,
    QUERY_PATH,
    SOBJECTS_PATH,
)
from .core._http import _TransportOptions, _build_session
from .core.config import SalesforceConfiguration
from .core.errors import HttpError, TransportError
from .core.proxy import ProxyConfiguration
from .core.streams import ResponseBodyStream
from .core.tls import TlsProvider

logger = logging.getLogger(__name__)


class SalesforceRestClient:
    """
    Bearer-token client for the Salesforce REST API.

    The client builds one :class:`requests.Session` at construction from the optional
    transport collaborators and reuses it for every request. It is safe to share
    across threads: nothing is mutated after construction.

    Every request carries ``Authorization: Bearer <token>`` with a token fetched from
    the configuration's provider immediately before the request is built. Nothing is
    retried; a failed call raises one of:

    - :class:`~salesforce_rest.core.errors.HttpError` when the server answers with a
      non-success status (``Invalid response [status]: body``).
    - :class:`~salesforce_rest.core.errors.TransportError` when the request cannot be
      carried out (``Salesforce HTTP request failed [url]``).

    :param configuration: Instance URL, API version, read timeout and token provider.
    :type configuration: ~salesforce_rest.core.config.SalesforceConfiguration
    :param proxy_configuration: Optional outbound proxy. ``None`` or a ``DIRECT`` proxy
        connects directly.
    :type proxy_configuration: ~salesforce_rest.core.proxy.ProxyConfiguration or None
    :param tls_provider: Optional source of trust material and SSL context. ``None``
        uses the default trust store.
    :type tls_provider: ~salesforce_rest.core.tls.TlsProvider or None
    :param http_protocol_strategy: Optional object exposing an ordered ``protocols``
        sequence, such as :class:`~salesforce_rest.core.protocols.HttpProtocolStrategy`.
    :type http_protocol_strategy: Any

    :raises ~salesforce_rest.core.errors.ConfigurationError: If a collaborator cannot
        supply usable transport settings.

    Example::

        config = SalesforceConfiguration(
            instance_url="https://example.my.salesforce.com",
            version="54.0",
            response_timeout_millis=15000,
            access_token_provider=token_cache.current,
        )
        with SalesforceRestClient(config) as client:
            with client.query("SELECT Id, Name FROM Account") as body:
                page = json.load(body)
    """

    def __init__(
        self,
        configuration: SalesforceConfiguration,
        proxy_configuration: Optional[ProxyConfiguration] = None,
        tls_provider: Optional[TlsProvider] = None,
        http_protocol_strategy: Optional[Any] = None,
    ) -> None:
        self.configuration = configuration
        self._session: Optional[requests.Session] = _build_session(
            _TransportOptions(
                proxy_configuration=proxy_configuration,
                tls_provider=tls_provider,
                http_protocol_strategy=http_protocol_strategy,
            ),
            configuration.response_timeout_millis,
        )

    def __enter__(self) -> "SalesforceRestClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """
        Close the underlying session and release pooled connections.

        Safe to call multiple times. The client must not be used afterwards.
        """
        if self._session is not None:
            self._session.close()
            self._session = None

    @property
    def versioned_base_url(self) -> str:
        return self.configuration.versioned_base_url

    # ----------------------------- Operations ---------------------------------

    def describe_sobject(self, sobject: str) -> ResponseBodyStream:
        """
        Describe the schema of an sObject.

        :param sobject: sObject API name, e.g. ``"Account"``.
        :type sobject: str
        :return: Open stream over the describe response body. The caller must close it.
        :rtype: ~salesforce_rest.core.streams.ResponseBodyStream
        """
        url = self._url(SOBJECTS_PATH + sobject + DESCRIBE_SUFFIX)
        return self._execute("GET", url)

    def query(self, query: str) -> ResponseBodyStream:
        """
        Run a SOQL query.

        :param query: SOQL statement, sent percent-encoded as the ``q`` parameter.
        :type query: str
        :return: Open stream over the first page of results. The caller must close it.
        :rtype: ~salesforce_rest.core.streams.ResponseBodyStream
        """
        url = self._url(QUERY_PATH) + "?" + urlencode({QUERY_PARAMETER: query}, quote_via=quote)
        return self._execute("GET", url)

    def get_next_records(self, next_records_url: str) -> ResponseBodyStream:
        """
        Fetch the next page of a query.

        :param next_records_url: ``nextRecordsUrl`` path from a previous query response.
            Appended verbatim to the instance URL; the configured API version is not applied.
        :type next_records_url: str
        :return: Open stream over the page. The caller must close it.
        :rtype: ~salesforce_rest.core.streams.ResponseBodyStream
        """
        url = self.configuration.instance_url + next_records_url
        return self._execute("GET", url)

    def post_record(self, sobject_api_name: str, body: str) -> None:
        """
        Create a tree of records with the composite tree resource.

        The response body is read and discarded once the status has been checked.

        :param sobject_api_name: sObject API name of the root records.
        :type sobject_api_name: str
        :param body: JSON payload in the composite tree format.
        :type body: str
        """
        url = self._url(COMPOSITE_TREE_PATH + sobject_api_name)
        headers = {HEADER_CONTENT_TYPE: JSON_MEDIA_TYPE}
        with self._execute("POST", url, headers=headers, data=body.encode("utf-8")) as response_body:
            response_body.read()

    # ----------------------------- Internals ---------------------------------

    def _url(self, path: str) -> str:
        return self.configuration.versioned_base_url + path

    def _headers(self) -> Dict[str, str]:
        token = self.configuration.access_token_provider()
        return {HEADER_AUTHORIZATION: BEARER_PREFIX + token}

    def _execute(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        data: Optional[bytes] = None,
    ) -> ResponseBodyStream:
        if self._session is None:
            raise RuntimeError("SalesforceRestClient is closed.")
        request_headers = self._headers()
        if headers:
            request_headers.update(headers)

        logger.debug("%s %s", method, url)
        response: Optional[requests.Response] = None
        try:
            response = self._session.request(method, url, headers=request_headers, data=data, stream=True)
            logger.debug("%s %s -> %d", method, url, response.status_code)
            if not 200 <= response.status_code < 300:
                try:
                    text = response.text
                finally:
                    response.close()
                raise HttpError(response.status_code, text)
            return ResponseBodyStream(response, url)
        except requests.exceptions.RequestException as exc:
            if response is not None:
                response.close()
            raise TransportError(url, exc) from exc
