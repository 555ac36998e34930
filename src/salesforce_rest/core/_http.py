# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Transport assembly for the Salesforce REST client.

This module resolves the optional transport collaborators (proxy, TLS provider,
protocol strategy) into a single configured :class:`requests.Session`. All of the
"is this collaborator present" decisions live in :func:`_build_session`; the client
never inspects the collaborators again after construction.
"""

from __future__ import annotations

import logging
import re
import ssl
import threading
from dataclasses import dataclass
from http.cookiejar import DefaultCookiePolicy
from typing import Any, Dict, Optional, Sequence, Tuple

import requests
from requests.adapters import HTTPAdapter

from ..common.constants import HEADER_PROXY_AUTHORIZATION, PROXY_AUTHENTICATION_REQUIRED
from . import _error_codes as ec
from .errors import ConfigurationError
from .protocols import negotiable_protocols
from .proxy import BasicProxyAuthenticator, ProxyConfiguration
from .tls import TlsProvider

logger = logging.getLogger(__name__)

DEFAULT_CONNECT_TIMEOUT = 10.0

# Status line raised by http.client when a CONNECT is refused
_TUNNEL_CHALLENGE = re.compile(r"^Tunnel connection failed: %d\b" % PROXY_AUTHENTICATION_REQUIRED)


@dataclass(frozen=True)
class _TransportOptions:
    """
    Optional collaborators shaping the transport. ``None`` means "platform default".

    :param proxy_configuration: Outbound proxy route.
    :type proxy_configuration: ~salesforce_rest.core.proxy.ProxyConfiguration or None
    :param tls_provider: Trust material and SSL context source.
    :type tls_provider: ~salesforce_rest.core.tls.TlsProvider or None
    :param http_protocol_strategy: Object exposing an ordered ``protocols`` sequence.
    :type http_protocol_strategy: Any
    """

    proxy_configuration: Optional[ProxyConfiguration] = None
    tls_provider: Optional[TlsProvider] = None
    http_protocol_strategy: Optional[Any] = None


def _read_timeout(response_timeout_millis: int) -> Optional[float]:
    # Zero disables the read timeout; urllib3 rejects a literal 0
    if response_timeout_millis == 0:
        return None
    return response_timeout_millis / 1000.0


class _SalesforceAdapter(HTTPAdapter):
    """
    :class:`~requests.adapters.HTTPAdapter` with a fixed timeout, an optional bound
    SSL context and an optional proxy authenticator.

    The timeout given at construction replaces any per-request timeout. When a proxy
    answers ``407``, the authenticator is asked for a new request and that request
    is sent once. Plain HTTP requests see the challenge as a response. Tunnelled
    HTTPS requests see it as a :class:`~requests.exceptions.ProxyError` raised while
    opening the CONNECT tunnel; those are re-sent through a tunnel adapter whose
    CONNECT carries the credentials.
    """

    def __init__(
        self,
        *,
        timeout: Tuple[float, Optional[float]],
        ssl_context: Optional[ssl.SSLContext] = None,
        proxy_authenticator: Optional[BasicProxyAuthenticator] = None,
        tunnel_headers: Optional[Dict[str, str]] = None,
        **kwargs: Any,
    ) -> None:
        # init_poolmanager runs inside HTTPAdapter.__init__ and reads these
        self._timeout = timeout
        self._ssl_context = ssl_context
        self._proxy_authenticator = proxy_authenticator
        self._tunnel_headers = dict(tunnel_headers or {})
        self._tunnel_adapter: Optional[_SalesforceAdapter] = None
        self._tunnel_lock = threading.Lock()
        super().__init__(**kwargs)

    @property
    def timeout(self) -> Tuple[float, Optional[float]]:
        return self._timeout

    @property
    def ssl_context(self) -> Optional[ssl.SSLContext]:
        return self._ssl_context

    @property
    def proxy_authenticator(self) -> Optional[BasicProxyAuthenticator]:
        return self._proxy_authenticator

    def init_poolmanager(self, *args: Any, **pool_kwargs: Any) -> None:
        if self._ssl_context is not None:
            pool_kwargs["ssl_context"] = self._ssl_context
        super().init_poolmanager(*args, **pool_kwargs)

    def proxy_manager_for(self, proxy: str, **proxy_kwargs: Any):
        if self._ssl_context is not None:
            proxy_kwargs.setdefault("ssl_context", self._ssl_context)
        return super().proxy_manager_for(proxy, **proxy_kwargs)

    def proxy_headers(self, proxy: str) -> Dict[str, str]:
        headers = super().proxy_headers(proxy)
        headers.update(self._tunnel_headers)
        return headers

    def send(self, request: requests.PreparedRequest, **kwargs: Any) -> requests.Response:
        kwargs["timeout"] = self._timeout
        try:
            response = super().send(request, **kwargs)
        except requests.exceptions.ProxyError as exc:
            retry = self._answer_tunnel_challenge(request, exc)
            if retry is None:
                raise
            credential = retry.headers.pop(HEADER_PROXY_AUTHORIZATION)
            logger.debug("Proxy tunnel challenged %s; retrying with credentials", request.url)
            return self._tunnel(credential).send(retry, **kwargs)

        if response.status_code != PROXY_AUTHENTICATION_REQUIRED or self._proxy_authenticator is None:
            return response
        retry = self._proxy_authenticator.authenticate(request)
        if retry is None:
            return response
        logger.debug("Proxy challenged %s; retrying with credentials", request.url)
        response.close()
        return super().send(retry, **kwargs)

    def close(self) -> None:
        super().close()
        with self._tunnel_lock:
            if self._tunnel_adapter is not None:
                self._tunnel_adapter.close()
                self._tunnel_adapter = None

    def _answer_tunnel_challenge(
        self, request: requests.PreparedRequest, exc: requests.exceptions.ProxyError
    ) -> Optional[requests.PreparedRequest]:
        if self._proxy_authenticator is None or not _is_tunnel_challenge(exc):
            return None
        return self._proxy_authenticator.authenticate(request)

    def _tunnel(self, credential: str) -> "_SalesforceAdapter":
        with self._tunnel_lock:
            if self._tunnel_adapter is None:
                self._tunnel_adapter = _SalesforceAdapter(
                    timeout=self._timeout,
                    ssl_context=self._ssl_context,
                    tunnel_headers={HEADER_PROXY_AUTHORIZATION: credential},
                )
            return self._tunnel_adapter


def _is_tunnel_challenge(exc: requests.exceptions.ProxyError) -> bool:
    """
    Whether the proxy refused the CONNECT with ``407``.

    requests wraps urllib3's ``MaxRetryError``, whose ``reason`` is a urllib3
    ``ProxyError`` carrying the ``OSError`` raised by :mod:`http.client`. Only that
    ``OSError``'s own message is inspected; the wrappers' text includes the request
    URL and must not be searched.
    """
    pending: list = [exc]
    seen = set()
    while pending:
        current = pending.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        if (
            isinstance(current, OSError)
            and not isinstance(current, requests.exceptions.RequestException)
            and _TUNNEL_CHALLENGE.match(str(current))
        ):
            return True
        for attr in ("reason", "original_error", "__cause__", "__context__"):
            linked = getattr(current, attr, None)
            if isinstance(linked, BaseException):
                pending.append(linked)
        pending.extend(arg for arg in current.args if isinstance(arg, BaseException))
    return False


def _bind_tls(session: requests.Session, tls_provider: TlsProvider) -> ssl.SSLContext:
    try:
        trust_manager = tls_provider.create_trust_manager()
        ssl_context = tls_provider.create_context()
    except Exception as exc:
        raise ConfigurationError(
            f"TLS provider failed to supply trust material: {exc}",
            subcode=ec.CONFIGURATION_TLS,
        ) from exc
    session.verify = trust_manager
    return ssl_context


def _select_protocols(strategy: Any) -> Tuple[str, ...]:
    requested: Sequence[str] = tuple(strategy.protocols)
    protocols = negotiable_protocols(requested)
    if not protocols:
        raise ConfigurationError(
            f"None of the requested HTTP protocols {list(requested)} are supported by the transport.",
            subcode=ec.CONFIGURATION_PROTOCOLS,
            details={"requested": list(requested)},
        )
    return protocols


def _build_session(options: _TransportOptions, response_timeout_millis: int) -> requests.Session:
    """
    Assemble the session used for every request of a client.

    Absent collaborators are skipped: no proxy, the default trust store, the default
    protocol negotiation. The session never reads proxies or credentials from the
    environment and never stores cookies.

    :raises ~salesforce_rest.core.errors.ConfigurationError: If a collaborator cannot
        supply usable settings. The partially built session is closed first.
    """
    session = requests.Session()
    try:
        session.trust_env = False
        session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))

        ssl_context: Optional[ssl.SSLContext] = None
        if options.tls_provider is not None:
            ssl_context = _bind_tls(session, options.tls_provider)
            logger.debug("Bound TLS context from %s", type(options.tls_provider).__name__)

        if options.http_protocol_strategy is not None:
            protocols = _select_protocols(options.http_protocol_strategy)
            if ssl_context is not None:
                ssl_context.set_alpn_protocols(list(protocols))
            logger.debug("Negotiating HTTP protocols %s", list(protocols))

        proxy_authenticator: Optional[BasicProxyAuthenticator] = None
        if options.proxy_configuration is not None:
            try:
                proxy_url = options.proxy_configuration.create_proxy()
            except ValueError as exc:
                raise ConfigurationError(str(exc), subcode=ec.CONFIGURATION_PROXY) from exc
            if proxy_url is not None:
                session.proxies = {"http": proxy_url, "https": proxy_url}
                proxy_authenticator = options.proxy_configuration.create_authenticator()
                logger.debug(
                    "Routing requests through proxy %s (authenticated=%s)",
                    proxy_url,
                    proxy_authenticator is not None,
                )

        adapter = _SalesforceAdapter(
            timeout=(DEFAULT_CONNECT_TIMEOUT, _read_timeout(response_timeout_millis)),
            ssl_context=ssl_context,
            proxy_authenticator=proxy_authenticator,
        )
        session.mount("https://", adapter)
        session.mount("http://", adapter)
    except BaseException:
        session.close()
        raise
    return session
