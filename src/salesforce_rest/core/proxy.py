# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Outbound proxy settings and the Basic proxy authenticator.

:class:`ProxyConfiguration` describes where requests are routed. When it carries
credentials, the transport is given a :class:`BasicProxyAuthenticator` which answers
``407 Proxy Authentication Required`` challenges.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import requests
from requests.auth import HTTPProxyAuth

from ..common.constants import HEADER_PROXY_AUTHORIZATION


class ProxyType(str, Enum):
    DIRECT = "DIRECT"
    HTTP = "HTTP"


@dataclass(frozen=True)
class ProxyConfiguration:
    """
    Proxy route for outbound requests.

    Credentials are kept out of the proxy URL; they are only sent after the
    proxy issues a 407 challenge.

    :param proxy_type: ``DIRECT`` disables proxying, ``HTTP`` routes through ``host:port``.
    :type proxy_type: ~salesforce_rest.core.proxy.ProxyType
    :param host: Proxy host name.
    :type host: str or None
    :param port: Proxy port.
    :type port: int or None
    :param username: Optional proxy user.
    :type username: str or None
    :param password: Optional proxy password.
    :type password: str or None
    """

    proxy_type: ProxyType = ProxyType.DIRECT
    host: Optional[str] = None
    port: Optional[int] = None
    username: Optional[str] = None
    password: Optional[str] = None

    @classmethod
    def direct(cls) -> "ProxyConfiguration":
        return cls(proxy_type=ProxyType.DIRECT)

    @property
    def has_credential(self) -> bool:
        return bool(self.username)

    def create_proxy(self) -> Optional[str]:
        """
        Return the proxy URL, or ``None`` for a direct connection.

        :raises ValueError: If an ``HTTP`` proxy has no host or port.
        """
        if self.proxy_type == ProxyType.DIRECT:
            return None
        if not self.host or self.port is None:
            raise ValueError("HTTP proxy requires both host and port.")
        return f"http://{self.host}:{self.port}"

    def create_authenticator(self) -> Optional["BasicProxyAuthenticator"]:
        if not self.has_credential:
            return None
        return BasicProxyAuthenticator(self.username or "", self.password or "")


class BasicProxyAuthenticator:
    """
    Answer proxy challenges with Basic credentials.

    :meth:`authenticate` receives the request that was challenged and returns a
    new request carrying ``Proxy-Authorization``, or ``None`` when the challenged
    request already carried credentials (the proxy rejected them).
    """

    def __init__(self, username: str, password: str) -> None:
        self._auth = HTTPProxyAuth(username, password)

    def authenticate(self, request: requests.PreparedRequest) -> Optional[requests.PreparedRequest]:
        if HEADER_PROXY_AUTHORIZATION in request.headers:
            return None
        retry = request.copy()
        return self._auth(retry)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(username={self._auth.username!r})"


__all__ = ["ProxyType", "ProxyConfiguration", "BasicProxyAuthenticator"]
