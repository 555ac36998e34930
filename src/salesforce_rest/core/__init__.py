# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Core infrastructure components for the Salesforce REST client.

This module contains the foundational components including configuration,
transport collaborators (proxy, TLS, protocol strategy), response streams
and error handling.
"""

from .config import SalesforceConfiguration
from .errors import ConfigurationError, HttpError, SalesforceError, TransportError
from .protocols import HttpProtocolStrategy
from .proxy import BasicProxyAuthenticator, ProxyConfiguration, ProxyType
from .streams import ResponseBodyStream
from .tls import StandardTlsProvider, TlsProvider

__all__ = [
    "SalesforceConfiguration",
    "SalesforceError",
    "ConfigurationError",
    "HttpError",
    "TransportError",
    "HttpProtocolStrategy",
    "ProxyConfiguration",
    "ProxyType",
    "BasicProxyAuthenticator",
    "ResponseBodyStream",
    "TlsProvider",
    "StandardTlsProvider",
]
