# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Salesforce REST client.

A thin, thread-safe client issuing bearer-token requests against the versioned
Salesforce REST API: describe, query, query continuation and composite tree create.
"""

import logging

from .client import SalesforceRestClient
from .core import (
    ConfigurationError,
    HttpError,
    HttpProtocolStrategy,
    ProxyConfiguration,
    ProxyType,
    ResponseBodyStream,
    SalesforceConfiguration,
    SalesforceError,
    StandardTlsProvider,
    TlsProvider,
    TransportError,
)

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "SalesforceRestClient",
    "SalesforceConfiguration",
    "SalesforceError",
    "ConfigurationError",
    "HttpError",
    "TransportError",
    "HttpProtocolStrategy",
    "ProxyConfiguration",
    "ProxyType",
    "ResponseBodyStream",
    "TlsProvider",
    "StandardTlsProvider",
    "__version__",
]
