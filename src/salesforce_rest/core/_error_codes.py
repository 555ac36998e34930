# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

# Error kind codes
CONFIGURATION_ERROR = "configuration_error"
HTTP_ERROR = "http_error"
TRANSPORT_ERROR = "transport_error"

# Status codes callers may reasonably retry
TRANSIENT_STATUS_CODES = {429, 502, 503, 504}

# Transport subcodes
TRANSPORT_CONNECTION = "transport_connection"
TRANSPORT_TIMEOUT = "transport_timeout"
TRANSPORT_SSL = "transport_ssl"
TRANSPORT_PROXY = "transport_proxy"
TRANSPORT_IO = "transport_io"

# Configuration subcodes
CONFIGURATION_TLS = "configuration_tls"
CONFIGURATION_PROTOCOLS = "configuration_protocols"
CONFIGURATION_PROXY = "configuration_proxy"


def http_subcode(status_code: int) -> str:
    return f"http_{status_code}"
