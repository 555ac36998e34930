# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""HTTP protocol version preferences negotiated through ALPN."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Tuple

PROTOCOL_HTTP_1_1 = "http/1.1"
PROTOCOL_H2 = "h2"

# Protocols the requests/urllib3 transport can speak
SUPPORTED_PROTOCOLS = (PROTOCOL_HTTP_1_1,)


class HttpProtocolStrategy(Enum):
    """Ordered list of acceptable HTTP protocol identifiers."""

    HTTP_1_1 = (PROTOCOL_HTTP_1_1,)
    H2_HTTP_1_1 = (PROTOCOL_H2, PROTOCOL_HTTP_1_1)
    H2 = (PROTOCOL_H2,)

    @property
    def protocols(self) -> Tuple[str, ...]:
        return self.value


def negotiable_protocols(protocols: Iterable[str]) -> Tuple[str, ...]:
    """Return the protocols the transport can speak, keeping the caller's order."""
    return tuple(p for p in protocols if p in SUPPORTED_PROTOCOLS)


__all__ = ["HttpProtocolStrategy", "negotiable_protocols", "PROTOCOL_HTTP_1_1", "PROTOCOL_H2", "SUPPORTED_PROTOCOLS"]
