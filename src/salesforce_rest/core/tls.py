# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
TLS trust and identity providers.

A provider hands the transport two things: trust material in the form ``requests``
accepts for certificate verification, and an :class:`ssl.SSLContext` that the
connection pools wrap sockets with.
"""

from __future__ import annotations

import ssl
from dataclasses import dataclass
from typing import Optional, Protocol, Union, runtime_checkable

from requests.certs import where as default_ca_bundle


@runtime_checkable
class TlsProvider(Protocol):
    """Source of TLS trust material and SSL context for the transport."""

    def create_trust_manager(self) -> Union[str, bool]:
        """Return a CA bundle path (or directory) used to verify server certificates."""
        ...

    def create_context(self) -> ssl.SSLContext:
        """Return the SSL context the transport wraps sockets with."""
        ...


@dataclass(frozen=True)
class StandardTlsProvider:
    """
    File-based TLS provider.

    :param truststore: CA bundle file used to verify the server. Defaults to the bundle
        shipped with ``requests``.
    :type truststore: str or None
    :param keystore: Client certificate chain (PEM) presented to the server, if any.
    :type keystore: str or None
    :param key: Private key for ``keystore`` when not bundled in the same file.
    :type key: str or None
    :param key_password: Password protecting the private key.
    :type key_password: str or None
    :param minimum_version: Lowest TLS version negotiated.
    :type minimum_version: ssl.TLSVersion
    """

    truststore: Optional[str] = None
    keystore: Optional[str] = None
    key: Optional[str] = None
    key_password: Optional[str] = None
    minimum_version: ssl.TLSVersion = ssl.TLSVersion.TLSv1_2

    def create_trust_manager(self) -> str:
        return self.truststore or default_ca_bundle()

    def create_context(self) -> ssl.SSLContext:
        context = ssl.create_default_context(cafile=self.create_trust_manager())
        context.minimum_version = self.minimum_version
        if self.keystore:
            context.load_cert_chain(self.keystore, keyfile=self.key, password=self.key_password)
        return context


__all__ = ["TlsProvider", "StandardTlsProvider"]
