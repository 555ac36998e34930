# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from ..common.constants import DATA_SERVICES_PATH

DEFAULT_API_VERSION = "54.0"
DEFAULT_RESPONSE_TIMEOUT_MILLIS = 15_000

ENV_INSTANCE_URL = "SALESFORCE_INSTANCE_URL"
ENV_API_VERSION = "SALESFORCE_API_VERSION"
ENV_RESPONSE_TIMEOUT_MILLIS = "SALESFORCE_RESPONSE_TIMEOUT_MILLIS"


@dataclass(frozen=True)
class SalesforceConfiguration:
    """
    Connection settings for a :class:`~salesforce_rest.client.SalesforceRestClient`.

    Values are stored as given. A malformed URL surfaces as a
    :class:`~salesforce_rest.core.errors.TransportError` once a request is attempted.
    A negative ``response_timeout_millis`` is not translated: every request raises a
    plain :class:`ValueError` from the HTTP stack, which is neither an ``HttpError``
    nor a ``TransportError``.

    :param instance_url: Salesforce instance origin, for example ``"https://example.my.salesforce.com"``.
        No trailing slash is expected.
    :type instance_url: str
    :param version: REST API version used in the versioned base URL, for example ``"54.0"``.
    :type version: str
    :param response_timeout_millis: Read timeout applied to every request, in milliseconds.
        ``0`` disables the read timeout.
    :type response_timeout_millis: int
    :param access_token_provider: Zero-argument callable returning the current bearer token.
        Invoked once per request.
    :type access_token_provider: Callable[[], str]
    """

    instance_url: str
    version: str
    response_timeout_millis: int
    access_token_provider: Callable[[], str]

    @property
    def versioned_base_url(self) -> str:
        return self.instance_url + DATA_SERVICES_PATH + str(self.version)

    @classmethod
    def from_env(
        cls,
        access_token_provider: Callable[[], str],
        environ: Optional[Mapping[str, str]] = None,
    ) -> "SalesforceConfiguration":
        """
        Create a configuration from ``SALESFORCE_*`` environment variables.

        ``SALESFORCE_INSTANCE_URL`` is required. ``SALESFORCE_API_VERSION`` defaults to
        ``"54.0"`` and ``SALESFORCE_RESPONSE_TIMEOUT_MILLIS`` to ``15000``.

        :param access_token_provider: Bearer token supplier.
        :type access_token_provider: Callable[[], str]
        :param environ: Mapping to read instead of :data:`os.environ`.
        :type environ: Mapping[str, str] or None
        :return: Configuration built from the environment.
        :rtype: ~salesforce_rest.core.config.SalesforceConfiguration
        :raises ValueError: If the instance URL is missing or the timeout is not an integer.
        """
        env = os.environ if environ is None else environ
        instance_url = (env.get(ENV_INSTANCE_URL) or "").strip()
        if not instance_url:
            raise ValueError(f"{ENV_INSTANCE_URL} is required.")
        version = (env.get(ENV_API_VERSION) or "").strip() or DEFAULT_API_VERSION
        raw_timeout = (env.get(ENV_RESPONSE_TIMEOUT_MILLIS) or "").strip()
        try:
            timeout = int(raw_timeout) if raw_timeout else DEFAULT_RESPONSE_TIMEOUT_MILLIS
        except ValueError:
            raise ValueError(
                f"{ENV_RESPONSE_TIMEOUT_MILLIS} must be an integer number of milliseconds, got {raw_timeout!r}."
            ) from None
        return cls(
            instance_url=instance_url,
            version=version,
            response_timeout_millis=timeout,
            access_token_provider=access_token_provider,
        )
