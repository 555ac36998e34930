# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Constants for the Salesforce REST API wire surface.

These constants define the URL path segments and header values emitted by
:class:`~salesforce_rest.client.SalesforceRestClient`.
"""

# Versioned REST API root, appended to the instance URL and followed by the API version
DATA_SERVICES_PATH = "/services/data/v"

SOBJECTS_PATH = "/sobjects/"
QUERY_PATH = "/query"
COMPOSITE_TREE_PATH = "/composite/tree/"

DESCRIBE_SUFFIX = "/describe?maxRecords=1"
"""Suffix of a describe call; the single record limit keeps the payload to the schema."""

QUERY_PARAMETER = "q"

JSON_MEDIA_TYPE = "application/json; charset=utf-8"

# Header names
HEADER_AUTHORIZATION = "Authorization"
HEADER_PROXY_AUTHORIZATION = "Proxy-Authorization"
HEADER_CONTENT_TYPE = "Content-Type"

BEARER_PREFIX = "Bearer "

PROXY_AUTHENTICATION_REQUIRED = 407
