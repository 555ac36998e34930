# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Common utilities and constants for the Salesforce REST client.

This module contains the wire-level constants shared by the client and
its transport.
"""

__all__ = []
