# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import pytest

from salesforce_rest.core.protocols import HttpProtocolStrategy, negotiable_protocols


@pytest.mark.parametrize(
    "strategy, protocols",
    [
        (HttpProtocolStrategy.HTTP_1_1, ("http/1.1",)),
        (HttpProtocolStrategy.H2_HTTP_1_1, ("h2", "http/1.1")),
        (HttpProtocolStrategy.H2, ("h2",)),
    ],
)
def test_strategy_protocols(strategy, protocols):
    assert strategy.protocols == protocols


def test_negotiable_keeps_supported_in_order():
    assert negotiable_protocols(["h2", "http/1.1"]) == ("http/1.1",)
    assert negotiable_protocols(["h2"]) == ()
    assert negotiable_protocols([]) == ()
