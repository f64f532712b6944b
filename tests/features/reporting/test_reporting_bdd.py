"""BDD tests for end-to-end StatsD reporting."""

import pytest
from pytest_bdd import scenarios

scenarios("reporting.feature")

pytestmark = [
    pytest.mark.tier(2),
    pytest.mark.tra("Reporter.EndToEnd"),
]
