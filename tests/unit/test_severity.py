"""Unit tests for severity ordering and score bands"""

import pytest
from aml_gateway.domain.severity import Severity, severity_for_score


def test_severity_ordering():
    assert Severity.NONE < Severity.LOW < Severity.MEDIUM < Severity.HIGH
    assert max(Severity.LOW, Severity.HIGH, Severity.MEDIUM) is Severity.HIGH


def test_step_up_stops_at_high():
    assert Severity.NONE.step_up() is Severity.LOW
    assert Severity.MEDIUM.step_up() is Severity.HIGH
    assert Severity.HIGH.step_up() is Severity.HIGH


@pytest.mark.parametrize(
    "score, expected",
    [
        (0, Severity.NONE),
        (1, Severity.LOW),
        (39, Severity.LOW),
        (40, Severity.MEDIUM),
        (69, Severity.MEDIUM),
        (70, Severity.HIGH),
        (100, Severity.HIGH),
    ],
)
def test_severity_for_score_bands(score, expected):
    assert severity_for_score(score) is expected
