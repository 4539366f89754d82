"""Tests for attestation.services.grader: percentage and pass/fail summary."""

import pytest

from attestation.domain import machine
from attestation.services.grader import PASS_THRESHOLD_PERCENT, passed, percentage, summarize


def _finish(catalog, index, choices):
    s = machine.start(machine.initial_snapshot(), catalog, index)
    for choice in choices:
        s = machine.submit(machine.select_option(s, catalog, choice), catalog)
        s = machine.next_question(s, catalog)
    return s


class TestPercentage:

    @pytest.mark.parametrize("score,total,expected", [
        (4, 5, 80),
        (1, 3, 33),
        (2, 3, 67),
        (0, 4, 0),
        (5, 5, 100),
        (1, 8, 13),    # 12.5 rounds half-up
        (5, 8, 63),    # 62.5 rounds half-up
    ])
    def test_rounding(self, score, total, expected):
        assert percentage(score, total) == expected

    def test_zero_total_rejected(self):
        with pytest.raises(ValueError):
            percentage(0, 0)


class TestPassed:

    def test_threshold_constant(self):
        assert PASS_THRESHOLD_PERCENT == 80

    def test_boundary_passes(self):
        assert passed(80) is True
        assert passed(79) is False

    def test_custom_threshold(self):
        assert passed(70, threshold=70) is True
        assert passed(80, threshold=90) is False


class TestSummarize:

    def test_four_of_five_passes_exactly(self, catalog):
        s = _finish(catalog, 0, ["A", "A", "A", "A", "B"])
        summary = summarize(s, catalog)
        assert summary.score == 4
        assert summary.total == 5
        assert summary.percentage == 80
        assert summary.passed is True
        assert summary.topic_title == "Topic five"

    def test_one_of_three_fails(self, catalog):
        s = _finish(catalog, 1, ["B", "A", "C"])
        summary = summarize(s, catalog)
        assert summary.score == 1
        assert summary.percentage == 33
        assert summary.passed is False

    def test_threshold_is_a_parameter(self, catalog):
        s = _finish(catalog, 1, ["B", "A", "C"])
        assert summarize(s, catalog, threshold=30).passed is True

    def test_not_available_mid_attempt(self, catalog):
        s = machine.start(machine.initial_snapshot(), catalog, 0)
        with pytest.raises(ValueError):
            summarize(s, catalog)
