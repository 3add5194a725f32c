#!/usr/bin/env python3
"""Tests for status enums."""

from maintrecon import IntervalState, SkipReason


class TestIntervalState:
    """Tests for IntervalState enum."""

    def test_values(self):
        assert IntervalState.OVERDUE.value == 1
        assert IntervalState.UPCOMING.value == 2
        assert IntervalState.SCHEDULED.value == 3
        assert IntervalState.COVERED.value == 4
        assert IntervalState.COMPLETED.value == 5
        assert IntervalState.NOT_APPLICABLE.value == 6

    def test_ordering_by_urgency(self):
        """Lower value = more urgent."""
        states = sorted(IntervalState, key=lambda s: s.value)
        assert states[0] == IntervalState.OVERDUE
        assert states[-1] == IntervalState.NOT_APPLICABLE

    def test_label(self):
        assert IntervalState.NOT_APPLICABLE.label == "not_applicable"
        assert IntervalState.OVERDUE.label == "overdue"

    def test_actionable_states(self):
        """Only overdue, upcoming and scheduled intervals can be selected."""
        actionable = {s for s in IntervalState if s.is_actionable}
        assert actionable == {
            IntervalState.OVERDUE,
            IntervalState.UPCOMING,
            IntervalState.SCHEDULED,
        }


class TestSkipReason:
    """Tests for SkipReason enum."""

    def test_string_values(self):
        assert SkipReason.COUNTER_RESET.value == "counter_reset"
        assert SkipReason.UNREALISTIC_JUMP.value == "unrealistic_jump"

    def test_all_reasons_distinct(self):
        assert len({r.value for r in SkipReason}) == len(list(SkipReason))
