"""
Validation Gate Tests
=====================
Band policy, allowed actions and repair, including the literal boundary
scenarios the creation workflow was tuned against.
"""

import pytest

from qrguard.design import DesignConfig, Logo, Position
from qrguard.gate import (
    Action,
    Band,
    BandThresholds,
    band_for,
    decide,
    evaluate,
    repair,
)


class TestBandFor:

    @pytest.mark.parametrize("value, band", [
        (100, Band.CLEAN),
        (80, Band.CLEAN),
        (79, Band.WARNED),
        (60, Band.WARNED),
        (59, Band.BLOCKED),
        (0, Band.BLOCKED),
    ])
    def test_default_thresholds(self, value, band):
        assert band_for(value) == band

    def test_custom_thresholds(self):
        strict = BandThresholds(clean_min=95, warned_min=85)
        assert band_for(90, thresholds=strict) == Band.WARNED
        assert band_for(80, thresholds=strict) == Band.BLOCKED


class TestBoundaryScenarios:

    def test_black_on_white(self, clean_design):
        report = evaluate(clean_design)
        assert not report.warnings
        assert report.score == 100
        assert report.band == Band.CLEAN

    def test_low_contrast_is_warned(self):
        report = evaluate(DesignConfig(qr_size_px=240, foreground_color="#777777", background_color="#888888"))
        assert report.warnings.low_contrast
        assert report.score == 75
        assert report.band == Band.WARNED

    def test_small_size_stays_clean(self):
        # bands follow the cumulative score, not flag presence
        report = evaluate(DesignConfig(qr_size_px=180))
        assert report.warnings.small_qr_size
        assert report.score == 85
        assert report.band == Band.CLEAN

    def test_oversized_logo_then_repair(self):
        config = DesignConfig(qr_size_px=240, logo=Logo(size_px=90))
        report = evaluate(config)
        assert report.warnings.logo_too_large
        assert report.score == 70
        assert report.band == Band.WARNED

        outcome = repair(config)
        assert outcome.fix.fixed.logo.size_px == 60
        assert not outcome.after.warnings.logo_too_large
        assert outcome.after.score == 100

    def test_single_corner_flag_is_clean(self):
        config = DesignConfig(qr_size_px=240, logo=Logo(size_px=45, position=Position.TOP_LEFT))
        report = evaluate(config)
        assert report.warnings.corner_position_risk
        assert report.score == 90
        assert report.band == Band.CLEAN

    def test_combined_worst_case_is_blocked(self, worst_design):
        report = evaluate(worst_design)
        assert report.score == 30
        assert report.band == Band.BLOCKED
        assert not report.can_create


class TestDecide:

    def test_clean_only_creates(self, clean_design):
        decision = decide(clean_design)
        assert decision.allowed_actions == (Action.CREATE,)
        assert decision.messages == ()

    def test_warned_offers_both_paths(self):
        decision = decide(DesignConfig(foreground_color="#777777", background_color="#888888"))
        assert Action.AUTO_FIX in decision.allowed_actions
        assert Action.PROCEED_ANYWAY in decision.allowed_actions
        assert decision.messages == ("Poor color contrast detected",)

    def test_blocked_has_no_proceed_path(self, worst_design):
        decision = decide(worst_design)
        assert decision.allowed_actions == (Action.AUTO_FIX, Action.CANCEL)
        assert Action.PROCEED_ANYWAY not in decision.allowed_actions
        assert Action.CREATE not in decision.allowed_actions
        assert len(decision.messages) == 3


class TestRepair:

    def test_unblocks_worst_case(self, worst_design):
        outcome = repair(worst_design)
        assert outcome.before.band == Band.BLOCKED
        assert outcome.fix.changed
        assert outcome.after.band == Band.CLEAN
        assert outcome.resolved

    def test_clean_design_untouched(self, clean_design):
        outcome = repair(clean_design)
        assert not outcome.fix.changed
        assert outcome.fix.fixed is clean_design
        assert outcome.after == outcome.before

    def test_unresolved_is_a_value_not_an_error(self, worst_design):
        # thresholds no design can clear
        impossible = BandThresholds(clean_min=200, warned_min=150)
        outcome = repair(worst_design, thresholds=impossible)
        assert not outcome.resolved
        assert outcome.after.band == Band.BLOCKED


class TestTinyCanvas:

    def test_repair_does_not_raise(self):
        outcome = repair(DesignConfig(qr_size_px=3, logo=Logo(size_px=1)))
        assert outcome.fix.fixed.logo.size_px == 1
        assert outcome.after.score >= outcome.before.score
