"""
Constraint Table Tests
======================
EC level lookup, advisory logo sizing and quiet zone.
"""

import qrcode.constants
import pytest

from qrguard.constraints import (
    EC_ORDER,
    MAX_LOGO_PERCENT,
    ECLevel,
    max_logo_percent,
    quiet_zone_px,
    recommended_logo_size,
)


class TestECLevel:

    def test_maps_onto_encoder_constants(self):
        assert ECLevel.L.value == qrcode.constants.ERROR_CORRECT_L
        assert ECLevel.H.value == qrcode.constants.ERROR_CORRECT_H

    def test_parse_is_case_insensitive(self):
        assert ECLevel.parse("q") is ECLevel.Q
        assert ECLevel.parse(" H ") is ECLevel.H

    def test_parse_rejects_unknown(self):
        with pytest.raises(KeyError):
            ECLevel.parse("X")

    def test_tolerance_rises_with_redundancy(self):
        percents = [MAX_LOGO_PERCENT[level] for level in EC_ORDER]
        assert percents == [7, 15, 25, 30]
        assert percents == sorted(percents)


class TestAdvisorySizing:

    def test_max_logo_percent(self):
        assert max_logo_percent(ECLevel.M) == 15

    def test_default_request_is_twenty_percent(self):
        assert recommended_logo_size(240, ECLevel.H) == 48

    def test_capped_by_level(self):
        # L tolerates 7% -> floor(16.8)
        assert recommended_logo_size(240, ECLevel.L) == 16
        assert recommended_logo_size(240, ECLevel.H, requested=100) == 72

    def test_small_request_kept(self):
        assert recommended_logo_size(240, ECLevel.Q, requested=30) == 30

    def test_zero_request_is_not_treated_as_omitted(self):
        assert recommended_logo_size(240, ECLevel.H, requested=0) == 0

    def test_quiet_zone(self):
        assert quiet_zone_px(240) == 24
        assert quiet_zone_px(205) == 20
