"""Scannability constraint table: EC levels, logo ceilings and size/contrast floors."""

import math
from enum import Enum

import qrcode.constants


class ECLevel(Enum):
    L = qrcode.constants.ERROR_CORRECT_L  # 7%
    M = qrcode.constants.ERROR_CORRECT_M  # 15%
    Q = qrcode.constants.ERROR_CORRECT_Q  # 25%
    H = qrcode.constants.ERROR_CORRECT_H  # 30%

    @classmethod
    def parse(cls, letter: str) -> "ECLevel":
        return cls[letter.strip().upper()]


# Ascending redundancy; the qrcode constants themselves are not ordered.
EC_ORDER = (ECLevel.L, ECLevel.M, ECLevel.Q, ECLevel.H)

# Max logo occlusion (% of QR side) per level. Advisory: sizing hints only,
# the analyzer enforces LOGO_HARD_MAX_PERCENT for every level.
MAX_LOGO_PERCENT = {
    ECLevel.L: 7,
    ECLevel.M: 15,
    ECLevel.Q: 25,
    ECLevel.H: 30,
}

MIN_QR_SIZE_PX = 200
MIN_RECOMMENDED_SIZE_PX = 240

MIN_FLAT_CONTRAST = 3.0       # WCAG large-text floor
MIN_GRADIENT_CONTRAST = 4.5   # gradients lose contrast across the symbol

LOGO_HARD_MAX_PERCENT = 30
LOGO_FIX_TARGET_PERCENT = 25
CORNER_LOGO_MAX_PERCENT = 15

DEFAULT_LOGO_PERCENT = 20
QUIET_ZONE_PERCENT = 10


def max_logo_percent(level: ECLevel) -> int:
    return MAX_LOGO_PERCENT[level]


def recommended_logo_size(
    qr_size_px: int,
    level: ECLevel = ECLevel.H,
    requested: int | None = None,
) -> int:
    """Largest logo size (px) the level comfortably tolerates.

    Starts from *requested* (or 20% of the QR side when omitted) and caps
    it at the level's entry in ``MAX_LOGO_PERCENT``.
    """
    if requested is None:
        requested = math.floor(qr_size_px * DEFAULT_LOGO_PERCENT / 100)
    cap = math.floor(qr_size_px * MAX_LOGO_PERCENT[level] / 100)
    return min(requested, cap)


def quiet_zone_px(qr_size_px: int) -> int:
    """Blank margin painted around an optimised design."""
    return math.floor(qr_size_px * QUIET_ZONE_PERCENT / 100)
