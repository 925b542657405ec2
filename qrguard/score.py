"""Scannability score: fixed additive deductions from 100."""

from qrguard.analyzer import WarningSet
from qrguard.logging import audit, get_logger

log = get_logger("score")

MAX_SCORE = 100

# Downstream band thresholds (80/60) were tuned against these additive values.
PENALTIES = {
    "logo_too_large": 30,
    "low_contrast": 25,
    "complex_gradient": 15,
    "corner_position_risk": 10,
    "small_qr_size": 15,
}


def breakdown(warnings: WarningSet) -> dict[str, int]:
    """Deduction per active flag."""
    return {name: PENALTIES[name] for name in warnings.active()}


def score(warnings: WarningSet) -> int:
    """Score in [0, 100]; each true flag subtracts its penalty."""
    total = MAX_SCORE - sum(breakdown(warnings).values())
    result = max(0, min(MAX_SCORE, total))
    audit("design.scored", logger=log, score=result, flags=len(warnings.active()))
    return result
