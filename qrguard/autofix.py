"""Auto-fixer: clamp and substitute design fields to clear active warnings.

Rules run in a fixed order and only for flags that are currently set:

    1. logo_too_large        -> shrink logo to 25% of the QR side
    2. corner_position_risk  -> move logo to the centre
    3. small_qr_size         -> grow the QR to 240px
    4. low_contrast / complex_gradient -> black on white, gradient dropped

The input design is never modified; a new value is returned.
"""

import math
from dataclasses import dataclass, field, replace

from qrguard.analyzer import WarningSet
from qrguard.colormath import BLACK, WHITE
from qrguard.constraints import LOGO_FIX_TARGET_PERCENT, MIN_RECOMMENDED_SIZE_PX
from qrguard.design import DesignConfig, Position
from qrguard.logging import audit, get_logger, trace

log = get_logger("autofix")


@dataclass(frozen=True)
class AutoFixResult:
    fixed: DesignConfig
    changed: bool
    applied: tuple[str, ...] = field(default_factory=tuple)


@trace
def auto_fix(config: DesignConfig, warnings: WarningSet) -> AutoFixResult:
    """Apply the minimum corrections for the flags set in *warnings*.

    With no flags set the very same *config* object comes back with
    ``changed=False``.
    """
    if not warnings:
        return AutoFixResult(fixed=config, changed=False)

    fixed = config
    applied = []

    if warnings.logo_too_large and fixed.logo is not None:
        # A logo is at least 1px, even on canvases too small for a 25% clamp.
        max_size = max(1, math.floor(fixed.qr_size_px * LOGO_FIX_TARGET_PERCENT / 100))
        logo = replace(fixed.logo, size_px=min(fixed.logo.size_px, max_size))
        fixed = replace(fixed, logo=logo)
        applied.append("logo_too_large")

    if warnings.corner_position_risk and fixed.logo is not None:
        fixed = replace(fixed, logo=replace(fixed.logo, position=Position.CENTER))
        applied.append("corner_position_risk")

    if warnings.small_qr_size:
        fixed = replace(fixed, qr_size_px=MIN_RECOMMENDED_SIZE_PX)
        applied.append("small_qr_size")

    # Gradients cannot be contrast-repaired without losing their purpose.
    if warnings.low_contrast or warnings.complex_gradient:
        fixed = replace(fixed, foreground_color=BLACK, background_color=WHITE, gradient=None)
        applied.append("contrast")

    if not applied:
        return AutoFixResult(fixed=config, changed=False)

    audit("design.autofixed", logger=log, applied=",".join(applied))
    return AutoFixResult(fixed=fixed, changed=True, applied=tuple(applied))
