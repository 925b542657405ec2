"""Scannability analyzer: turn a design into independent warning flags."""

from dataclasses import astuple, dataclass, fields

from qrguard.colormath import contrast_ratio
from qrguard.constraints import (
    CORNER_LOGO_MAX_PERCENT,
    LOGO_HARD_MAX_PERCENT,
    MIN_FLAT_CONTRAST,
    MIN_GRADIENT_CONTRAST,
    MIN_QR_SIZE_PX,
)
from qrguard.design import DesignConfig, Position
from qrguard.logging import audit, get_logger, trace

log = get_logger("analyzer")

MESSAGES = {
    "logo_too_large": f"Logo is too large (>{LOGO_HARD_MAX_PERCENT}% of QR size)",
    "low_contrast": "Poor color contrast detected",
    "complex_gradient": "Gradient may reduce scannability",
    "corner_position_risk": "Large logo in corner position",
    "small_qr_size": f"QR code size too small (<{MIN_QR_SIZE_PX}px)",
}


@dataclass(frozen=True)
class WarningSet:
    """Five independent flags; membership is what matters, not order."""

    logo_too_large: bool = False
    low_contrast: bool = False
    complex_gradient: bool = False
    corner_position_risk: bool = False
    small_qr_size: bool = False

    def active(self) -> list[str]:
        return [f.name for f in fields(self) if getattr(self, f.name)]

    def messages(self) -> list[str]:
        return [MESSAGES[name] for name in self.active()]

    def __bool__(self) -> bool:
        return any(astuple(self))


EMPTY = WarningSet()


def occlusion_percent(config: DesignConfig) -> float:
    """Logo side as a percentage of the QR side (0 without a logo)."""
    if config.logo is None:
        return 0.0
    return config.logo.size_px / config.qr_size_px * 100


@trace
def analyze(config: DesignConfig) -> WarningSet:
    """Evaluate every rule against *config*.

    Rules are independent; several flags may be set at once. The logo
    ceiling is a flat 30% for every EC level.
    """
    logo = config.logo
    occlusion = occlusion_percent(config)
    flat = contrast_ratio(config.foreground_color, config.background_color)

    complex_gradient = False
    if config.gradient is not None:
        gradient_ratio = contrast_ratio(config.gradient.start, config.background_color)
        complex_gradient = gradient_ratio < MIN_GRADIENT_CONTRAST

    warnings = WarningSet(
        logo_too_large=logo is not None and occlusion > LOGO_HARD_MAX_PERCENT,
        low_contrast=flat < MIN_FLAT_CONTRAST,
        complex_gradient=complex_gradient,
        corner_position_risk=(
            logo is not None
            and logo.position != Position.CENTER
            and occlusion > CORNER_LOGO_MAX_PERCENT
        ),
        small_qr_size=config.qr_size_px < MIN_QR_SIZE_PX,
    )

    audit(
        "design.analyzed", logger=log,
        size=config.qr_size_px,
        contrast=f"{flat:.2f}:1",
        occlusion=f"{occlusion:.1f}%",
        warnings=",".join(warnings.active()) or "none",
    )
    return warnings
