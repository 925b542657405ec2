"""Design configuration value types.

A :class:`DesignConfig` describes everything about a customised QR code that
affects whether it still scans: canvas size, colours, optional gradient,
optional logo, and the error-correction level. Values are frozen; edits go
through :func:`dataclasses.replace` so a caller can diff before and after.
"""

from dataclasses import dataclass, fields
from enum import Enum

from qrguard.colormath import BLACK, WHITE
from qrguard.constraints import ECLevel


class InvalidDesignError(ValueError):
    """A design violates a structural invariant (sizes, logo bounds)."""


class Position(Enum):
    CENTER = "center"
    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"


@dataclass(frozen=True)
class Gradient:
    """Two-stop gradient used in place of a flat foreground."""
    start: str
    end: str
    kind: str = "linear"
    angle: float = 0.0


@dataclass(frozen=True)
class Logo:
    size_px: int
    position: Position = Position.CENTER
    has_white_background: bool = True

    def __post_init__(self):
        if self.size_px <= 0:
            raise InvalidDesignError(f"logo size must be positive, got {self.size_px}")


@dataclass(frozen=True)
class DesignConfig:
    qr_size_px: int = 240
    foreground_color: str = BLACK
    background_color: str = WHITE
    error_correction_level: ECLevel = ECLevel.H
    gradient: Gradient | None = None
    logo: Logo | None = None
    corner_radius: int = 0

    def __post_init__(self):
        if self.qr_size_px <= 0:
            raise InvalidDesignError(f"qr size must be positive, got {self.qr_size_px}")
        if self.logo is not None and self.logo.size_px > self.qr_size_px:
            raise InvalidDesignError(
                f"logo ({self.logo.size_px}px) exceeds the QR canvas ({self.qr_size_px}px)"
            )


def diff(before: DesignConfig, after: DesignConfig) -> dict[str, tuple]:
    """Field-by-field changes between two designs: ``{name: (old, new)}``.

    Logo and gradient are compared as whole values.
    """
    changes = {}
    for f in fields(DesignConfig):
        old = getattr(before, f.name)
        new = getattr(after, f.name)
        if old != new:
            changes[f.name] = (old, new)
    return changes
