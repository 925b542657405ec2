"""QR-Guard: scannability validation and auto-correction for customised QR designs."""

from qrguard.analyzer import WarningSet, analyze
from qrguard.autofix import AutoFixResult, auto_fix
from qrguard.colormath import contrast_ratio, luminance
from qrguard.constraints import ECLevel
from qrguard.design import DesignConfig, Gradient, InvalidDesignError, Logo, Position
from qrguard.gate import Band, ScannabilityReport, decide, evaluate, repair
from qrguard.score import score

__version__ = "0.1.0"

__all__ = [
    "AutoFixResult",
    "Band",
    "DesignConfig",
    "ECLevel",
    "Gradient",
    "InvalidDesignError",
    "Logo",
    "Position",
    "ScannabilityReport",
    "WarningSet",
    "analyze",
    "auto_fix",
    "contrast_ratio",
    "decide",
    "evaluate",
    "luminance",
    "repair",
    "score",
]
