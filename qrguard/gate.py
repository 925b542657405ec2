"""Validation gate: score -> Clean / Warned / Blocked policy.

Each call re-derives everything from the design it is given; nothing is
cached between calls.
"""

from dataclasses import dataclass
from enum import Enum

from qrguard.analyzer import WarningSet, analyze
from qrguard.autofix import AutoFixResult, auto_fix
from qrguard.design import DesignConfig
from qrguard.logging import audit, get_logger, trace
from qrguard.score import score

log = get_logger("gate")


class Band(Enum):
    CLEAN = "clean"
    WARNED = "warned"
    BLOCKED = "blocked"


class Action(Enum):
    CREATE = "create"
    AUTO_FIX = "auto-fix"
    PROCEED_ANYWAY = "proceed-anyway"
    CANCEL = "cancel"


@dataclass(frozen=True)
class BandThresholds:
    """Score floors for each band."""

    clean_min: int = 80
    warned_min: int = 60


DEFAULT_THRESHOLDS = BandThresholds()

# No proceed-anyway path out of BLOCKED.
ALLOWED_ACTIONS = {
    Band.CLEAN: (Action.CREATE,),
    Band.WARNED: (Action.CREATE, Action.AUTO_FIX, Action.PROCEED_ANYWAY, Action.CANCEL),
    Band.BLOCKED: (Action.AUTO_FIX, Action.CANCEL),
}


def band_for(value: int, *, thresholds: BandThresholds = DEFAULT_THRESHOLDS) -> Band:
    """Policy: >=80 clean, 60-79 warned, <60 blocked."""
    if value >= thresholds.clean_min:
        return Band.CLEAN
    if value >= thresholds.warned_min:
        return Band.WARNED
    return Band.BLOCKED


@dataclass(frozen=True)
class ScannabilityReport:
    warnings: WarningSet
    score: int
    band: Band

    @property
    def can_create(self) -> bool:
        return self.band != Band.BLOCKED


@dataclass(frozen=True)
class GateDecision:
    report: ScannabilityReport
    allowed_actions: tuple[Action, ...]
    messages: tuple[str, ...]


@dataclass(frozen=True)
class RepairOutcome:
    before: ScannabilityReport
    after: ScannabilityReport
    fix: AutoFixResult

    @property
    def resolved(self) -> bool:
        """True when the repaired design is no longer blocked."""
        return self.after.can_create


def evaluate(
    config: DesignConfig,
    *,
    thresholds: BandThresholds = DEFAULT_THRESHOLDS,
) -> ScannabilityReport:
    warnings = analyze(config)
    value = score(warnings)
    return ScannabilityReport(
        warnings=warnings,
        score=value,
        band=band_for(value, thresholds=thresholds),
    )


@trace
def decide(
    config: DesignConfig,
    *,
    thresholds: BandThresholds = DEFAULT_THRESHOLDS,
) -> GateDecision:
    """Evaluate *config* and list what the caller may offer the user.

    Bands follow the cumulative score, not the mere presence of a flag:
    a single minor warning can still land in CLEAN.
    """
    report = evaluate(config, thresholds=thresholds)
    decision = GateDecision(
        report=report,
        allowed_actions=ALLOWED_ACTIONS[report.band],
        messages=tuple(report.warnings.messages()),
    )
    audit(
        "gate.decided", logger=log,
        score=report.score,
        band=report.band.value,
        actions=",".join(a.value for a in decision.allowed_actions),
    )
    return decision


@trace
def repair(
    config: DesignConfig,
    *,
    thresholds: BandThresholds = DEFAULT_THRESHOLDS,
) -> RepairOutcome:
    """Auto-fix *config* against its current warnings and re-score.

    An outcome that is still blocked is a normal result: the user has to
    make a manual change (e.g. drop the logo).
    """
    before = evaluate(config, thresholds=thresholds)
    fix = auto_fix(config, before.warnings)
    after = evaluate(fix.fixed, thresholds=thresholds) if fix.changed else before
    outcome = RepairOutcome(before=before, after=after, fix=fix)

    audit(
        "gate.repaired", logger=log,
        score_before=before.score,
        score_after=after.score,
        band=after.band.value,
        resolved=outcome.resolved,
    )
    if not outcome.resolved:
        log.warning("Automatic repair insufficient (score %d); manual change needed", after.score)
    return outcome
