"""QR-Guard CLI: check, auto-fix and probe QR designs from the command line."""

import argparse
import sys

from qrguard.colormath import parse_hex
from qrguard.constraints import ECLevel, max_logo_percent, recommended_logo_size
from qrguard.design import DesignConfig, Gradient, InvalidDesignError, Logo, Position, diff
from qrguard.gate import Band, decide, repair
from qrguard.logging import audit, get_logger, setup_logging
from qrguard.score import breakdown

log = get_logger("cli")

EXIT_CODES = {Band.CLEAN: 0, Band.WARNED: 1, Band.BLOCKED: 2}


def _hex_color(s: str) -> str:
    """argparse type: normalise a hex colour to ``#RRGGBB``."""
    try:
        r, g, b = parse_hex(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e
    return f"#{r:02X}{g:02X}{b:02X}"


def _add_design_args(p: argparse.ArgumentParser):
    p.add_argument("--size", type=int, default=240, help="QR side length in px")
    p.add_argument("--fg", type=_hex_color, default="#000000", help="Foreground colour (hex)")
    p.add_argument("--bg", type=_hex_color, default="#FFFFFF", help="Background colour (hex)")
    p.add_argument("-e", "--ecc", default="H", choices=["L", "M", "Q", "H"], help="Error correction level")
    p.add_argument("--gradient", nargs=2, type=_hex_color, metavar=("START", "END"),
                   default=None, help="Two-stop gradient replacing the flat foreground")
    p.add_argument("--gradient-type", default="linear", choices=["linear", "radial"])
    p.add_argument("--gradient-angle", type=float, default=0.0, help="Linear gradient angle (degrees)")
    p.add_argument("--logo-size", type=int, default=None, help="Logo side length in px (omit for no logo)")
    p.add_argument("--logo-position", default="center", choices=[pos.value for pos in Position])
    p.add_argument("--logo-white-bg", action=argparse.BooleanOptionalAction, default=True,
                   help="Logo sits on a white plate")
    p.add_argument("--corner-radius", type=int, default=0, help="Module corner rounding in px")


def _build_config(args) -> DesignConfig:
    gradient = None
    if args.gradient:
        gradient = Gradient(
            start=args.gradient[0],
            end=args.gradient[1],
            kind=args.gradient_type,
            angle=args.gradient_angle,
        )
    logo = None
    if args.logo_size is not None:
        logo = Logo(
            size_px=args.logo_size,
            position=Position(args.logo_position),
            has_white_background=args.logo_white_bg,
        )
    return DesignConfig(
        qr_size_px=args.size,
        foreground_color=args.fg,
        background_color=args.bg,
        error_correction_level=ECLevel.parse(args.ecc),
        gradient=gradient,
        logo=logo,
        corner_radius=args.corner_radius,
    )


def _print_report(report):
    print(f"Scannability: {report.score}/100 ({report.band.value.upper()})")
    for name, penalty in breakdown(report.warnings).items():
        print(f"  -{penalty:2d}  {name}")
    for msg in report.warnings.messages():
        print(f"  * {msg}")
    if not report.warnings:
        print("  Optimized for scanning")


def cmd_check(args, config: DesignConfig) -> int:
    """Score a design and list the allowed next steps."""
    decision = decide(config)
    _print_report(decision.report)
    if config.logo is not None:
        level = config.error_correction_level
        # Advisory per-level ceiling; the analyzer itself enforces a flat 30%.
        ceiling = recommended_logo_size(config.qr_size_px, level, requested=config.qr_size_px)
        print(f"Logo: {config.logo.size_px}px, EC {level.name} tolerates up to {ceiling}px "
              f"({max_logo_percent(level)}% of {config.qr_size_px}px)")
    print(f"Allowed: {', '.join(a.value for a in decision.allowed_actions)}")
    return EXIT_CODES[decision.report.band]


def cmd_fix(args, config: DesignConfig) -> int:
    """Auto-fix a design and show what changed."""
    outcome = repair(config)
    print(f"Before: {outcome.before.score}/100 ({outcome.before.band.value.upper()})")
    if not outcome.fix.changed:
        print("Nothing to fix.")
    for name, (old, new) in diff(config, outcome.fix.fixed).items():
        print(f"  {name}: {old} -> {new}")
    print(f"After:  {outcome.after.score}/100 ({outcome.after.band.value.upper()})")
    if not outcome.resolved:
        print("Automatic repair was insufficient; a manual change is required.")
    return EXIT_CODES[outcome.after.band]


def cmd_probe(args, config: DesignConfig) -> int:
    """Render the design in memory and try real decoders on it."""
    from qrguard.probe import probe

    result = probe(config, args.data)
    print(result.summary())
    return 0 if result.decoded else 1


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(prog="qrguard", description="QR-Guard: QR design scannability checker")

    parser.add_argument("-V", "--verbose", action="store_true", help="Enable DEBUG-level logging")
    parser.add_argument("--log-file", default=None, help="Write JSON logs to file")
    parser.add_argument("--json-logs", action="store_true", help="JSON log lines on the console")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    p_check = subparsers.add_parser("check", help="Score a design (exit 0 clean, 1 warned, 2 blocked)")
    _add_design_args(p_check)

    p_fix = subparsers.add_parser("fix", help="Auto-fix a design and re-score it")
    _add_design_args(p_fix)

    p_probe = subparsers.add_parser("probe", help="Decode an in-memory render of the design")
    p_probe.add_argument("data", help="Payload to encode")
    _add_design_args(p_probe)

    args = parser.parse_args(argv)

    setup_logging(
        level="DEBUG" if args.verbose else "WARNING",
        log_file=args.log_file,
        json_format=args.json_logs,
    )

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        config = _build_config(args)
    except InvalidDesignError as e:
        parser.error(str(e))

    audit("cli.start", logger=log, command=args.command, verbose=args.verbose)
    commands = {
        "check": cmd_check,
        "fix": cmd_fix,
        "probe": cmd_probe,
    }
    code = commands[args.command](args, config)
    audit("cli.done", logger=log, command=args.command, exit_code=code)
    sys.exit(code)


if __name__ == "__main__":
    main()
