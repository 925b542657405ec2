"""Scan probe: render an in-memory mock of a design and try real decoders on it.

The rule-based gate is the source of truth; the probe is an empirical
cross-check. It encodes the payload with the ``qrcode`` library, paints the
design's colours, gradient, module rounding and logo footprint with Pillow,
then runs pyzbar (ZBar) and OpenCV over the result. Nothing is written to
disk.
"""

import math
import time
from dataclasses import dataclass, field

import cv2
import numpy as np
import qrcode
from PIL import Image, ImageDraw
from pyzbar.pyzbar import decode as pyzbar_decode

from qrguard.colormath import WHITE, parse_hex
from qrguard.constraints import ECLevel, quiet_zone_px
from qrguard.design import DesignConfig, Position
from qrguard.gate import ScannabilityReport, evaluate
from qrguard.logging import audit, get_logger, trace

log = get_logger("probe")

LOGO_PADDING_PX = 10
NON_WHITE_LOGO_FILL = (128, 128, 128)


@dataclass
class ScanResult:
    """Result of a single decode attempt."""
    success: bool
    decoded_data: str | None = None
    decode_time_ms: float = 0.0
    decoder: str = ""
    error: str | None = None


@dataclass
class ProbeResult:
    report: ScannabilityReport
    scans: list[ScanResult] = field(default_factory=list)

    @property
    def decoded(self) -> bool:
        return any(s.success for s in self.scans)

    def summary(self) -> str:
        lines = [
            f"Probe: {'DECODED' if self.decoded else 'NOT DECODED'} "
            f"(score {self.report.score}/100, {self.report.band.value})",
        ]
        for s in self.scans:
            status = "PASS" if s.success else "FAIL"
            lines.append(f"  [{s.decoder:12s}] {status} | {s.decode_time_ms:6.1f}ms | {s.decoded_data or s.error}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

@trace
def encode_modules(data: str, level: ECLevel = ECLevel.H) -> list[list[bool]]:
    """Module matrix (True = dark) from the qrcode encoder, no border."""
    qr = qrcode.QRCode(error_correction=level.value, box_size=1, border=0)
    qr.add_data(data)
    qr.make(fit=True)
    return qr.modules


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def _foreground_layer(config: DesignConfig, side: int) -> np.ndarray:
    """RGB array for the dark modules: flat colour or two-stop gradient."""
    if config.gradient is None:
        rgb = np.array(parse_hex(config.foreground_color), dtype=np.float64)
        return np.broadcast_to(rgb, (side, side, 3)).astype(np.uint8)

    start = np.array(parse_hex(config.gradient.start), dtype=np.float64)
    end = np.array(parse_hex(config.gradient.end), dtype=np.float64)
    ys, xs = np.mgrid[0:side, 0:side].astype(np.float64) / max(1, side - 1)

    if config.gradient.kind == "radial":
        t = np.hypot(xs - 0.5, ys - 0.5) / math.hypot(0.5, 0.5)
    else:
        theta = math.radians(config.gradient.angle)
        proj = xs * math.cos(theta) + ys * math.sin(theta)
        t = (proj - proj.min()) / max(1e-9, proj.max() - proj.min())

    t = np.clip(t, 0.0, 1.0)[..., None]
    return (start * (1 - t) + end * t).round().astype(np.uint8)


def _logo_origin(position: Position, qr_side: int, logo_side: int) -> tuple[int, int]:
    far = qr_side - logo_side - LOGO_PADDING_PX
    near = LOGO_PADDING_PX
    offsets = {
        Position.TOP_LEFT: (near, near),
        Position.TOP_RIGHT: (far, near),
        Position.BOTTOM_LEFT: (near, far),
        Position.BOTTOM_RIGHT: (far, far),
    }
    centre = (qr_side - logo_side) // 2
    x, y = offsets.get(position, (centre, centre))
    return max(0, x), max(0, y)


@trace
def render_design(config: DesignConfig, data: str) -> Image.Image:
    """Paint *config* around the encoded *data* as an RGB image.

    The QR area is ``qr_size_px`` square; the quiet zone is added outside it.
    """
    modules = encode_modules(data, config.error_correction_level)
    n = len(modules)
    side = config.qr_size_px
    edges = [round(i * side / n) for i in range(n + 1)]
    box = side / n

    mask = Image.new("L", (side, side), 0)
    draw = ImageDraw.Draw(mask)
    radius = min(config.corner_radius, int(box // 2))
    for r, row in enumerate(modules):
        for c, dark in enumerate(row):
            # Canvases smaller than the module grid collapse some cells to nothing.
            if not dark or edges[c + 1] <= edges[c] or edges[r + 1] <= edges[r]:
                continue
            rect = [edges[c], edges[r], edges[c + 1] - 1, edges[r + 1] - 1]
            if radius > 0:
                draw.rounded_rectangle(rect, radius=radius, fill=255)
            else:
                draw.rectangle(rect, fill=255)

    bg = parse_hex(config.background_color)
    background = Image.new("RGB", (side, side), bg)
    foreground = Image.fromarray(np.ascontiguousarray(_foreground_layer(config, side)))
    qr_img = Image.composite(foreground, background, mask)

    if config.logo is not None:
        logo_side = config.logo.size_px
        x, y = _logo_origin(config.logo.position, side, logo_side)
        fill = parse_hex(WHITE) if config.logo.has_white_background else NON_WHITE_LOGO_FILL
        ImageDraw.Draw(qr_img).rectangle([x, y, x + logo_side - 1, y + logo_side - 1], fill=fill)

    # At least the four modules the QR standard asks for.
    margin = max(quiet_zone_px(side), math.ceil(4 * box))
    canvas = Image.new("RGB", (side + 2 * margin, side + 2 * margin), bg)
    canvas.paste(qr_img, (margin, margin))

    audit(
        "probe.rendered", logger=log,
        modules=f"{n}x{n}", side_px=side, margin_px=margin,
        gradient=config.gradient is not None,
        logo=config.logo.size_px if config.logo else 0,
    )
    return canvas


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def _run_decoder(name: str, decode_fn, image: Image.Image) -> ScanResult:
    start = time.perf_counter()
    try:
        data = decode_fn(image)
    except Exception as e:
        elapsed = (time.perf_counter() - start) * 1000
        audit("scan.error", logger=log, decoder=name, error=str(e), time_ms=round(elapsed, 1))
        return ScanResult(success=False, decode_time_ms=elapsed, decoder=name, error=str(e))

    elapsed = (time.perf_counter() - start) * 1000
    if data:
        audit("scan.verified", logger=log, decoder=name, success=True, time_ms=round(elapsed, 1))
        return ScanResult(success=True, decoded_data=data, decode_time_ms=elapsed, decoder=name)
    audit("scan.verified", logger=log, decoder=name, success=False, time_ms=round(elapsed, 1))
    return ScanResult(success=False, decode_time_ms=elapsed, decoder=name, error="No QR code detected")


def _decode_zbar(image: Image.Image) -> str | None:
    results = pyzbar_decode(image)
    if not results:
        return None
    return results[0].data.decode("utf-8", errors="replace")


def _decode_opencv(image: Image.Image) -> str | None:
    gray = cv2.cvtColor(np.array(image.convert("RGB")), cv2.COLOR_RGB2GRAY)
    data, _, _ = cv2.QRCodeDetector().detectAndDecode(gray)
    return data or None


@trace
def scan_pyzbar(image: Image.Image) -> ScanResult:
    """Decode with pyzbar (wraps ZBar)."""
    return _run_decoder("pyzbar/zbar", _decode_zbar, image)


@trace
def scan_opencv(image: Image.Image) -> ScanResult:
    """Decode with OpenCV's built-in QR detector."""
    return _run_decoder("opencv", _decode_opencv, image)


@trace
def probe(config: DesignConfig, data: str) -> ProbeResult:
    """Render *config* with *data* and run every decoder over it.

    A decode that returns anything other than *data* counts as a failure.
    """
    report = evaluate(config)
    image = render_design(config, data)

    scans = []
    for scanner in (scan_pyzbar, scan_opencv):
        result = scanner(image)
        if result.success and result.decoded_data != data:
            result.success = False
            result.error = f"Data mismatch: got '{result.decoded_data}', expected '{data}'"
        scans.append(result)

    outcome = ProbeResult(report=report, scans=scans)
    audit(
        "probe.completed", logger=log,
        score=report.score, band=report.band.value,
        decoded=outcome.decoded,
        passed=sum(1 for s in scans if s.success), total=len(scans),
    )
    return outcome
