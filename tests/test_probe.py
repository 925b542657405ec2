"""
Scan Probe Tests
================
In-memory rendering of a design and decoding it with real decoders.
Skipped when the decoder libraries (or the ZBar shared library) are missing.
"""

import numpy as np
import pytest

pytest.importorskip("cv2")
pytest.importorskip("pyzbar.pyzbar")

from qrguard.design import DesignConfig, Gradient, Logo, Position  # noqa: E402
from qrguard.probe import (  # noqa: E402
    _foreground_layer,
    encode_modules,
    probe,
    render_design,
)

PAYLOAD = "https://example.com"


class TestEncode:

    def test_square_matrix(self):
        modules = encode_modules(PAYLOAD)
        assert len(modules) == len(modules[0])
        assert (len(modules) - 17) % 4 == 0


class TestRender:

    def test_canvas_includes_quiet_zone(self, clean_design):
        img = render_design(clean_design, PAYLOAD)
        assert img.size[0] == img.size[1]
        assert img.size[0] > clean_design.qr_size_px
        assert img.getpixel((0, 0)) == (255, 255, 255)

    def test_background_colour(self):
        img = render_design(DesignConfig(background_color="#FFEEDD"), PAYLOAD)
        assert img.getpixel((1, 1)) == (0xFF, 0xEE, 0xDD)

    def test_logo_without_white_plate(self):
        config = DesignConfig(logo=Logo(size_px=60, has_white_background=False))
        img = render_design(config, PAYLOAD)
        w, _ = img.size
        assert img.getpixel((w // 2, w // 2)) == (128, 128, 128)

    def test_linear_gradient_runs_start_to_end(self):
        config = DesignConfig(gradient=Gradient(start="#FF0000", end="#0000FF"))
        layer = _foreground_layer(config, 50)
        assert tuple(layer[0, 0]) == (255, 0, 0)
        assert tuple(layer[0, -1]) == (0, 0, 255)

    def test_canvas_smaller_than_module_grid(self):
        config = DesignConfig(qr_size_px=20)
        img = render_design(config, PAYLOAD)
        assert img.size[0] >= 20
        assert img.size[0] == img.size[1]

    def test_flat_foreground(self):
        layer = _foreground_layer(DesignConfig(foreground_color="#123456"), 10)
        assert layer.shape == (10, 10, 3)
        assert np.all(layer == np.array([0x12, 0x34, 0x56]))


class TestProbe:

    def test_clean_design_decodes(self, clean_design):
        result = probe(clean_design, PAYLOAD)
        assert result.report.score == 100
        assert result.decoded
        assert "DECODED" in result.summary()

    def test_small_centre_logo_still_decodes(self):
        config = DesignConfig(qr_size_px=300, logo=Logo(size_px=45, position=Position.CENTER))
        assert probe(config, PAYLOAD).decoded

    def test_logo_covering_everything_fails(self):
        config = DesignConfig(qr_size_px=240, logo=Logo(size_px=240))
        result = probe(config, PAYLOAD)
        assert result.report.warnings.logo_too_large
        assert not result.decoded
