import logging

import pytest

from qrguard.design import DesignConfig, Logo


@pytest.fixture(autouse=True)
def reset_qrguard_logging():
    """Drop handlers the CLI attaches so later tests don't write to a closed stream."""
    yield
    root = logging.getLogger("qrguard")
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()
    root.addHandler(logging.NullHandler())
    root.setLevel(logging.NOTSET)


@pytest.fixture
def clean_design():
    return DesignConfig(qr_size_px=240, foreground_color="#000000", background_color="#FFFFFF")


@pytest.fixture
def worst_design():
    """Low contrast, oversized logo and undersized canvas at once."""
    return DesignConfig(
        qr_size_px=180,
        foreground_color="#777777",
        background_color="#888888",
        logo=Logo(size_px=90),
    )
