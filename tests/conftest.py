"""
Shared pytest fixtures for LPRefine tests.
"""

import pytest


def pytest_configure(config):
    """Add custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")


@pytest.fixture
def cutstock_instance():
    """The five-width paper instance (roll width 94)."""
    from lprefine.core import CuttingStockInstance

    return CuttingStockInstance.default()


@pytest.fixture
def els_instance():
    """The six-period lot-sizing instance."""
    from lprefine.core import LotSizingInstance

    return LotSizingInstance.default()


@pytest.fixture
def simple_csp_instance():
    """A small integer-width CSP instance."""
    from lprefine.core import CuttingStockInstance

    return CuttingStockInstance(
        roll_width=100,
        item_sizes=[45, 36, 31, 14],
        item_demands=[10, 10, 10, 10],
        name="test_csp",
    )


@pytest.fixture
def bpplib_file(tmp_path):
    """A BPPLIB-format cutting stock file."""
    path = tmp_path / "tiny_csp.txt"
    path.write_text("3\n100\n45\t4\n36\t6\n14\t9\n")
    return path
