# tests/conftest.py

import pytest
from pathlib import Path
from typer.testing import CliRunner

from discount_function.config import DiscountConfig, clear_config_cache


FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _build_input(lines, discount_classes, metafield_value=None):
    """Build a decoded input document.

    Args:
        lines: list of (id, amount) pairs.
        discount_classes: list of discount class names.
        metafield_value: metafield value string, or None to leave it out.
    """
    discount = {"discountClasses": list(discount_classes)}
    if metafield_value is not None:
        discount["metafield"] = {"value": metafield_value}
    return {
        "cart": {
            "lines": [
                {
                    "id": line_id,
                    "quantity": 1,
                    "cost": {"subtotalAmount": {"amount": amount, "currencyCode": "USD"}},
                }
                for line_id, amount in lines
            ]
        },
        "discount": discount,
    }


@pytest.fixture
def make_input():
    """Factory building decoded input documents from (id, amount) pairs."""
    return _build_input


@pytest.fixture(autouse=True)
def _clear_config_cache():
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def fixtures_dir():
    """Directory holding the recorded function fixtures."""
    return FIXTURES_DIR


@pytest.fixture
def two_line_cart():
    """Lines A (5.00) and B (20.00)."""
    return [("gid://shopify/CartLine/A", "5.0"), ("gid://shopify/CartLine/B", "20.0")]


@pytest.fixture
def tmp_config(tmp_path):
    """Config rooted in a temporary directory."""
    return DiscountConfig(repo_root=str(tmp_path))


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    return CliRunner()
