"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

from app.main import app
from app.calculations.tax import TaxBracket, TaxConfig, get_tax_config


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def us_config():
    """Built-in US 2024 tax table."""
    return get_tax_config("us")


@pytest.fixture
def flat_config():
    """Single unbounded 20% bracket with no standard deduction."""
    return TaxConfig(
        name="Flat 20",
        currency="USD",
        brackets=(TaxBracket(0, None, 20),),
    )
