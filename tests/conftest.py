"""
Pytest configuration and fixtures
"""
import sys
from pathlib import Path

import pytest

# The modules live at the repository root
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from app import app as flask_app
from calculator import MortgageCalculator, MortgageInputs


EXAMPLE_FIELDS = {
    "loan_amount": "2 000 000",
    "current_rate": "4.5",
    "new_rate": "3.8",
    "monthly_amortization": "6 000",
}


@pytest.fixture
def example_inputs() -> MortgageInputs:
    return MortgageInputs(
        loan_amount=2_000_000,
        current_rate=4.5,
        new_rate=3.8,
        monthly_amortization=6_000,
    )


@pytest.fixture
def filled_calculator() -> MortgageCalculator:
    """Calculator with the example values typed in, not yet calculated"""
    calc = MortgageCalculator()
    for name, text in EXAMPLE_FIELDS.items():
        calc.set_field(name, text)
    return calc


@pytest.fixture
def client(tmp_path):
    """Flask test client writing its PDF report into a temp dir"""
    flask_app.config.update(TESTING=True, PDF_PATH=str(tmp_path / "report.pdf"))
    with flask_app.test_client() as c:
        yield c
