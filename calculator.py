"""
Calculation engine for the Mortgage Savings Calculator.

Compares the monthly cost of a mortgage at the borrower's current rate
with the cost at a newly offered rate. Monthly cost is the fixed
amortization plus one month of interest on the full loan amount:

    payment = amortization + (loan * rate / 100) / 12

Nothing compounds and nothing is rounded here; rounding happens only
when values are displayed.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Dict, Mapping, Optional, Sequence

import numpy as np

import config as cfg


UNSET = "unset"
COMPUTED = "computed"

_NON_NUMERIC = re.compile(r"[^0-9.\-]")
_NUMBER = re.compile(r"^[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?$")
_FIELD_TEXT = re.compile(r"^(-?)([0-9]*)(\.[0-9]*)?$")
_MAX_FLOAT_DIGITS = 400


# ─── Number Text ──────────────────────────────────────────────────────

def parse_formatted_number(text: str) -> str:
    """Drop everything except digits, '.' and '-' ("2 000 000" -> "2000000")."""
    return _NON_NUMERIC.sub("", text)


def to_number(text: str) -> Optional[float]:
    """Interpret field text as a number.

    Returns None for blank text, non-numeric text and values too large
    to be finite.
    """
    text = text.strip()
    if not _NUMBER.match(text):
        return None
    value = float(text)
    return value if math.isfinite(value) else None


def _round_half_up(value: float, decimals: int) -> Decimal:
    # Decimal(float) is exact, so ties are the true binary ties.
    # The largest float has 309 integer digits; give quantize room for them.
    with localcontext() as ctx:
        ctx.prec = _MAX_FLOAT_DIGITS + decimals
        return Decimal(value).quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)


def _group(digits: str) -> str:
    return f"{int(digits):,}".replace(",", cfg.GROUP_SEPARATOR)


def format_number(value: float, decimals: Optional[int] = None) -> str:
    """Format a number the sv-SE way.

    With ``decimals=None`` up to MAX_FRACTION_DIGITS fraction digits are
    kept and trailing zeros dropped; otherwise exactly ``decimals``
    digits are shown. A negative value that rounds to zero keeps its
    sign ("−0"). Infinities are shown as "∞"/"−∞" and NaN as "NaN".
    """
    if math.isnan(value):
        return cfg.NOT_A_NUMBER
    negative = value < 0
    if math.isinf(value):
        return (cfg.MINUS_SIGN if negative else "") + cfg.INFINITY

    places = cfg.MAX_FRACTION_DIGITS if decimals is None else decimals
    text = f"{_round_half_up(value, places):f}".lstrip("-")
    int_part, _, frac = text.partition(".")
    if decimals is None:
        frac = frac.rstrip("0")

    out = _group(int_part)
    if frac:
        out += cfg.DECIMAL_SEPARATOR + frac
    return (cfg.MINUS_SIGN if negative else "") + out


def format_field(raw: str) -> str:
    """Re-render normalised amount-field text with thousand grouping.

    The typed decimal point and fraction are kept as they are, so the
    rendered text normalises back to the same value. Text that is not a
    plain number (e.g. "1.2.3") is returned unchanged.
    """
    m = _FIELD_TEXT.match(raw)
    if not raw or m is None:
        return raw
    sign, int_digits, frac = m.groups()
    if not int_digits and not frac:
        return raw
    grouped = _group(int_digits) if int_digits else ""
    return sign + grouped + (frac or "")


# ─── Data Classes ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class MortgageInputs:
    """A validated snapshot of the four form fields."""

    loan_amount: float           # kr, > 0
    current_rate: float          # percent per year, >= 0
    new_rate: float              # offered rate, percent per year, >= 0
    monthly_amortization: float  # kr per month, > 0

    def __post_init__(self) -> None:
        # written as "not >" so NaN is rejected too
        if not self.loan_amount > 0:
            raise ValueError("Loan amount must be greater than 0")
        if not self.current_rate >= 0:
            raise ValueError("Current rate must be 0 or more")
        if not self.new_rate >= 0:
            raise ValueError("New rate must be 0 or more")
        if not self.monthly_amortization > 0:
            raise ValueError("Monthly amortization must be greater than 0")


@dataclass(frozen=True)
class MortgageResult:
    """Current vs. new monthly cost for one input snapshot."""

    inputs: MortgageInputs
    current_monthly_payment: float
    new_monthly_payment: float
    monthly_savings: float
    yearly_savings: float

    @property
    def current_monthly_interest(self) -> float:
        return self.current_monthly_payment - self.inputs.monthly_amortization

    @property
    def new_monthly_interest(self) -> float:
        return self.new_monthly_payment - self.inputs.monthly_amortization

    @property
    def is_finite(self) -> bool:
        """False when a payment overflowed (e.g. a rate of 1e308 %)."""
        return all(math.isfinite(v) for v in self.as_dict().values())

    def as_dict(self) -> Dict[str, float]:
        return {key: getattr(self, key) for key in cfg.RESULT_LABELS}


@dataclass
class RateComparison:
    """Savings evaluated at a range of offered rates."""

    current_rate: float
    current_monthly_payment: float
    rates: np.ndarray = field(repr=False)                # (n_rates,)
    new_monthly_payment: np.ndarray = field(repr=False)  # (n_rates,)
    monthly_savings: np.ndarray = field(repr=False)      # (n_rates,)
    yearly_savings: np.ndarray = field(repr=False)       # (n_rates,)


# ─── Arithmetic ──────────────────────────────────────────────────────

def monthly_interest(loan_amount, rate):
    """Interest-only part of a monthly payment. Works on floats and arrays."""
    return (loan_amount * (rate / cfg.PERCENT)) / cfg.MONTHS_PER_YEAR


def calculate(inputs: MortgageInputs) -> MortgageResult:
    current = inputs.monthly_amortization + monthly_interest(inputs.loan_amount, inputs.current_rate)
    new = inputs.monthly_amortization + monthly_interest(inputs.loan_amount, inputs.new_rate)
    monthly_savings = current - new
    return MortgageResult(
        inputs=inputs,
        current_monthly_payment=current,
        new_monthly_payment=new,
        monthly_savings=monthly_savings,
        yearly_savings=monthly_savings * cfg.MONTHS_PER_YEAR,
    )


def offered_rate_range(
    current_rate: float,
    new_rate: float,
    span: float = cfg.RATE_SWEEP_SPAN,
    step: float = cfg.RATE_SWEEP_STEP,
    max_points: int = cfg.RATE_SWEEP_POINTS,
) -> np.ndarray:
    """Rates from just below the lower input rate to just above the higher.

    Both input rates are always part of the result. Ranges wider than
    ``max_points`` steps are split into ``max_points`` even intervals
    instead, so the result never has more than ``max_points + 3`` rates.
    """
    lo = max(0.0, min(current_rate, new_rate) - span)
    hi = max(current_rate, new_rate) + span
    anchors = np.array([current_rate, new_rate, hi])
    if (hi - lo) / step <= max_points:
        grid = np.round(np.arange(lo, hi, step), 4)
    else:
        grid = np.linspace(lo, hi, max_points, endpoint=False)
    # drop grid points that only differ from an anchor by float noise
    near = np.isclose(grid[:, None], anchors[None, :], rtol=0, atol=1e-9).any(axis=1)
    return np.union1d(grid[~near], anchors)


def compare_rates(
    inputs: MortgageInputs,
    rates: Optional[Sequence[float]] = None,
) -> RateComparison:
    """Evaluate new payment and savings for every offered rate at once."""
    if rates is None:
        rates = offered_rate_range(inputs.current_rate, inputs.new_rate)
    rates = np.asarray(rates, dtype=float)
    if rates.ndim != 1 or rates.size == 0:
        raise ValueError("Rates must be a non-empty 1-D sequence")
    if np.any(np.isnan(rates)) or np.any(rates < 0):
        raise ValueError("Offered rates must be 0 or more")

    current = calculate(inputs).current_monthly_payment
    # huge rates overflow to inf, the same as the scalar calculation does
    with np.errstate(over="ignore", invalid="ignore"):
        new_payment = inputs.monthly_amortization + monthly_interest(inputs.loan_amount, rates)
        monthly_savings = current - new_payment
        yearly_savings = monthly_savings * cfg.MONTHS_PER_YEAR

    return RateComparison(
        current_rate=inputs.current_rate,
        current_monthly_payment=current,
        rates=rates,
        new_monthly_payment=new_payment,
        monthly_savings=monthly_savings,
        yearly_savings=yearly_savings,
    )


# ─── Form Validation ─────────────────────────────────────────────────

def field_is_valid(name: str, text: str) -> bool:
    """Amounts must be > 0, rates >= 0. Blank or non-numeric text fails."""
    value = to_number(text)
    if value is None:
        return False
    if name in cfg.AMOUNT_FIELDS:
        return value > 0
    if name in cfg.RATE_FIELDS:
        return value >= 0
    raise KeyError(name)


def fields_are_valid(fields: Mapping[str, str]) -> bool:
    return all(field_is_valid(name, fields.get(name, "")) for name in cfg.FIELDS)


def inputs_from_fields(fields: Mapping[str, str]) -> MortgageInputs:
    """Build a MortgageInputs from field text. Raises ValueError if invalid."""
    values = {}
    for name in cfg.FIELDS:
        value = to_number(fields.get(name, ""))
        if value is None:
            raise ValueError(f"Field '{name}' is empty or not a number")
        values[name] = value
    return MortgageInputs(**values)


# ─── Form State ──────────────────────────────────────────────────────

class MortgageCalculator:
    """The four form fields plus the last calculated result.

    Amount fields are normalised on every edit. The result is replaced
    only by ``calculate()``; editing a field afterwards leaves the shown
    result as it was until the next calculation.
    """

    def __init__(self) -> None:
        self.fields: Dict[str, str] = {name: "" for name in cfg.FIELDS}
        self.result: Optional[MortgageResult] = None

    def set_field(self, name: str, text: str) -> str:
        """Store the text typed into a field and return what was kept."""
        if name not in self.fields:
            raise KeyError(name)
        if name in cfg.AMOUNT_FIELDS:
            text = parse_formatted_number(text)
        self.fields[name] = text
        return text

    def display_value(self, name: str) -> str:
        raw = self.fields[name]
        if name in cfg.AMOUNT_FIELDS:
            return format_field(raw)
        return raw

    @property
    def is_valid(self) -> bool:
        return fields_are_valid(self.fields)

    @property
    def state(self) -> str:
        return UNSET if self.result is None else COMPUTED

    def calculate(self) -> MortgageResult:
        if not self.is_valid:
            raise ValueError("Form is incomplete or has out-of-range values")
        self.result = calculate(inputs_from_fields(self.fields))
        return self.result
