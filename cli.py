"""
CLI interface and shared display helpers for the
Mortgage Savings Calculator.
"""

from __future__ import annotations

import sys
from typing import List

import config as cfg
from calculator import (
    MortgageCalculator,
    MortgageResult,
    RateComparison,
    compare_rates,
    field_is_valid,
    format_number,
)
import report


# ═══════════════════════════════════════════════════════════════════
# Formatting helpers
# ═══════════════════════════════════════════════════════════════════

def fmt(val: float, decimals: int = 0) -> str:
    """Format an amount as "X XXX kr", rounded half away from zero."""
    return f"{format_number(val, decimals)}{cfg.CURRENCY_SUFFIX}"


def pct(val: float, decimals: int = 2) -> str:
    return f"{format_number(val, decimals)} %"


# ═══════════════════════════════════════════════════════════════════
# Input collection (CLI)
# ═══════════════════════════════════════════════════════════════════

_HINTS = {
    "loan_amount": "Must be greater than 0",
    "monthly_amortization": "Must be greater than 0",
    "current_rate": "Must be 0 or more, e.g. 4.5",
    "new_rate": "Must be 0 or more, e.g. 3.8",
}


def _prompt_field(calc: MortgageCalculator, name: str) -> None:
    label, placeholder = cfg.FIELDS[name]
    while True:
        raw = input(f"  {label} [{placeholder}]: ").strip()
        if not raw:
            raw = placeholder
        if name in cfg.RATE_FIELDS:
            raw = raw.replace("%", "").strip()
        kept = calc.set_field(name, raw)
        if field_is_valid(name, kept):
            return
        print(f"    {_HINTS[name]}")


def collect_inputs(calc: MortgageCalculator | None = None) -> MortgageCalculator:
    """Prompt the user for the four form fields."""
    calc = calc or MortgageCalculator()
    print("\n  Enter your details (press Enter for the example value):\n")
    for name in cfg.FIELDS:
        _prompt_field(calc, name)
    return calc


# ═══════════════════════════════════════════════════════════════════
# Box-drawing CLI output
# ═══════════════════════════════════════════════════════════════════

W = 64  # box width (characters)


def _box_top(title: str) -> str:
    inner = W - 2
    return (
        f"╔{'═' * inner}╗\n"
        f"║  {title:<{inner - 2}}║\n"
        f"╠{'═' * inner}╣"
    )


def _box_line(text: str = "") -> str:
    inner = W - 4
    if len(text) > inner:
        text = text[:inner]
    return f"║  {text:<{inner}}║"


def _box_row(label: str, value: str, lw: int = 32) -> str:
    return _box_line(f"{label:<{lw}}{value}")


def _box_bottom() -> str:
    return f"╚{'═' * (W - 2)}╝"


def _print_section(title: str, rows: List[str]) -> None:
    """Print a titled box with content rows."""
    print(_box_top(title))
    for r in rows:
        print(r)
    print(_box_bottom())
    print()


# ═══════════════════════════════════════════════════════════════════
# CLI Section Printers
# ═══════════════════════════════════════════════════════════════════

def _print_inputs(result: MortgageResult) -> None:
    i = result.inputs
    rows = [
        _box_row(cfg.FIELDS["loan_amount"][0], fmt(i.loan_amount)),
        _box_row(cfg.FIELDS["current_rate"][0], pct(i.current_rate)),
        _box_row(cfg.FIELDS["new_rate"][0], pct(i.new_rate)),
        _box_row(cfg.FIELDS["monthly_amortization"][0], fmt(i.monthly_amortization)),
    ]
    _print_section(cfg.TITLE.upper(), rows)


def _print_result(result: MortgageResult) -> None:
    rows = [
        _box_row(label, fmt(value))
        for label, value in zip(cfg.RESULT_LABELS.values(), result.as_dict().values())
    ]
    if result.monthly_savings < 0:
        rows.append(_box_line())
        rows.append(_box_line("The offered rate is higher than your current rate."))
    _print_section(cfg.RESULT_TITLE.upper(), rows)


def _print_comparison(comparison: RateComparison, result: MortgageResult) -> None:
    h1 = f"{'Ränta':>8}  {'Ny kostnad':>14}  {'Per månad':>12}  {'Per år':>14}"
    rows = [_box_line(h1), _box_line("─" * (W - 6))]

    for rate, payment, monthly, yearly in zip(
        comparison.rates,
        comparison.new_monthly_payment,
        comparison.monthly_savings,
        comparison.yearly_savings,
    ):
        if rate == result.inputs.new_rate:
            marker = " <<"
        elif rate == comparison.current_rate:
            marker = " ="
        else:
            marker = ""
        line = (
            f"{pct(rate):>8}  "
            f"{fmt(payment):>14}  "
            f"{fmt(monthly):>12}  "
            f"{fmt(yearly):>14}"
            f"{marker}"
        )
        rows.append(_box_line(line))

    rows.append(_box_line())
    rows.append(_box_line("<< offered rate    = current rate"))
    _print_section("SAVINGS BY OFFERED RATE", rows)


# ═══════════════════════════════════════════════════════════════════
# Main CLI entry point
# ═══════════════════════════════════════════════════════════════════

def run_cli() -> None:
    """Run the full CLI workflow."""
    # Ensure box-drawing characters render on Windows
    try:
        sys.stdout.reconfigure(encoding="utf-8")
    except (AttributeError, OSError):
        pass
    print()
    print("=" * W)
    print(f"  {cfg.TITLE}: Mortgage Savings Calculator")
    print("=" * W)

    calc = collect_inputs()
    result = calc.calculate()

    print()
    _print_inputs(result)
    _print_result(result)
    if not result.is_finite:
        print("  Payments are too large to compare; no report written.\n")
        return

    comparison = compare_rates(result.inputs)
    _print_comparison(comparison, result)

    print("  Generating PDF report...")
    pdf_path = report.generate_pdf(result, comparison, cfg.PDF_PATH)
    print(f"  Saved to {pdf_path}\n")


if __name__ == "__main__":
    run_cli()
