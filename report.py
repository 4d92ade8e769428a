"""
PDF report generation and reusable chart rendering for the
Mortgage Savings Calculator.

Provides:
  - Three-page PDF report (generate_pdf)
  - Base64-encoded chart images for web embedding (get_web_charts)
"""

from __future__ import annotations

import base64
import io
import logging
import sys
from typing import List

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages
from matplotlib.ticker import FuncFormatter
import numpy as np

import config as cfg
from calculator import MortgageResult, RateComparison, format_number

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════
# Style constants
# ═══════════════════════════════════════════════════════════════════

BG = "#0a101f"
CARD = "#131b2e"
TEXT = "#f1f5f9"
TEXT2 = "#cbd5e1"
INDIGO = "#818cf8"
EMERALD = "#34d399"
AMBER = "#fbbf24"
RED = "#f87171"
SLATE = "#94a3b8"
BORDER = "#1e293b"
INDIGO_DEEP = "#6366f1"
EMERALD_DEEP = "#10b981"

A4W, A4H = 8.27, 11.69
WEB_W, WEB_H = 10, 6


# ═══════════════════════════════════════════════════════════════════
# Axis formatters
# ═══════════════════════════════════════════════════════════════════

def _kr(x: float) -> str:
    return f"{format_number(x, 0)}{cfg.CURRENCY_SUFFIX}"


def _sek_fmt(x, _):
    if abs(x) >= 1e6:
        return f"{format_number(x / 1e6, 1)} Mkr"
    if abs(x) >= 1e4:
        return f"{format_number(x / 1e3, 0)}k kr"
    return _kr(x)


def _rate_fmt(x, _):
    return f"{format_number(x, 2)} %"


SEK_FMT = FuncFormatter(_sek_fmt)
RATE_FMT = FuncFormatter(_rate_fmt)


# ═══════════════════════════════════════════════════════════════════
# Style helpers
# ═══════════════════════════════════════════════════════════════════

def _style(fig, *axes):
    """Apply dark theme to figure and all axes."""
    fig.patch.set_facecolor(BG)
    for ax in axes:
        ax.set_facecolor(CARD)
        ax.tick_params(colors=TEXT, labelsize=8)
        ax.xaxis.label.set_color(TEXT)
        ax.yaxis.label.set_color(TEXT)
        ax.title.set_color(TEXT)
        for spine in ax.spines.values():
            spine.set_color(BORDER)
        ax.grid(True, alpha=0.15, color=SLATE)


def _legend(ax, loc="upper left"):
    ax.legend(loc=loc, fontsize=8, facecolor=CARD, edgecolor=BORDER, labelcolor=TEXT)


# ═══════════════════════════════════════════════════════════════════
# Page 1 — Summary (text only, dark background)
# ═══════════════════════════════════════════════════════════════════

def _page1_summary(result: MortgageResult) -> plt.Figure:
    fig = plt.figure(figsize=(A4W, A4H))
    fig.patch.set_facecolor(BG)

    fig.text(0.50, 0.93, cfg.TITLE,
             ha="center", fontsize=18, color=TEXT, fontweight="bold")
    fig.text(0.50, 0.91, "Nuvarande ränta jämfört med erbjuden ränta",
             ha="center", fontsize=11, color=TEXT2)

    i = result.inputs
    y = 0.85
    fig.text(0.08, y, "Dina uppgifter", fontsize=13, color=TEXT, fontweight="bold")
    y -= 0.03
    for name, value in (
        ("loan_amount", _kr(i.loan_amount)),
        ("current_rate", f"{format_number(i.current_rate, 2)} %"),
        ("new_rate", f"{format_number(i.new_rate, 2)} %"),
        ("monthly_amortization", _kr(i.monthly_amortization)),
    ):
        fig.text(0.10, y, cfg.FIELDS[name][0], fontsize=10, color=TEXT2)
        fig.text(0.62, y, value, fontsize=10, color=TEXT)
        y -= 0.026

    y -= 0.03
    fig.text(0.08, y, cfg.RESULT_TITLE, fontsize=13, color=TEXT, fontweight="bold")
    y -= 0.03
    for key, label in cfg.RESULT_LABELS.items():
        value = getattr(result, key)
        if key in cfg.SAVINGS_RESULTS:
            color = EMERALD if value >= 0 else RED
        else:
            color = TEXT
        fig.text(0.10, y, label, fontsize=10, color=TEXT2)
        fig.text(0.62, y, _kr(value), fontsize=10, color=color, fontweight="bold")
        y -= 0.026

    if result.monthly_savings < 0:
        y -= 0.02
        fig.text(0.10, y,
                 "Den erbjudna räntan är högre än den nuvarande, så "
                 "månadskostnaden ökar.",
                 fontsize=9, color=AMBER)

    fig.text(0.50, 0.03,
             "Räntekostnaden är en tolftedel av årsräntan på hela lånebeloppet; "
             "ingen ränta på ränta.",
             ha="center", fontsize=8, color=SLATE, style="italic")
    return fig


# ═══════════════════════════════════════════════════════════════════
# Chart — Monthly cost breakdown (stacked bars)
# ═══════════════════════════════════════════════════════════════════

def _chart_payment_breakdown(result: MortgageResult,
                             figsize=(WEB_W, WEB_H)) -> plt.Figure:
    """Amortization + interest for the current and the offered rate."""
    fig, ax = plt.subplots(figsize=figsize, constrained_layout=True)
    _style(fig, ax)

    amort = result.inputs.monthly_amortization
    interest = [result.current_monthly_interest, result.new_monthly_interest]
    totals = [result.current_monthly_payment, result.new_monthly_payment]
    labels = [cfg.RESULT_LABELS["current_monthly_payment"],
              cfg.RESULT_LABELS["new_monthly_payment"]]

    x = np.arange(2)
    ax.bar(x, [amort, amort], 0.5, color=SLATE, label="Amortering",
           edgecolor=BORDER, linewidth=0.5)
    ax.bar(x, interest, 0.5, bottom=[amort, amort],
           color=[INDIGO, EMERALD], label="Ränta",
           edgecolor=[INDIGO_DEEP, EMERALD_DEEP], linewidth=0.5)

    for xi, total in zip(x, totals):
        ax.annotate(
            _kr(total), xy=(xi, total), fontsize=10, color=TEXT,
            fontweight="bold", ha="center",
            xytext=(0, 6), textcoords="offset points",
        )

    ax.set_xticks(x)
    ax.set_xticklabels(labels, fontsize=9)
    ax.yaxis.set_major_formatter(SEK_FMT)
    ax.set_ylabel("Per månad")
    ax.set_title("Månadskostnad fördelad", fontsize=13, pad=12)
    ax.set_ylim(0, min(max(totals) * 1.15, sys.float_info.max))
    _legend(ax, loc="upper right")
    return fig


# ═══════════════════════════════════════════════════════════════════
# Chart — Yearly savings by offered rate
# ═══════════════════════════════════════════════════════════════════

def _chart_savings_by_rate(comparison: RateComparison, result: MortgageResult,
                           figsize=(WEB_W, WEB_H)) -> plt.Figure:
    fig, ax = plt.subplots(figsize=figsize, constrained_layout=True)
    _style(fig, ax)

    # rates far above the offer can overflow; those points are left out
    finite = np.isfinite(comparison.yearly_savings)
    rates = comparison.rates[finite]
    yearly = comparison.yearly_savings[finite]

    ax.axhline(0, color=SLATE, linewidth=1, alpha=0.6)
    ax.plot(rates, yearly, color=EMERALD, linewidth=2.2,
            label=cfg.RESULT_LABELS["yearly_savings"], solid_capstyle="round")
    ax.fill_between(rates, yearly, 0, where=yearly >= 0,
                    color=EMERALD, alpha=0.12, interpolate=True)
    ax.fill_between(rates, yearly, 0, where=yearly < 0,
                    color=RED, alpha=0.12, interpolate=True)

    new_rate = result.inputs.new_rate
    offer_color = EMERALD if result.yearly_savings >= 0 else RED
    ax.annotate(
        f"Erbjudet: {_kr(result.yearly_savings)}/år",
        xy=(new_rate, result.yearly_savings), fontsize=9, color=offer_color,
        fontweight="bold", xytext=(12, 18), textcoords="offset points",
        arrowprops=dict(arrowstyle="->", color=offer_color, lw=1.3),
        bbox=dict(boxstyle="round,pad=0.3", facecolor=BG,
                  edgecolor=offer_color, alpha=0.9),
    )
    ax.axvline(comparison.current_rate, color=INDIGO, linestyle="--",
               linewidth=1.2, label="Nuvarande ränta")

    ax.xaxis.set_major_formatter(RATE_FMT)
    ax.yaxis.set_major_formatter(SEK_FMT)
    ax.set_xlabel("Erbjuden ränta")
    ax.set_ylabel("Per år")
    ax.set_title("Årsbesparing per erbjuden ränta", fontsize=13, pad=12)
    _legend(ax, loc="upper right")
    return fig


# ═══════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════

def _require_finite(result: MortgageResult) -> None:
    if not result.is_finite:
        raise ValueError("Payments overflowed; there is nothing finite to chart")


def figure_to_base64(fig: plt.Figure) -> str:
    """Convert a matplotlib figure to a base64-encoded PNG string."""
    buf = io.BytesIO()
    fig.savefig(buf, format="png", facecolor=fig.get_facecolor(),
                dpi=150, bbox_inches="tight")
    buf.seek(0)
    b64 = base64.b64encode(buf.read()).decode()
    buf.close()
    return b64


def generate_pdf(
    result: MortgageResult,
    comparison: RateComparison,
    path: str = cfg.PDF_PATH,
) -> str:
    """Generate the full PDF report. Returns the file path."""
    _require_finite(result)
    pages = [
        _page1_summary(result),
        _chart_payment_breakdown(result, figsize=(A4W, A4H * 0.5)),
        _chart_savings_by_rate(comparison, result, figsize=(A4W, A4H * 0.5)),
    ]

    with PdfPages(path) as pdf:
        for fig in pages:
            pdf.savefig(fig, facecolor=fig.get_facecolor())
    for fig in pages:
        plt.close(fig)
    logger.info("Wrote report to %s", path)
    return path


def get_web_charts(
    result: MortgageResult,
    comparison: RateComparison,
) -> List[str]:
    """Return base64-encoded PNG chart images for web embedding.

    Returns 2 charts:
      [0] Monthly cost breakdown  (stacked bars)
      [1] Yearly savings by offered rate  (line)
    """
    _require_finite(result)
    chart_figs = [
        _chart_payment_breakdown(result),
        _chart_savings_by_rate(comparison, result),
    ]

    images = [figure_to_base64(f) for f in chart_figs]
    for f in chart_figs:
        plt.close(f)
    return images
