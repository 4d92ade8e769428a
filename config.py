"""
Constants for the Mortgage Savings Calculator.

All monetary values in SEK (kronor). Rates are entered in percent,
so 4.5 means 4.5 % per year. Number display follows the Swedish
(sv-SE) convention: no-break space as thousand separator, comma as
decimal separator, U+2212 as minus sign.
"""

# ── Locale ───────────────────────────────────────────────────────────
GROUP_SEPARATOR = "\u00a0"  # no-break space, as sv-SE renders it
DECIMAL_SEPARATOR = ","
MINUS_SIGN = "\u2212"
INFINITY = "\u221e"
NOT_A_NUMBER = "NaN"
CURRENCY_SUFFIX = " kr"
MAX_FRACTION_DIGITS = 3        # fraction digits shown for non-rounded values

# ── Arithmetic ───────────────────────────────────────────────────────
MONTHS_PER_YEAR = 12
PERCENT = 100

# ── Form ─────────────────────────────────────────────────────────────
RATE_STEP = "0.01"             # step attribute of the rate inputs

# field name -> (label, placeholder)
FIELDS = {
    "loan_amount": ("Lånebelopp (kr)", "2 000 000"),
    "current_rate": ("Nuvarande ränta (%)", "4.5"),
    "new_rate": ("Erbjuden ränta (%)", "3.8"),
    "monthly_amortization": ("Månatlig amortering (kr)", "6 000"),
}
AMOUNT_FIELDS = ("loan_amount", "monthly_amortization")
RATE_FIELDS = ("current_rate", "new_rate")

TITLE = "Bolånekalkylator"
CALCULATE_LABEL = "Beräkna"
RESULT_TITLE = "Resultat"

# result attribute -> label
RESULT_LABELS = {
    "current_monthly_payment": "Nuvarande månadskostnad",
    "new_monthly_payment": "Ny månadskostnad",
    "monthly_savings": "Månadsbesparning",
    "yearly_savings": "Årsbesparning",
}
SAVINGS_RESULTS = ("monthly_savings", "yearly_savings")

# ── Rate comparison ──────────────────────────────────────────────────
RATE_SWEEP_SPAN = 1.0          # percentage points either side of the inputs
RATE_SWEEP_STEP = 0.25
RATE_SWEEP_POINTS = 41         # upper bound on grid points for wide ranges

# ── Web / report ─────────────────────────────────────────────────────
HOST = "127.0.0.1"
PORT = 5000
PDF_PATH = "bolanekalkyl.pdf"
