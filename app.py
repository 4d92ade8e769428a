"""
Flask web application for the Mortgage Savings Calculator.

Single-file app using render_template_string.  Run via ``python main.py``
which starts the dev server on localhost:5000.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Mapping

from flask import Flask, render_template_string, request, send_file

import config as cfg
from calculator import MortgageCalculator, compare_rates
from cli import fmt, pct
import report

app = Flask(__name__)
app.config["PDF_PATH"] = cfg.PDF_PATH

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
# Form parsing
# ═══════════════════════════════════════════════════════════════════

def parse_form(form: Mapping[str, str]) -> MortgageCalculator:
    """Load the posted fields into a fresh calculator (state Unset)."""
    calc = MortgageCalculator()
    for name in cfg.FIELDS:
        calc.set_field(name, form.get(name, ""))
    return calc


def _form_fields(calc: MortgageCalculator) -> List[Dict[str, Any]]:
    return [
        {
            "name": name,
            "label": label,
            "placeholder": placeholder,
            "value": calc.display_value(name),
            "amount": name in cfg.AMOUNT_FIELDS,
        }
        for name, (label, placeholder) in cfg.FIELDS.items()
    ]


# ═══════════════════════════════════════════════════════════════════
# HTML Template
# ═══════════════════════════════════════════════════════════════════

HTML_TEMPLATE = r"""
<!DOCTYPE html>
<html lang="sv">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{{ cfg.TITLE }}</title>
<link rel="preconnect" href="https://fonts.googleapis.com">
<link rel="preconnect" href="https://fonts.gstatic.com" crossorigin>
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700;800&display=swap" rel="stylesheet">
<style>
  *{margin:0;padding:0;box-sizing:border-box}

  :root{
    --bg-deep:#050816;
    --bg-surface:rgba(15,23,42,0.55);
    --bg-input:rgba(8,11,22,0.85);
    --border-subtle:rgba(99,102,241,0.1);
    --border-hover:rgba(99,102,241,0.25);
    --text-primary:#f1f5f9;
    --text-secondary:#94a3b8;
    --text-muted:#64748b;
    --indigo:#818cf8;
    --indigo-deep:#6366f1;
    --violet:#8b5cf6;
    --emerald:#34d399;
    --red:#f87171;
    --radius-lg:16px;
    --radius-md:10px;
  }

  body{
    background:var(--bg-deep);color:var(--text-primary);
    font-family:'Inter',system-ui,-apple-system,sans-serif;
    line-height:1.6;min-height:100vh;
  }

  .container{max-width:28rem;margin:0 auto;padding:2rem 1rem}

  /* ── cards ── */
  .card{
    background:var(--bg-surface);
    border:1px solid var(--border-subtle);
    border-radius:var(--radius-lg);padding:1.5rem;
    margin-bottom:1.5rem;
  }
  .card:hover{border-color:var(--border-hover)}
  h1{font-size:1.5rem;font-weight:700;text-align:center;margin-bottom:1.2rem}
  h2{font-size:1.25rem;font-weight:600;margin-bottom:1rem}

  /* ── form ── */
  .form-group{display:flex;flex-direction:column;margin-bottom:1rem}
  .form-group label{
    font-size:.85rem;color:var(--text-secondary);margin-bottom:.3rem;font-weight:500;
  }
  .form-group input{
    background:var(--bg-input);
    border:1px solid rgba(71,85,105,.35);border-radius:var(--radius-md);
    color:var(--text-primary);padding:.6rem .85rem;font-size:.9rem;
    font-family:inherit;
  }
  .form-group input:focus{
    outline:none;border-color:var(--indigo-deep);
    box-shadow:0 0 0 3px rgba(99,102,241,.12);
  }

  /* ── buttons ── */
  .btn{
    display:inline-flex;align-items:center;justify-content:center;
    width:100%;padding:.75rem 2rem;border:none;border-radius:var(--radius-md);
    font-size:.95rem;font-weight:600;cursor:pointer;font-family:inherit;
    text-decoration:none;
  }
  .btn:disabled{opacity:.4;cursor:not-allowed}
  .btn-primary{
    background:linear-gradient(135deg,var(--indigo-deep),var(--violet));
    color:#fff;box-shadow:0 4px 20px rgba(99,102,241,.3);
  }
  .btn-secondary{
    background:none;border:1px solid var(--border-hover);color:var(--indigo);
    margin-top:.5rem;
  }

  /* ── stat rows ── */
  .stat-row{
    display:flex;justify-content:space-between;align-items:center;
    padding:.8rem 0;border-bottom:1px solid rgba(51,65,85,.3);font-size:.9rem;
  }
  .stat-row:last-child{border-bottom:none}
  .stat-label{color:var(--text-secondary)}
  .stat-value{font-weight:600;font-variant-numeric:tabular-nums}
  .stat-value.savings{color:var(--emerald)}
  .stat-value.savings.negative{color:var(--red)}

  /* ── rate table ── */
  .rate-table{width:100%;border-collapse:collapse;font-size:.82rem;margin-top:.5rem}
  .rate-table th{
    text-align:right;padding:.5rem .4rem;color:var(--text-secondary);
    font-weight:600;font-size:.72rem;text-transform:uppercase;
    border-bottom:1px solid rgba(51,65,85,.25);
  }
  .rate-table td{text-align:right;padding:.4rem;border-bottom:1px solid rgba(51,65,85,.15)}
  .rate-table .offered-row td{background:rgba(16,185,129,.07);font-weight:600}
  .rate-table .current-row td{color:var(--indigo)}

  .chart-img{width:100%;border-radius:var(--radius-md);margin-bottom:.5rem}
  .footer{text-align:center;padding:1rem 0 2rem;color:var(--text-muted);font-size:.78rem}
</style>
</head>
<body>
<div class="container">

<!-- Form -->
<div class="card">
  <h1>{{ cfg.TITLE }}</h1>
  <form method="post" action="/" id="calc-form" novalidate>
    {% for f in fields %}
    <div class="form-group">
      <label for="{{ f.name }}">{{ f.label }}</label>
      {% if f.amount %}
      <input id="{{ f.name }}" name="{{ f.name }}" type="text" inputmode="numeric"
             class="amount" value="{{ f.value }}" placeholder="{{ f.placeholder }}" autocomplete="off">
      {% else %}
      <input id="{{ f.name }}" name="{{ f.name }}" type="number" step="{{ cfg.RATE_STEP }}"
             value="{{ f.value }}" placeholder="{{ f.placeholder }}">
      {% endif %}
    </div>
    {% endfor %}
    <button type="submit" class="btn btn-primary" id="submit-btn" {{ '' if valid else 'disabled' }}>
      {{ cfg.CALCULATE_LABEL }}
    </button>
  </form>
</div>

{% if result %}
<!-- Result -->
<div class="card" id="result">
  <h2>{{ cfg.RESULT_TITLE }}</h2>
  {% for key, label in cfg.RESULT_LABELS.items() %}
  {% set value = result[key] %}
  <div class="stat-row">
    <span class="stat-label">{{ label }}</span>
    <span class="stat-value {{ 'savings' if key in cfg.SAVINGS_RESULTS }} {{ 'negative' if key in cfg.SAVINGS_RESULTS and value < 0 }}">{{ fmt(value) }}</span>
  </div>
  {% endfor %}
</div>

{% if rows %}
<!-- Rate comparison -->
<div class="card">
  <h2>Besparing per erbjuden ränta</h2>
  <table class="rate-table">
    <thead>
      <tr><th>Ränta</th><th>Ny kostnad</th><th>Per månad</th><th>Per år</th></tr>
    </thead>
    <tbody>
      {% for rate, payment, monthly, yearly in rows %}
      <tr class="{{ 'offered-row' if rate == new_rate else ('current-row' if rate == current_rate else '') }}">
        <td>{{ pct(rate) }}</td>
        <td>{{ fmt(payment) }}</td>
        <td>{{ fmt(monthly) }}</td>
        <td>{{ fmt(yearly) }}</td>
      </tr>
      {% endfor %}
    </tbody>
  </table>
</div>

{% for chart in charts %}
<div class="card">
  <img class="chart-img" src="data:image/png;base64,{{ chart }}" alt="Chart {{ loop.index }}">
</div>
{% endfor %}

<div class="card">
  <a href="/download-pdf" class="btn btn-secondary">Ladda ner PDF</a>
</div>
{% endif %}
{% endif %}

<div class="footer">Räntekostnad = lånebelopp &times; ränta / 12</div>
</div>

<script>
(function(){
  var GROUP='\u00a0';
  var AMOUNTS=['loan_amount','monthly_amortization'];
  var RATES=['current_rate','new_rate'];
  var NUMBER=/^[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?$/;

  function strip(s){return s.replace(/[^0-9.\-]/g,'');}

  function group(raw){
    var m=/^(-?)([0-9]*)(\.[0-9]*)?$/.exec(raw);
    if(!raw||!m||(!m[2]&&!m[3])) return raw;
    var intPart=m[2]?String(parseInt(m[2],10)).replace(/\B(?=(\d{3})+(?!\d))/g,GROUP):'';
    return m[1]+intPart+(m[3]||'');
  }

  function toNumber(s){
    s=s.trim();
    if(!NUMBER.test(s)) return NaN;
    var v=Number(s);
    return isFinite(v)?v:NaN;
  }

  function value(id){
    var el=document.getElementById(id);
    return toNumber(AMOUNTS.indexOf(id)>=0?strip(el.value):el.value);
  }

  function validate(){
    var ok=value('loan_amount')>0&&value('monthly_amortization')>0
         &&value('current_rate')>=0&&value('new_rate')>=0;
    document.getElementById('submit-btn').disabled=!ok;
  }

  AMOUNTS.forEach(function(id){
    var el=document.getElementById(id);
    el.addEventListener('input',function(){
      el.value=group(strip(el.value));
      validate();
    });
  });
  RATES.forEach(function(id){
    document.getElementById(id).addEventListener('input',validate);
  });
  validate();
})();
</script>
</body>
</html>
"""


# ═══════════════════════════════════════════════════════════════════
# Routes
# ═══════════════════════════════════════════════════════════════════

def _render(calc: MortgageCalculator, charts: List[str] | None = None, comparison=None):
    result = calc.result
    rows = []
    if comparison is not None:
        rows = list(zip(
            comparison.rates.tolist(),
            comparison.new_monthly_payment.tolist(),
            comparison.monthly_savings.tolist(),
            comparison.yearly_savings.tolist(),
        ))
    return render_template_string(
        HTML_TEMPLATE,
        cfg=cfg,
        fields=_form_fields(calc),
        valid=calc.is_valid,
        result=result.as_dict() if result is not None else None,
        rows=rows,
        new_rate=result.inputs.new_rate if result is not None else None,
        current_rate=result.inputs.current_rate if result is not None else None,
        charts=charts or [],
        fmt=fmt,
        pct=pct,
    )


@app.route("/", methods=["GET", "POST"])
def index():
    if request.method == "GET":
        return _render(MortgageCalculator())

    # POST — calculate
    calc = parse_form(request.form)
    if not calc.is_valid:
        logger.info("Ignoring calculation for incomplete form: %s", calc.fields)
        return _render(calc)

    result = calc.calculate()
    if not result.is_finite:
        logger.info("Payments overflowed, showing result without comparison or report")
        return _render(calc)

    comparison = compare_rates(result.inputs)

    # Generate charts for web display
    chart_images = report.get_web_charts(result, comparison)

    # Save PDF for download
    report.generate_pdf(result, comparison, app.config["PDF_PATH"])

    return _render(calc, chart_images, comparison)


@app.route("/download-pdf")
def download_pdf():
    path = app.config["PDF_PATH"]
    if os.path.exists(path):
        return send_file(os.path.abspath(path), as_attachment=True,
                         download_name=os.path.basename(cfg.PDF_PATH))
    return "No report generated yet. Run a calculation first.", 404


# ═══════════════════════════════════════════════════════════════════
# Entry point
# ═══════════════════════════════════════════════════════════════════

def run_web(debug: bool = True) -> None:
    """Start the Flask development server and open browser."""
    import webbrowser
    import threading

    url = f"http://{cfg.HOST}:{cfg.PORT}"
    print(f"Starting web app at {url}")
    threading.Timer(1.0, lambda: webbrowser.open(url)).start()
    app.run(host=cfg.HOST, port=cfg.PORT, debug=debug)


if __name__ == "__main__":
    run_web()
