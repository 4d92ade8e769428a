import pytest

import config

NBSP = "\u00a0"
MINUS = "\u2212"

EXAMPLE_FIELDS = {
    "loan_amount": "2 000 000",
    "current_rate": "4.5",
    "new_rate": "3.8",
    "monthly_amortization": "6 000",
}


def _html(response) -> str:
    return response.get_data(as_text=True)


def test_get_renders_empty_form(client):
    response = client.get("/")
    html = _html(response)

    assert response.status_code == 200
    assert "Bolånekalkylator" in html
    assert 'placeholder="2 000 000"' in html
    assert 'step="0.01"' in html
    assert 'id="submit-btn" disabled' in html
    assert 'id="result"' not in html


def test_post_valid_form_shows_result(client):
    response = client.post("/", data=EXAMPLE_FIELDS)
    html = _html(response)

    assert response.status_code == 200
    assert 'id="result"' in html
    assert f"13{NBSP}500 kr" in html
    assert f"12{NBSP}333 kr" in html
    assert f"1{NBSP}167 kr" in html
    assert f"14{NBSP}000 kr" in html
    assert 'id="submit-btn" disabled' not in html
    assert html.count('<img class="chart-img"') == 2


def test_post_keeps_formatted_amounts_in_form(client):
    html = _html(client.post("/", data=EXAMPLE_FIELDS))

    assert f'value="2{NBSP}000{NBSP}000"' in html
    assert f'value="6{NBSP}000"' in html
    assert 'value="4.5"' in html


def test_post_higher_offer_shows_negative_savings(client):
    data = {**EXAMPLE_FIELDS, "current_rate": "3.0", "new_rate": "4.5"}
    html = _html(client.post("/", data=data))

    assert f"{MINUS}2{NBSP}500 kr" in html
    assert f"{MINUS}30{NBSP}000 kr" in html
    assert "savings negative" in html


def test_post_invalid_form_shows_no_result(client):
    data = {**EXAMPLE_FIELDS, "monthly_amortization": "0"}
    response = client.post("/", data=data)
    html = _html(response)

    assert response.status_code == 200
    assert 'id="result"' not in html
    assert 'id="submit-btn" disabled' in html
    assert 'value="0"' in html


def test_post_missing_field_shows_no_result(client):
    data = dict(EXAMPLE_FIELDS)
    del data["new_rate"]
    html = _html(client.post("/", data=data))
    assert 'id="result"' not in html


def test_download_pdf_before_any_calculation(client):
    response = client.get("/download-pdf")
    assert response.status_code == 404


def test_download_pdf_after_calculation(client):
    client.post("/", data=EXAMPLE_FIELDS)
    response = client.get("/download-pdf")

    assert response.status_code == 200
    assert response.data.startswith(b"%PDF")
    assert "attachment" in response.headers["Content-Disposition"]
    response.close()


def test_parse_form_normalises_amounts():
    from app import parse_form

    calc = parse_form({**EXAMPLE_FIELDS, "loan_amount": f"1{NBSP}250{NBSP}000"})
    assert calc.fields["loan_amount"] == "1250000"
    assert calc.result is None


@pytest.mark.parametrize(
    "overrides",
    [
        {"new_rate": "2000"},
        {"new_rate": "10000"},
        {"new_rate": "1000000000000"},
        {"loan_amount": "1 000 000 000 000 000", "new_rate": "2000"},
    ],
)
def test_post_large_values_keeps_rate_table_short(client, overrides):
    response = client.post("/", data={**EXAMPLE_FIELDS, **overrides})
    html = _html(response)

    assert response.status_code == 200
    assert 'id="result"' in html
    # one header row plus the sweep
    assert html.count("<tr") <= config.RATE_SWEEP_POINTS + 4
    assert html.count('<img class="chart-img"') == 2


def test_post_overflowing_payment_shows_infinity(client):
    response = client.post("/", data={**EXAMPLE_FIELDS, "new_rate": "1e308"})
    html = _html(response)

    assert response.status_code == 200
    assert "\u221e kr" in html
    assert f"{MINUS}\u221e kr" in html
    assert "savings negative" in html
    assert "<tr" not in html
    assert "Ladda ner PDF" not in html
    assert client.get("/download-pdf").status_code == 404
