"""
Formatting helpers, charts and the PDF report.
"""

import pytest

from tarif_solaire.economies import solar_savings
from tarif_solaire.facture import bill_breakdown
from tarif_solaire.formatage import (
    format_kwh,
    format_mad,
    format_percent,
    format_unit_price,
    parse_monthly_profile,
    parse_number_fr,
)
from tarif_solaire.graphiques import create_bracket_chart, create_monthly_chart, create_savings_chart
from tarif_solaire.diagnostic import run_diagnostic
from tarif_solaire.grille import explain_tariff
from tarif_solaire.models import DiagnosticInput
from tarif_solaire.rapport_pdf import generate_report


class TestFormatting:

    def test_format_mad(self):
        assert format_mad(1234.56) == "1 234,56 MAD"
        assert format_mad(4938, 0) == "4 938 MAD"
        assert format_mad(-12.5) == "-12,50 MAD"
        assert format_mad(0.999) == "1,00 MAD"

    def test_other_units(self):
        assert format_percent(77) == "77 %"
        assert format_kwh(4200) == "4 200 kWh"
        assert format_unit_price(1.1031) == "1,1031 MAD/kWh"

    @pytest.mark.parametrize("raw, expected", [
        ("1 234,56", 1234.56),
        ("147,91 DH", 147.91),
        ("1.234,56", 1234.56),
        ("1,234.56", 1234.56),
        ("1.234.567", 1234567),
        ("92.76", 92.76),
        (350, 350.0),
    ])
    def test_parse_number_fr(self, raw, expected):
        assert parse_number_fr(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", [None, "", "n/a", "-", True, ["1"], float("inf"), float("nan"), 10 ** 400])
    def test_parse_number_fr_unreadable(self, raw):
        assert parse_number_fr(raw) is None


class TestMonthlyProfile:

    def test_semicolon_separated(self):
        profile = parse_monthly_profile("100; 150; 250; 300; 350; 400; 400; 380; 300; 220; 120; 80")
        assert profile == [100, 150, 250, 300, 350, 400, 400, 380, 300, 220, 120, 80]

    def test_pasted_column_with_french_decimals(self):
        profile = parse_monthly_profile("\n".join(["1 250,5"] * 12))
        assert profile == [1250.5] * 12

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_blank_means_no_profile(self, raw):
        assert parse_monthly_profile(raw) is None

    def test_wrong_length(self):
        with pytest.raises(ValueError, match="12 valeurs"):
            parse_monthly_profile("100; 200; 300")

    def test_unreadable_month(self):
        with pytest.raises(ValueError, match="mois 3"):
            parse_monthly_profile(";".join(["100", "100", "x"] + ["100"] * 9))


class TestCharts:

    def test_savings_chart(self):
        fig = create_savings_chart(solar_savings(4200, 3000))
        assert list(fig.data[0].y) == [4938, 1113]
        assert "77 %" in fig.layout.title.text

    def test_monthly_chart(self):
        res = run_diagnostic(DiagnosticInput(annual_consumption_kwh=4200, annual_production_kwh=3000))
        fig = create_monthly_chart(res["resultats_mensuels"])
        assert len(fig.data) == 3
        assert len(fig.data[0].x) == 12

    def test_bracket_chart_adds_tva_slice(self):
        breakdown = bill_breakdown(600)
        fig = create_bracket_chart(breakdown)
        assert len(fig.data[0].labels) == len(breakdown.lines) + 1
        assert fig.data[0].labels[-1] == "TVA 14 %"


class TestReport:

    def test_pdf_bytes(self):
        pdf = generate_report(
            client_name="Karim Alaoui",
            city="Casablanca",
            distributor="Lydec",
            annual_consumption_kwh=4200,
            annual_production_kwh=3000,
            savings=solar_savings(4200, 3000),
            tariff=explain_tariff(350),
        )
        assert pdf.startswith(b"%PDF")
        assert len(pdf) > 1000

    def test_unreadable_chart_image(self):
        pdf = generate_report(
            client_name="",
            city="",
            distributor="ONEE",
            annual_consumption_kwh=1200,
            annual_production_kwh=0,
            savings=solar_savings(1200, 0),
            tariff=explain_tariff(100),
            chart_png=b"not a png",
        )
        assert pdf.startswith(b"%PDF")
