import pytest
from pydantic import ValidationError

from tarif_solaire.constantes import TariffMode
from tarif_solaire.diagnostic import run_diagnostic
from tarif_solaire.models import DiagnosticInput


class TestDiagnosticInput:

    def test_negative_consumption_rejected(self):
        with pytest.raises(ValidationError):
            DiagnosticInput(city="Rabat", annual_consumption_kwh=-10)

    def test_negative_production_rejected(self):
        with pytest.raises(ValidationError):
            DiagnosticInput(annual_consumption_kwh=1000, annual_production_kwh=-1)

    def test_profile_needs_twelve_months(self):
        with pytest.raises(ValidationError):
            DiagnosticInput(annual_consumption_kwh=1000, monthly_production_kwh=[100] * 11)

    def test_defaults(self):
        params = DiagnosticInput(annual_consumption_kwh=1000)
        assert params.annual_production_kwh == 0
        assert params.monthly_production_kwh is None
        assert params.city == ""


class TestRunDiagnostic:

    def test_selective_household(self):
        res = run_diagnostic(DiagnosticInput(
            city="Rabat", annual_consumption_kwh=4200, annual_production_kwh=3000,
        ))

        assert res["distributeur"] == "Redal"
        assert res["consommation_mensuelle_kwh"] == 350
        assert res["grille"].mode == "Sélectif"
        assert res["detail_mensuel"].mode == TariffMode.SELECTIVE
        assert res["economies"].bill_before == 4938
        assert res["economies"].bill_after == 1113
        assert res["prix_moyen_avant"] == 1.176
        assert res["prix_moyen_apres"] == pytest.approx(1113 / 1200, abs=0.0011)

    def test_monthly_series_with_flat_production(self):
        res = run_diagnostic(DiagnosticInput(
            city="Rabat", annual_consumption_kwh=4200, annual_production_kwh=3000,
        ))
        months = res["resultats_mensuels"]

        assert len(months) == 12
        assert months[0]["mois_nom"] == "Jan"
        assert all(m["facture_avant"] == 411.46 for m in months)
        assert all(m["facture_apres"] == 92.76 for m in months)
        assert months[5]["economie"] == pytest.approx(318.70)

    def test_monthly_profile_replaces_annual_production(self):
        profile = [100, 150, 250, 300, 350, 400, 400, 380, 300, 220, 120, 80]
        res = run_diagnostic(DiagnosticInput(
            annual_consumption_kwh=4200,
            annual_production_kwh=1,
            monthly_production_kwh=profile,
        ))

        assert res["production_annuelle_kwh"] == sum(profile)
        assert res["economies"].bill_after == 4938 - res["economies"].savings_amount
        # June: 400 kWh of PV for 350 kWh of consumption
        assert res["resultats_mensuels"][5]["consommation_nette_kwh"] == 0
        assert res["resultats_mensuels"][5]["facture_apres"] == 0

    def test_unknown_city_is_onee(self):
        res = run_diagnostic(DiagnosticInput(city="Ouarzazate", annual_consumption_kwh=1200))
        assert res["distributeur"] == "ONEE"
        assert res["economies"].savings_amount == 0
