from tarif_solaire.constantes import MOIS_FR
from tarif_solaire.distributeurs import resolve_distributor
from tarif_solaire.economies import solar_savings
from tarif_solaire.facture import bill_breakdown, effective_price_per_kwh, monthly_bill_ttc
from tarif_solaire.grille import explain_tariff
from tarif_solaire.models import DiagnosticInput


class Diagnostic:

    def __init__(self, params: DiagnosticInput):
        self.params = params

    def calculate(self) -> dict:
        self._prepare()
        self._compute_savings()
        self._compute_monthly()
        return self._assemble()

    def _prepare(self):
        p = self.params
        self.distributor = resolve_distributor(p.city)
        self.annual_consumption = p.annual_consumption_kwh
        self.monthly_consumption = p.annual_consumption_kwh / 12

        if p.monthly_production_kwh:
            self.production_profile = list(p.monthly_production_kwh)
            self.annual_production = sum(self.production_profile)
        else:
            self.annual_production = p.annual_production_kwh
            self.production_profile = [self.annual_production / 12] * 12

    def _compute_savings(self):
        self.savings = solar_savings(self.annual_consumption, self.annual_production)
        self.net_consumption = max(0, self.annual_consumption - self.annual_production)

    def _compute_monthly(self):
        """Month-by-month bills with the production profile.

        Consumption is spread evenly over the year; each month is billed on
        its own grid. These figures are for charts only, the headline savings
        come from the annual computation.
        """
        self.monthly_results = []
        bill_before = monthly_bill_ttc(self.monthly_consumption)

        for i, production in enumerate(self.production_profile):
            net = max(0, self.monthly_consumption - production)
            bill_after = monthly_bill_ttc(net)
            self.monthly_results.append({
                "mois": i + 1,
                "mois_nom": MOIS_FR[i],
                "production_kwh": production,
                "consommation_nette_kwh": net,
                "facture_avant": bill_before,
                "facture_apres": bill_after,
                "economie": round(bill_before - bill_after, 2),
            })

    def _assemble(self) -> dict:
        return {
            "client": self.params.client_name,
            "ville": self.params.city,
            "distributeur": self.distributor.value,
            "consommation_annuelle_kwh": self.annual_consumption,
            "consommation_mensuelle_kwh": self.monthly_consumption,
            "production_annuelle_kwh": self.annual_production,
            "grille": explain_tariff(self.monthly_consumption),
            "detail_mensuel": bill_breakdown(self.monthly_consumption),
            "economies": self.savings,
            "prix_moyen_avant": effective_price_per_kwh(self.annual_consumption),
            "prix_moyen_apres": effective_price_per_kwh(self.net_consumption),
            "resultats_mensuels": self.monthly_results,
        }


def run_diagnostic(params: DiagnosticInput) -> dict:
    return Diagnostic(params).calculate()
