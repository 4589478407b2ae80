import math

from tarif_solaire.arrondi import round_half_up
from tarif_solaire.facture import annual_bill_ttc
from tarif_solaire.models import SavingsResult


def solar_savings(annual_consumption_kwh: float, annual_production_kwh: float) -> SavingsResult:
    """Annual bill before and after self-consumption of PV production.

    The production is subtracted from the consumption (floored at zero,
    surplus injected into the grid is not credited) and the reduced total
    is billed again through the full bracket waterfall. Displaced kWh are
    therefore not valued at the marginal bracket they originally fell in.
    """
    bill_before = annual_bill_ttc(annual_consumption_kwh)

    net_consumption = max(0, annual_consumption_kwh - annual_production_kwh)
    bill_after = annual_bill_ttc(net_consumption)

    savings_amount = bill_before - bill_after
    savings_percent = 0
    if bill_before > 0:
        ratio = savings_amount / bill_before * 100
        if math.isfinite(ratio):
            savings_percent = int(round_half_up(ratio))

    return SavingsResult(
        bill_before=bill_before,
        bill_after=bill_after,
        savings_amount=savings_amount,
        savings_percent=savings_percent,
    )
