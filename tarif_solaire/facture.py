import math

from tarif_solaire.arrondi import round_half_up
from tarif_solaire.constantes import TAX_RATE
from tarif_solaire.grille import table_for_consumption
from tarif_solaire.models import BillBreakdown, BillLine, BillResult, TariffTable


def _waterfall(table: TariffTable, monthly_kwh: float) -> list[BillLine]:
    """Fill brackets in ascending order until the consumption is used up.

    Each bracket takes at most its own width (bound minus previous bound);
    the unbounded bracket takes whatever remains. Iteration stops at the
    first bracket that would receive nothing, which also covers zero or
    negative consumption.
    """
    remaining = monthly_kwh
    previous_bound = 0
    lines = []

    for bracket in table.brackets:
        if bracket.unbounded:
            capacity = remaining
        else:
            capacity = bracket.upper_bound_kwh - previous_bound
        consumed = min(remaining, capacity)
        if consumed <= 0:
            break
        lines.append(BillLine(
            consumed_kwh=consumed,
            unit_price_pretax=bracket.unit_price_pretax,
            cost_pretax=consumed * bracket.unit_price_pretax,
        ))
        remaining -= consumed
        previous_bound = bracket.upper_bound_kwh

    return lines


def bill_breakdown(monthly_kwh: float) -> BillBreakdown:
    """Per-bracket detail of a monthly bill, with HT, TVA and TTC totals.

    ``cost_ttc`` is always equal to ``monthly_bill_ttc(monthly_kwh)``; the HT
    and TVA figures are rounded independently for display.
    """
    table = table_for_consumption(monthly_kwh)
    lines = _waterfall(table, monthly_kwh)
    cost_ht = sum(line.cost_pretax for line in lines)

    return BillBreakdown(
        mode=table.mode,
        monthly_kwh=monthly_kwh,
        lines=lines,
        cost_ht=round_half_up(cost_ht, 2),
        tva=round_half_up(cost_ht * TAX_RATE, 2),
        cost_ttc=round_half_up(cost_ht * (1 + TAX_RATE), 2),
    )


def monthly_bill_ttc(monthly_kwh: float) -> float:
    """Tax-inclusive monthly bill in MAD, rounded to the centime.

    The grid is chosen from ``monthly_kwh`` alone: crossing 150 kWh switches
    to the selective grid and the whole consumption is re-billed from its
    first bracket.
    """
    return bill_breakdown(monthly_kwh).cost_ttc


def monthly_bill(monthly_kwh: float) -> BillResult:
    return BillResult(cost_ttc=monthly_bill_ttc(monthly_kwh))


def annual_bill_ttc(annual_kwh: float):
    """Annual bill in whole MAD: twelve identical months of ``annual_kwh / 12``.

    The monthly amount is rounded to 2 decimals first, the yearly total to
    an integer.
    """
    total = round_half_up(monthly_bill_ttc(annual_kwh / 12) * 12)
    if math.isfinite(total):
        return int(total)
    return total


def effective_price_per_kwh(annual_kwh: float) -> float:
    """Average TTC price of one kWh (MAD, 3 decimals); 0 for no consumption."""
    if annual_kwh <= 0:
        return 0
    return round_half_up(annual_bill_ttc(annual_kwh) / annual_kwh, 3)
