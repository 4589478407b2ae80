from tarif_solaire.arrondi import round_half_up
from tarif_solaire.constantes import (
    MODE_LABELS,
    PROGRESSIVE_BRACKETS,
    PROGRESSIVE_THRESHOLD_KWH,
    SELECTIVE_BRACKETS,
    TAX_RATE,
    TariffMode,
)
from tarif_solaire.models import BracketDetail, TariffBracket, TariffDetails, TariffTable


def _build_table(mode: TariffMode, rows) -> TariffTable:
    return TariffTable(
        mode=mode,
        brackets=tuple(
            TariffBracket(upper_bound_kwh=upper, unit_price_pretax=price)
            for upper, price in rows
        ),
    )


PROGRESSIVE = _build_table(TariffMode.PROGRESSIVE, PROGRESSIVE_BRACKETS)
SELECTIVE = _build_table(TariffMode.SELECTIVE, SELECTIVE_BRACKETS)


def select_mode(monthly_kwh: float) -> TariffMode:
    """Progressive up to 150 kWh/month included, selective above.

    Always decided on the monthly figure, annual callers divide by 12 first.
    """
    if monthly_kwh <= PROGRESSIVE_THRESHOLD_KWH:
        return TariffMode.PROGRESSIVE
    return TariffMode.SELECTIVE


def table_for(mode: TariffMode) -> TariffTable:
    return PROGRESSIVE if mode == TariffMode.PROGRESSIVE else SELECTIVE


def table_for_consumption(monthly_kwh: float) -> TariffTable:
    return table_for(select_mode(monthly_kwh))


def explain_tariff(monthly_kwh: float) -> TariffDetails:
    """Display breakdown of the grid that applies to ``monthly_kwh``.

    Bounds follow the printed-bill convention (0–100, 101–150, ...) and TTC
    unit prices are rounded to 4 decimals. Not meant for bill computation.
    """
    table = table_for_consumption(monthly_kwh)
    details = []
    for i, bracket in enumerate(table.brackets):
        if i == 0:
            start = 0
        else:
            start = table.brackets[i - 1].upper_bound_kwh + 1
        details.append(BracketDetail(
            from_kwh=start,
            to_kwh=bracket.upper_bound_kwh,
            price_pretax=bracket.unit_price_pretax,
            price_ttc=round_half_up(bracket.unit_price_pretax * (1 + TAX_RATE), 4),
        ))

    return TariffDetails(mode=MODE_LABELS[table.mode], brackets=details)
