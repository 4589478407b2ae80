"""Adapter between the bill OCR step and the tariff engine.

The OCR service answers with a JSON object (sometimes wrapped in a markdown
code fence) whose fields may be null or hold French-formatted numbers. This
module turns it into an :class:`ExtractedBill` and cross-checks it against
the engine for display. Missing figures stay ``None`` all the way through so
they never turn into a zero-consumption bill.
"""

import json
import logging
import re
from typing import Optional, Union

from tarif_solaire.constantes import MODE_LABELS
from tarif_solaire.distributeurs import distributor_matches, resolve_distributor
from tarif_solaire.facture import monthly_bill_ttc
from tarif_solaire.formatage import parse_number_fr
from tarif_solaire.grille import select_mode
from tarif_solaire.models import BillCheck, ExtractedBill

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")

NUMERIC_FIELDS = (
    "puissance_souscrite_kva",
    "consommation_kwh",
    "periode_jours",
    "montant_ht",
    "montant_tva",
    "montant_ttc",
    "index_ancien",
    "index_nouveau",
)


class BillExtractionError(ValueError):
    """The OCR answer is not a JSON object."""


def parse_ocr_payload(payload: Union[dict, str]) -> ExtractedBill:
    if isinstance(payload, str):
        raw = _FENCE.sub("", payload.strip())
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            raise BillExtractionError(f"Réponse OCR illisible : {e}") from e

    if not isinstance(payload, dict):
        raise BillExtractionError("La réponse OCR doit être un objet JSON")

    fields = {}
    for name in ExtractedBill.model_fields:
        value = payload.get(name)
        if name in NUMERIC_FIELDS:
            parsed = parse_number_fr(value)
            if value is not None and parsed is None:
                logger.warning("Champ %s ignoré, valeur non numérique : %r", name, value)
            if parsed is not None and name == "periode_jours":
                parsed = int(parsed)
            value = parsed
        elif value is not None:
            value = str(value).strip() or None
        fields[name] = value

    return ExtractedBill(**fields)


def consumption_from_index(bill: ExtractedBill) -> Optional[float]:
    """Consumption read on the bill, or the meter index difference when absent."""
    if bill.consommation_kwh is not None:
        return bill.consommation_kwh
    if bill.index_ancien is not None and bill.index_nouveau is not None:
        delta = bill.index_nouveau - bill.index_ancien
        if delta >= 0:
            return delta
        logger.warning("Index compteur décroissant (%s → %s)", bill.index_ancien, bill.index_nouveau)
    return None


def cross_check(bill: ExtractedBill, city: Optional[str] = None) -> BillCheck:
    """Compare what the bill says with what the engine would compute.

    The bill's consumption is taken as one month. ``city`` overrides the
    city read on the bill. Nothing is rejected: mismatches are only reported.
    """
    expected = resolve_distributor(city or bill.ville)
    consumption = consumption_from_index(bill)

    check = BillCheck(
        expected_distributor=expected,
        distributor_matches=distributor_matches(bill.distributeur, expected),
        consumption_kwh=consumption,
        reported_tranche=bill.tranche_tarifaire,
        reported_ttc=bill.montant_ttc,
    )
    if consumption is None:
        return check

    check.expected_mode = MODE_LABELS[select_mode(consumption)]
    check.computed_ttc = monthly_bill_ttc(consumption)
    if bill.montant_ttc:
        check.gap_percent = round(
            (bill.montant_ttc - check.computed_ttc) / bill.montant_ttc * 100, 1
        )
    return check
