"""
OCR bill adapter: parsing the service answer and cross-checking it.
"""

import json

import pytest

from tarif_solaire.constantes import Distributor
from tarif_solaire.extraction import (
    BillExtractionError,
    consumption_from_index,
    cross_check,
    parse_ocr_payload,
)
from tarif_solaire.models import ExtractedBill

OCR_ANSWER = {
    "numero_contrat": "123456",
    "nom_client": "Karim Alaoui",
    "ville": "Casablanca",
    "distributeur": "Lydec",
    "type_abonnement": "Basse Tension",
    "consommation_kwh": 100,
    "periode_jours": 30,
    "montant_ht": "81,37",
    "montant_tva": "11,39",
    "montant_ttc": "92,76",
    "tranche_tarifaire": "Tranche 1",
    "index_ancien": None,
    "index_nouveau": None,
}


class TestParseOcrPayload:

    def test_dict_payload(self):
        bill = parse_ocr_payload(OCR_ANSWER)
        assert bill.ville == "Casablanca"
        assert bill.consommation_kwh == 100
        assert bill.montant_ttc == 92.76
        assert bill.periode_jours == 30

    def test_json_in_code_fence(self):
        text = "```json\n" + json.dumps(OCR_ANSWER) + "\n```"
        bill = parse_ocr_payload(text)
        assert bill.montant_ht == 81.37

    def test_nulls_stay_none(self):
        bill = parse_ocr_payload({"consommation_kwh": None, "ville": None})
        assert bill.consommation_kwh is None
        assert bill.ville is None
        assert bill.montant_ttc is None

    def test_unreadable_number_is_none_not_zero(self):
        bill = parse_ocr_payload({"consommation_kwh": "illisible", "montant_ttc": "1 234,50 DH"})
        assert bill.consommation_kwh is None
        assert bill.montant_ttc == 1234.5

    def test_non_finite_numbers_are_none(self):
        bill = parse_ocr_payload('{"periode_jours": Infinity, "consommation_kwh": NaN, "montant_ttc": -Infinity}')
        assert bill.periode_jours is None
        assert bill.consommation_kwh is None
        assert bill.montant_ttc is None

    def test_blank_strings_are_none(self):
        assert parse_ocr_payload({"ville": "  "}).ville is None

    def test_invalid_json(self):
        with pytest.raises(BillExtractionError):
            parse_ocr_payload("Je ne peux pas lire cette facture.")

    def test_not_an_object(self):
        with pytest.raises(BillExtractionError):
            parse_ocr_payload("[1, 2, 3]")


class TestConsumptionFromIndex:

    def test_reported_consumption_wins(self):
        bill = ExtractedBill(consommation_kwh=120, index_ancien=1000, index_nouveau=1300)
        assert consumption_from_index(bill) == 120

    def test_index_difference(self):
        bill = ExtractedBill(index_ancien=1000, index_nouveau=1250)
        assert consumption_from_index(bill) == 250

    def test_decreasing_index(self):
        bill = ExtractedBill(index_ancien=1000, index_nouveau=900)
        assert consumption_from_index(bill) is None

    def test_nothing_available(self):
        assert consumption_from_index(ExtractedBill()) is None


class TestCrossCheck:

    def test_consistent_bill(self):
        check = cross_check(parse_ocr_payload(OCR_ANSWER))
        assert check.expected_distributor == Distributor.LYDEC
        assert check.distributor_matches is True
        assert check.expected_mode == "Progressif"
        assert check.computed_ttc == 92.76
        assert check.reported_ttc == 92.76
        assert check.gap_percent == 0
        assert check.reported_tranche == "Tranche 1"

    def test_city_override(self):
        check = cross_check(parse_ocr_payload(OCR_ANSWER), city="Rabat")
        assert check.expected_distributor == Distributor.REDAL
        assert check.distributor_matches is False

    def test_amendis_family_name(self):
        bill = ExtractedBill(ville="Tétouan", distributeur="Amendis", consommation_kwh=300)
        check = cross_check(bill)
        assert check.expected_distributor == Distributor.AMENDIS_NORD
        assert check.distributor_matches is True
        assert check.expected_mode == "Sélectif"

    def test_unknown_consumption_computes_nothing(self):
        check = cross_check(ExtractedBill(ville="Agadir", montant_ttc=300))
        assert check.expected_distributor == Distributor.ONEE
        assert check.distributor_matches is None
        assert check.consumption_kwh is None
        assert check.computed_ttc is None
        assert check.expected_mode is None
        assert check.gap_percent is None

    def test_gap_percent(self):
        bill = ExtractedBill(ville="Casablanca", consommation_kwh=100, montant_ttc=100)
        # (100 - 92.76) / 100
        assert cross_check(bill).gap_percent == 7.2
