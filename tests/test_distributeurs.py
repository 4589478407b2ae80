import pytest

from tarif_solaire.constantes import CITY_DISTRIBUTOR, Distributor
from tarif_solaire.distributeurs import distributor_matches, resolve_distributor


class TestResolveDistributor:

    @pytest.mark.parametrize("city, expected", [
        ("Casablanca", "Lydec"),
        ("Tit Mellil", "Lydec"),
        ("Rabat", "Redal"),
        ("Salé", "Redal"),
        ("Tanger", "Amendis Tanger"),
        ("M'diq", "Amendis Nord"),
        ("Tétouan", "Amendis Nord"),
    ])
    def test_listed_cities(self, city, expected):
        assert resolve_distributor(city) == expected

    @pytest.mark.parametrize("city", ["Unknown City", "Marrakech", "Agadir", "", None])
    def test_everything_else_is_onee(self, city):
        assert resolve_distributor(city) == Distributor.ONEE

    def test_match_is_case_sensitive(self):
        assert resolve_distributor("casablanca") == Distributor.ONEE
        assert resolve_distributor("Sale") == Distributor.ONEE

    def test_directory_is_read_only(self):
        assert len(CITY_DISTRIBUTOR) == 16
        with pytest.raises(TypeError):
            CITY_DISTRIBUTOR["Marrakech"] = Distributor.LYDEC


class TestDistributorMatches:

    def test_same_name(self):
        assert distributor_matches("Lydec", Distributor.LYDEC) is True
        assert distributor_matches(" onee ", Distributor.ONEE) is True

    def test_family_name_on_bill(self):
        assert distributor_matches("Amendis", Distributor.AMENDIS_NORD) is True
        assert distributor_matches("Amendis", Distributor.AMENDIS_TANGER) is True

    def test_mismatch(self):
        assert distributor_matches("Redal", Distributor.LYDEC) is False
        assert distributor_matches("Ly", Distributor.LYDEC) is False

    def test_nothing_reported(self):
        assert distributor_matches(None, Distributor.LYDEC) is None
        assert distributor_matches("  ", Distributor.LYDEC) is None
