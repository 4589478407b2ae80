from typing import Optional

from tarif_solaire.constantes import CITY_DISTRIBUTOR, Distributor


def resolve_distributor(city: Optional[str]) -> Distributor:
    """Distributor serving ``city`` (exact, case-sensitive match).

    Any city outside the delegated-management areas, including a missing one,
    is served by ONEE directly.
    """
    if not city:
        return Distributor.ONEE
    return CITY_DISTRIBUTOR.get(city, Distributor.ONEE)


def distributor_matches(reported: Optional[str], expected: Distributor) -> Optional[bool]:
    """Compare a distributor name read on a bill with the expected one.

    Bills only print the family name "Amendis", so a reported name also
    matches when it is the first word(s) of the expected one. None when
    nothing was reported.
    """
    if reported is None or not str(reported).strip():
        return None
    reported = str(reported).strip().lower()
    expected_name = expected.value.lower()
    return expected_name == reported or expected_name.startswith(reported + " ")
