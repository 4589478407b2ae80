import math
import re
from typing import Optional

_NON_NUMERIC = re.compile(r"[^0-9,.\-]")
_PROFILE_SEPARATORS = re.compile(r"[;\n\t]+")


def format_mad(valeur: float, decimales: int = 2) -> str:
    """1234.56 → '1 234,56 MAD'"""
    if valeur < 0:
        return f"-{_format_number_fr(abs(valeur), decimales)} MAD"
    return f"{_format_number_fr(valeur, decimales)} MAD"


def format_percent(valeur: float) -> str:
    """42 → '42 %' (savings percentages are already whole numbers)"""
    return f"{_format_number_fr(valeur, 0)} %"


def format_kwh(valeur: float) -> str:
    """4200 → '4 200 kWh'"""
    return f"{_format_number_fr(valeur, 0)} kWh"


def format_unit_price(valeur: float) -> str:
    """1.1031 → '1,1031 MAD/kWh'"""
    return f"{_format_number_fr(valeur, 4)} MAD/kWh"


def parse_number_fr(valeur) -> Optional[float]:
    """'1 234,56' → 1234.56 | '147,91 DH' → 147.91 | '' → None | None → None

    Numbers already parsed by the caller pass through. Anything that cannot
    be read as a finite number gives None rather than 0.
    """
    if valeur is None or isinstance(valeur, bool):
        return None
    if isinstance(valeur, (int, float)):
        try:
            nombre = float(valeur)
        except OverflowError:
            return None
        return nombre if math.isfinite(nombre) else None
    if not isinstance(valeur, str):
        return None

    texte = _NON_NUMERIC.sub("", valeur)
    if not texte or texte in ("-", ",", "."):
        return None

    if "," in texte and "." in texte:
        # the right-most separator is the decimal one
        if texte.rfind(",") > texte.rfind("."):
            texte = texte.replace(".", "").replace(",", ".")
        else:
            texte = texte.replace(",", "")
    elif "," in texte:
        texte = texte.replace(",", ".")
    if texte.count(".") > 1:
        texte = texte.replace(".", "")

    try:
        nombre = float(texte)
    except ValueError:
        return None
    return nombre if math.isfinite(nombre) else None


def _format_number_fr(valeur: float, decimales: int) -> str:
    """1234.56 → '1 234,56'"""
    texte = f"{valeur:,.{decimales}f}"
    return texte.replace(",", " ").replace(".", ",")


def parse_monthly_profile(texte) -> Optional[list[float]]:
    """'310; 350; ...' (12 values, Jan..Dec) → [310.0, 350.0, ...] | '' → None

    Values are separated by ';', tabs or line breaks so that a column pasted
    from a spreadsheet is accepted. Raises ValueError when the profile is
    incomplete or a value is unreadable.
    """
    if texte is None:
        return None
    texte = str(texte).strip()
    if not texte:
        return None

    morceaux = [m for m in _PROFILE_SEPARATORS.split(texte) if m.strip()]
    if len(morceaux) != 12:
        raise ValueError(f"Le profil mensuel doit contenir 12 valeurs ({len(morceaux)} trouvées)")

    valeurs = []
    for mois, morceau in enumerate(morceaux, start=1):
        valeur = parse_number_fr(morceau)
        if valeur is None:
            raise ValueError(f"Profil mensuel : valeur illisible pour le mois {mois} ({morceau.strip()!r})")
        valeurs.append(valeur)
    return valeurs
