import logging

import pandas as pd
from io import BytesIO
from pydantic import ValidationError

from tarif_solaire.diagnostic import run_diagnostic
from tarif_solaire.formatage import parse_monthly_profile
from tarif_solaire.models import DiagnosticInput

logger = logging.getLogger(__name__)

SHEET_NAME = "Sites"

COL_NOM = "Nom"
COL_VILLE = "Ville"
COL_CONSO = "Consommation annuelle (kWh)"
COL_PROD = "Production annuelle (kWh)"
COL_PROFIL = "Profil PV mensuel (kWh, 12 valeurs ;)"

TEMPLATE_COLUMNS = [COL_NOM, COL_VILLE, COL_CONSO, COL_PROD, COL_PROFIL]

EXEMPLE = {
    COL_NOM: "Villa Exemple",
    COL_VILLE: "Casablanca",
    COL_CONSO: 4200,
    COL_PROD: 3000,
    COL_PROFIL: "",
}

EXPORT_COLUMNS = [
    "Nom",
    "Ville",
    "Distributeur",
    "Facture avant (MAD)",
    "Facture après (MAD)",
    "Économie (MAD)",
    "Économie (%)",
    "Erreur",
]


def generate_template_excel() -> bytes:
    """Template with headers + 1 example row. Returns .xlsx bytes."""
    buf = BytesIO()
    df = pd.DataFrame([EXEMPLE], columns=TEMPLATE_COLUMNS)
    with pd.ExcelWriter(buf, engine="xlsxwriter") as writer:
        df.to_excel(writer, index=False, sheet_name=SHEET_NAME)
    return buf.getvalue()


def _cell(row: pd.Series, column: str, default=None):
    value = row.get(column, default)
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return default
    return value


def _params_from_row(row: pd.Series) -> DiagnosticInput:
    """Build DiagnosticInput from a spreadsheet row.

    Raises ValidationError on negative figures, ValueError on non-numeric ones
    or an incomplete monthly profile. A filled profile replaces the annual
    production.
    """
    consumption = _cell(row, COL_CONSO)
    if consumption is None:
        raise ValueError(f"Colonne '{COL_CONSO}' non renseignée")

    return DiagnosticInput(
        client_name=str(_cell(row, COL_NOM, "")),
        city=str(_cell(row, COL_VILLE, "")).strip(),
        annual_consumption_kwh=float(consumption),
        annual_production_kwh=float(_cell(row, COL_PROD, 0)),
        monthly_production_kwh=parse_monthly_profile(_cell(row, COL_PROFIL)),
    )


def translate_validation_error(e: ValidationError) -> str:
    """Convert a pydantic ValidationError to a French message."""
    messages = []
    for err in e.errors():
        champ = " > ".join(str(loc) for loc in err["loc"])
        kind = err["type"]
        if "greater_than_equal" in kind:
            messages.append(f"Champ '{champ}' : la valeur doit être >= {err.get('ctx', {}).get('ge', 0)}")
        elif "missing" in kind:
            messages.append(f"Champ '{champ}' : obligatoire mais non renseigné")
        else:
            messages.append(f"Champ '{champ}' : {err['msg']}")
    return "; ".join(messages)


def _error_row(name, city, message: str) -> dict:
    return {
        "Nom": name,
        "Ville": city,
        "Distributeur": "",
        "Facture avant": 0,
        "Facture après": 0,
        "Économie": 0,
        "Économie (%)": 0,
        "_erreur": message,
    }


def process_multi_sites(file_bytes: bytes, progress_callback=None) -> dict:
    """Run the diagnostic on every row of an uploaded workbook.

    Args:
        file_bytes: Excel file bytes (sheet "Sites", or the first sheet).
        progress_callback: Optional callable(progress_float, status_text).

    Returns:
        {'sites': [...], 'consolidated': {...}}
        Each site has keys: Nom, Ville, Distributeur, Facture avant,
        Facture après, Économie, Économie (%), _resultat. On error: _erreur
        replaces _resultat and the amounts are 0.
    """
    try:
        df_upload = pd.read_excel(BytesIO(file_bytes), sheet_name=SHEET_NAME)
    except ValueError:
        df_upload = pd.read_excel(BytesIO(file_bytes))

    total = len(df_upload)
    if total == 0:
        return {"sites": [], "consolidated": _consolidate([])}

    sites = []

    for pos, (_, row) in enumerate(df_upload.iterrows()):
        name = _cell(row, COL_NOM, f"Site {pos + 1}")
        city = _cell(row, COL_VILLE, "")
        if progress_callback:
            progress_callback((pos + 1) / total, f"Traitement du site {pos + 1}/{total} : {name}")

        try:
            params = _params_from_row(row)
        except ValidationError as e:
            message = translate_validation_error(e)
            logger.warning("Site %s rejeté : %s", name, message)
            sites.append(_error_row(name, city, message))
            continue
        except (TypeError, ValueError) as e:
            logger.warning("Site %s rejeté : %s", name, e)
            sites.append(_error_row(name, city, str(e)))
            continue

        res = run_diagnostic(params)
        savings = res["economies"]
        sites.append({
            "Nom": name,
            "Ville": city,
            "Distributeur": res["distributeur"],
            "Facture avant": savings.bill_before,
            "Facture après": savings.bill_after,
            "Économie": savings.savings_amount,
            "Économie (%)": savings.savings_percent,
            "_resultat": res,
        })

    logger.info("%d site(s) traité(s), %d en erreur", total, sum("_erreur" in s for s in sites))
    return {"sites": sites, "consolidated": _consolidate(sites)}


def _consolidate(sites: list[dict]) -> dict:
    valid = [s for s in sites if "_resultat" in s]
    total_before = sum(s["Facture avant"] for s in valid)
    total_after = sum(s["Facture après"] for s in valid)
    total_savings = sum(s["Économie"] for s in valid)
    return {
        "sites_valides": len(valid),
        "sites_en_erreur": len(sites) - len(valid),
        "total_facture_avant": total_before,
        "total_facture_apres": total_after,
        "total_economie": total_savings,
        "economie_percent": round(total_savings / total_before * 100) if total_before > 0 else 0,
    }


def export_results_excel(result: dict) -> bytes:
    df_export = pd.DataFrame([
        {
            "Nom": s["Nom"],
            "Ville": s["Ville"],
            "Distributeur": s["Distributeur"],
            "Facture avant (MAD)": s["Facture avant"],
            "Facture après (MAD)": s["Facture après"],
            "Économie (MAD)": s["Économie"],
            "Économie (%)": s["Économie (%)"],
            "Erreur": s.get("_erreur", ""),
        }
        for s in result["sites"]
    ], columns=EXPORT_COLUMNS)

    buf = BytesIO()
    with pd.ExcelWriter(buf, engine="xlsxwriter") as writer:
        df_export.to_excel(writer, index=False, sheet_name="Résultats")
    return buf.getvalue()
