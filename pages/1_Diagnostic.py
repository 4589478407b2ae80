import streamlit as st
import pandas as pd
from pydantic import ValidationError

from tarif_solaire.constantes import CITY_DISTRIBUTOR
from tarif_solaire.diagnostic import run_diagnostic
from tarif_solaire.extraction import BillExtractionError, cross_check, parse_ocr_payload
from tarif_solaire.formatage import (
    format_kwh,
    format_mad,
    format_percent,
    format_unit_price,
    parse_monthly_profile,
)
from tarif_solaire.graphiques import (
    create_bracket_chart,
    create_monthly_chart,
    create_savings_chart,
)
from tarif_solaire.models import DiagnosticInput
from tarif_solaire.multi_sites import translate_validation_error
from tarif_solaire.rapport_pdf import generate_report

AUTRE_VILLE = "Autre ville"

st.set_page_config(page_title="Diagnostic", page_icon="☀️", layout="wide")
st.title("☀️ Diagnostic de votre facture")

# ---------------------------------------------------------------------------
# Optional: bill read by the OCR service
# ---------------------------------------------------------------------------
with st.expander("Importer le résultat OCR d'une facture (JSON)"):
    ocr_json = st.text_area("Réponse du service OCR", height=160)
    if ocr_json.strip():
        try:
            facture = parse_ocr_payload(ocr_json)
            check = cross_check(facture)
            st.session_state["facture_ocr"] = facture

            o1, o2, o3 = st.columns(3)
            o1.metric("Distributeur attendu", check.expected_distributor.value,
                      help=f"Lu sur la facture : {facture.distributeur or '—'}")
            o2.metric("Mode tarifaire", check.expected_mode or "—",
                      help=f"Tranche lue : {check.reported_tranche or '—'}")
            o3.metric("Montant recalculé", format_mad(check.computed_ttc) if check.computed_ttc is not None else "—",
                      delta=f"{check.gap_percent} % d'écart" if check.gap_percent is not None else None,
                      delta_color="off")
            if check.distributor_matches is False:
                st.warning("Le distributeur lu ne correspond pas à la ville indiquée.")
        except BillExtractionError as e:
            st.error(str(e))

facture_ocr = st.session_state.get("facture_ocr")

col_form, col_result = st.columns([1, 1.4])

with col_form:
    with st.form("form_diagnostic"):
        st.subheader("Votre foyer")

        villes = sorted(CITY_DISTRIBUTOR.keys()) + [AUTRE_VILLE]
        ville_choisie = st.selectbox("Ville", villes)
        autre_ville = st.text_input("Si autre ville, précisez")
        nom_client = st.text_input("Nom (optionnel)", value=(facture_ocr.nom_client or "") if facture_ocr else "")

        st.divider()

        conso_defaut = 4200.0
        if facture_ocr and facture_ocr.consommation_kwh is not None:
            conso_defaut = float(facture_ocr.consommation_kwh) * 12
        conso_annuelle = st.number_input("Consommation annuelle (kWh)", min_value=0.0,
                                         value=conso_defaut, step=100.0)
        production_annuelle = st.number_input("Production PV annuelle estimée (kWh)", min_value=0.0,
                                               value=3000.0, step=100.0)
        profil_texte = st.text_area(
            "Profil PV mensuel (optionnel, 12 valeurs janvier → décembre séparées par ;)",
            help="Remplace la production annuelle. Une colonne copiée depuis un tableur est acceptée.",
        )

        submitted = st.form_submit_button("☀️ Calculer mes économies", use_container_width=True)

# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------
with col_result:
    if submitted:
        ville = autre_ville.strip() if ville_choisie == AUTRE_VILLE else ville_choisie
        try:
            params = DiagnosticInput(
                city=ville,
                annual_consumption_kwh=conso_annuelle,
                annual_production_kwh=production_annuelle,
                monthly_production_kwh=parse_monthly_profile(profil_texte),
                client_name=nom_client,
            )
        except ValidationError as e:
            st.error(translate_validation_error(e))
            st.stop()
        except ValueError as e:
            st.error(str(e))
            st.stop()

        try:
            resultat = run_diagnostic(params)
            economies = resultat["economies"]
            st.session_state["dernier_diagnostic"] = resultat

            st.subheader("Résultats")
            m1, m2, m3 = st.columns(3)
            m1.metric("Facture actuelle", format_mad(economies.bill_before, 0))
            m2.metric("Avec solaire", format_mad(economies.bill_after, 0))
            m3.metric("Économie", format_mad(economies.savings_amount, 0),
                      delta=format_percent(economies.savings_percent))

            st.caption(
                f"Distributeur : {resultat['distributeur']} · "
                f"{format_kwh(resultat['consommation_mensuelle_kwh'])}/mois · "
                f"prix moyen {format_unit_price(resultat['prix_moyen_avant'])} TTC"
            )

            fig_economies = create_savings_chart(economies)
            st.plotly_chart(fig_economies, use_container_width=True)

            tab_mensuel, tab_grille, tab_detail = st.tabs(
                ["Évolution mensuelle", "Grille tarifaire", "Détail facture"]
            )

            with tab_mensuel:
                st.plotly_chart(create_monthly_chart(resultat["resultats_mensuels"]), use_container_width=True)

            with tab_grille:
                grille = resultat["grille"]
                st.markdown(f"**Mode {grille.mode}**")
                df_grille = pd.DataFrame([b.model_dump(by_alias=True) for b in grille.brackets])
                df_grille = df_grille.rename(columns={
                    "from": "De (kWh)",
                    "to": "À (kWh)",
                    "price_pretax": "Prix HT",
                    "price_ttc": "Prix TTC",
                })
                st.dataframe(df_grille, hide_index=True, use_container_width=True)

            with tab_detail:
                st.plotly_chart(create_bracket_chart(resultat["detail_mensuel"]), use_container_width=True)

            st.divider()
            try:
                fig_png = fig_economies.to_image(format="png", width=800, height=400)
            except Exception:
                fig_png = b""

            pdf_bytes = generate_report(
                client_name=nom_client,
                city=ville,
                distributor=resultat["distributeur"],
                annual_consumption_kwh=conso_annuelle,
                annual_production_kwh=resultat["production_annuelle_kwh"],
                savings=economies,
                tariff=resultat["grille"],
                chart_png=fig_png,
            )
            st.download_button(
                "📄 Télécharger le rapport PDF",
                data=pdf_bytes,
                file_name="diagnostic_solaire.pdf",
                mime="application/pdf",
                use_container_width=True,
            )
        except Exception as e:
            st.error(f"Erreur de calcul : {e}")
    else:
        st.info("Renseignez votre foyer puis cliquez sur **Calculer mes économies**.")
