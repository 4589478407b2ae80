import streamlit as st
import pandas as pd

from tarif_solaire.formatage import format_mad, format_percent
from tarif_solaire.multi_sites import (
    export_results_excel,
    generate_template_excel,
    process_multi_sites,
)

st.set_page_config(page_title="Multi Sites", page_icon="☀️", layout="wide")
st.title("📋 Traitement multi sites")
st.markdown("Calculez les économies de plusieurs logements en une fois via un fichier Excel.")

st.download_button(
    "📥 Télécharger le modèle Excel",
    data=generate_template_excel(),
    file_name="modele_multi_sites.xlsx",
    mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
)

st.divider()

fichier = st.file_uploader("Fichier rempli (.xlsx)", type=["xlsx"])

if fichier is not None:
    contenu = fichier.getvalue()

    if st.button("☀️ Traiter tous les sites", use_container_width=True):
        progress = st.progress(0, text="Traitement...")
        resultat = process_multi_sites(
            contenu,
            progress_callback=lambda p, texte: progress.progress(p, text=texte),
        )
        progress.progress(1.0, text="Terminé !")

        st.subheader("Résultats consolidés")

        df_res = pd.DataFrame([
            {
                "Nom": s["Nom"],
                "Ville": s["Ville"],
                "Distributeur": s["Distributeur"] or "Erreur",
                "Facture avant": format_mad(s["Facture avant"], 0),
                "Facture après": format_mad(s["Facture après"], 0),
                "Économie": format_mad(s["Économie"], 0),
                "Économie (%)": format_percent(s["Économie (%)"]),
            }
            for s in resultat["sites"]
        ])
        st.dataframe(df_res, hide_index=True, use_container_width=True)

        total = resultat["consolidated"]
        tc1, tc2, tc3 = st.columns(3)
        tc1.metric("Factures actuelles", format_mad(total["total_facture_avant"], 0))
        tc2.metric("Factures avec solaire", format_mad(total["total_facture_apres"], 0))
        tc3.metric("Économie consolidée", format_mad(total["total_economie"], 0),
                   delta=format_percent(total["economie_percent"]))

        st.download_button(
            "📊 Télécharger les résultats Excel",
            data=export_results_excel(resultat),
            file_name="resultats_multi_sites.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            use_container_width=True,
        )

        erreurs = [s for s in resultat["sites"] if "_erreur" in s]
        if erreurs:
            st.warning(f"{len(erreurs)} site(s) en erreur :")
            for s in erreurs:
                st.error(f"**{s['Nom']}** : {s['_erreur']}")
