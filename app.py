import logging

import streamlit as st

from tarif_solaire.constantes import SELECTIVE_BRACKETS, TAX_RATE
from tarif_solaire.grille import explain_tariff

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)

st.set_page_config(
    page_title="Diagnostic Solaire Maroc",
    page_icon="☀️",
    layout="wide",
)

st.title("☀️ Diagnostic Solaire Maroc")

st.markdown(
    """
    Estimez votre facture d'électricité selon la grille tarifaire basse tension
    (ONEE, Lydec, Redal, Amendis) et les économies apportées par
    l'autoconsommation photovoltaïque.
    """
)

st.divider()

col1, col2, col3 = st.columns(3)

with col1:
    st.metric(
        label="TVA",
        value=f"{TAX_RATE * 100:.0f} %",
        help="Appliquée au montant hors taxes des tranches",
    )

with col2:
    st.metric(
        label="Seuil mode progressif",
        value="150 kWh/mois",
        help="Au-delà, toute la consommation est facturée en mode sélectif",
    )

with col3:
    st.metric(
        label="Tranches sélectives",
        value=str(len(SELECTIVE_BRACKETS)),
        help="De 0,9676 à 1,4773 MAD/kWh HT",
    )

st.divider()

st.subheader("Grilles en vigueur")

g1, g2 = st.columns(2)
for col, exemple_kwh in ((g1, 100), (g2, 300)):
    grille = explain_tariff(exemple_kwh)
    with col:
        st.markdown(f"**Mode {grille.mode}**")
        st.dataframe(
            [b.model_dump(by_alias=True) for b in grille.brackets],
            hide_index=True,
            use_container_width=True,
        )

st.subheader("Pages")

st.markdown(
    """
    - **Diagnostic** — Saisissez votre ville, votre consommation annuelle et la
      production PV estimée, ou importez le résultat OCR de votre facture, pour
      obtenir la facture avant/après solaire et un rapport PDF.
    - **Multi Sites** — Traitez plusieurs logements d'un coup via un fichier
      Excel, avec résultats consolidés.
    """
)
