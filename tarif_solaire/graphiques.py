import plotly.graph_objects as go

from tarif_solaire.formatage import format_mad
from tarif_solaire.models import BillBreakdown, SavingsResult

VERT_FONCE = "#148c73"
VERT_CLAIR = "#80c739"
ORANGE = "#f0a202"


def create_savings_chart(savings: SavingsResult) -> go.Figure:
    """Two bars: annual bill without PV vs with PV, savings annotated."""
    labels = ["Sans solaire", "Avec solaire"]
    values = [savings.bill_before, savings.bill_after]

    fig = go.Figure(go.Bar(
        x=labels,
        y=values,
        marker_color=[ORANGE, VERT_FONCE],
        text=[format_mad(v, 0) for v in values],
        textposition="outside",
        hovertemplate="%{x} : %{customdata}<extra></extra>",
        customdata=[format_mad(v, 0) for v in values],
    ))

    fig.update_layout(
        title=f"Facture annuelle TTC — économie {format_mad(savings.savings_amount, 0)} "
              f"({savings.savings_percent} %)",
        yaxis_title="MAD",
        yaxis_tickformat=",.0f",
        plot_bgcolor="white",
        height=420,
    )

    return fig


def create_monthly_chart(monthly_results: list) -> go.Figure:
    """Grouped bars per month: bill before / after, PV production as a line."""
    months = [r["mois_nom"] for r in monthly_results]

    fig = go.Figure()

    fig.add_trace(go.Bar(
        name="Facture sans solaire",
        x=months,
        y=[r["facture_avant"] for r in monthly_results],
        marker_color=ORANGE,
        hovertemplate="%{x} : %{y:.2f} MAD<extra></extra>",
    ))

    fig.add_trace(go.Bar(
        name="Facture avec solaire",
        x=months,
        y=[r["facture_apres"] for r in monthly_results],
        marker_color=VERT_FONCE,
        hovertemplate="%{x} : %{y:.2f} MAD<extra></extra>",
    ))

    fig.add_trace(go.Scatter(
        name="Production PV (kWh)",
        x=months,
        y=[r["production_kwh"] for r in monthly_results],
        mode="lines+markers",
        line=dict(color=VERT_CLAIR, width=2),
        yaxis="y2",
        hovertemplate="%{x} : %{y:.0f} kWh<extra></extra>",
    ))

    fig.update_layout(
        barmode="group",
        title="Factures mensuelles TTC",
        yaxis_title="MAD",
        yaxis2=dict(title="kWh", overlaying="y", side="right", showgrid=False),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
        plot_bgcolor="white",
        height=450,
    )

    return fig


def create_bracket_chart(breakdown: BillBreakdown) -> go.Figure:
    """Donut chart: pre-tax cost per bracket plus TVA."""
    labels = [
        f"Tranche {i + 1} ({line.consumed_kwh:.0f} kWh)"
        for i, line in enumerate(breakdown.lines)
    ]
    values = [line.cost_pretax for line in breakdown.lines]
    labels.append("TVA 14 %")
    values.append(breakdown.tva)

    colors = ["#148c73", "#1aad8e", "#20c9a5", "#80c739", "#a3d96b"]

    fig = go.Figure(go.Pie(
        labels=labels,
        values=values,
        hole=0.4,
        marker=dict(colors=colors[:len(labels)]),
        textinfo="label+percent",
        hovertemplate="%{label} : %{customdata}<br>%{percent}<extra></extra>",
        customdata=[format_mad(v) for v in values],
    ))

    fig.update_layout(
        title=f"Composition de la facture mensuelle ({format_mad(breakdown.cost_ttc)} TTC)",
        height=450,
    )

    return fig
