import logging
from io import BytesIO
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas
from reportlab.lib.colors import HexColor
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.platypus import Table, TableStyle

from tarif_solaire.formatage import format_kwh, format_mad, format_percent
from tarif_solaire.models import SavingsResult, TariffDetails

logger = logging.getLogger(__name__)

PAGE_W, PAGE_H = A4
VERT_FONCE = HexColor("#148c73")
GRIS_CLAIR = HexColor("#f0f2f6")
BLANC = HexColor("#FFFFFF")
NOIR = HexColor("#262730")
MARGE = 40


def generate_report(client_name: str, city: str, distributor: str,
                    annual_consumption_kwh: float, annual_production_kwh: float,
                    savings: SavingsResult, tariff: TariffDetails,
                    chart_png: bytes = b"") -> bytes:
    """Returns PDF bytes for st.download_button.

    Page 1 — Summary
    Page 2 — Chart
    Page 3 — Applicable tariff grid
    """
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)

    _summary_page(c, client_name, city, distributor,
                  annual_consumption_kwh, annual_production_kwh, savings)
    c.showPage()

    _chart_page(c, chart_png)
    c.showPage()

    _tariff_page(c, tariff)
    c.showPage()

    c.save()
    return buf.getvalue()


def _header(c: canvas.Canvas, title: str, height: int = 60):
    c.setFillColor(VERT_FONCE)
    c.rect(0, PAGE_H - height, PAGE_W, height, fill=1, stroke=0)
    c.setFillColor(BLANC)
    c.setFont("Helvetica-Bold", 18)
    c.drawString(MARGE, PAGE_H - 40, title)


def _summary_page(c: canvas.Canvas, client_name: str, city: str, distributor: str,
                  consumption: float, production: float, savings: SavingsResult):
    c.setFillColor(VERT_FONCE)
    c.rect(0, PAGE_H - 80, PAGE_W, 80, fill=1, stroke=0)

    c.setFillColor(BLANC)
    c.setFont("Helvetica-Bold", 22)
    c.drawString(MARGE, PAGE_H - 50, "Diagnostic solaire")
    c.setFont("Helvetica", 11)
    c.drawString(MARGE, PAGE_H - 70, "Estimation des économies en autoconsommation")

    y = PAGE_H - 120
    c.setFillColor(NOIR)
    c.setFont("Helvetica-Bold", 14)
    if client_name:
        c.drawString(MARGE, y, f"Client : {client_name}")
        y -= 25

    c.setFont("Helvetica", 12)
    lines = [
        f"Ville : {city or '—'} (distributeur : {distributor})",
        f"Consommation annuelle : {format_kwh(consumption)}",
        f"Production PV annuelle : {format_kwh(production)}",
        f"Facture actuelle : {format_mad(savings.bill_before, 0)} / an",
        f"Facture avec solaire : {format_mad(savings.bill_after, 0)} / an",
    ]
    for line in lines:
        c.drawString(MARGE, y, line)
        y -= 20
    y -= 40

    c.setFillColor(VERT_FONCE)
    c.setFont("Helvetica-Bold", 40)
    c.drawCentredString(PAGE_W / 2, y, format_percent(savings.savings_percent))
    y -= 25
    c.setFont("Helvetica", 14)
    c.drawCentredString(PAGE_W / 2, y, "de la facture économisés")
    y -= 60

    c.setFillColor(NOIR)
    c.setFont("Helvetica-Bold", 24)
    c.drawCentredString(PAGE_W / 2, y, format_mad(savings.savings_amount, 0))
    y -= 22
    c.setFont("Helvetica", 13)
    c.setFillColor(VERT_FONCE)
    c.drawCentredString(PAGE_W / 2, y, "Économie annuelle estimée")

    _footer(c)


def _chart_page(c: canvas.Canvas, chart_png: bytes):
    _header(c, "Facture annuelle avant / après solaire")

    if chart_png:
        try:
            img = ImageReader(BytesIO(chart_png))
            img_w = 160 * mm
            img_h = 100 * mm
            x = (PAGE_W - img_w) / 2
            y = (PAGE_H - 60 - img_h) / 2
            c.drawImage(img, x, y, width=img_w, height=img_h,
                        preserveAspectRatio=True, anchor="c")
            _footer(c)
            return
        except Exception as e:
            logger.warning("Graphique illisible, page laissée vide : %s", e)

    c.setFillColor(NOIR)
    c.setFont("Helvetica", 12)
    c.drawCentredString(PAGE_W / 2, PAGE_H / 2, "Graphique non disponible")
    _footer(c)


def _tariff_page(c: canvas.Canvas, tariff: TariffDetails):
    """Page 3: tariff grid for the household's monthly consumption."""
    _header(c, f"Grille tarifaire applicable — mode {tariff.mode}")

    headers = ["Tranche", "De (kWh)", "À (kWh)", "Prix HT", "Prix TTC"]
    data = [headers]
    for i, b in enumerate(tariff.brackets):
        data.append([
            f"T{i + 1}",
            f"{b.from_kwh:.0f}",
            f"{b.to_kwh:.0f}" if b.to_kwh is not None else "et plus",
            f"{b.price_pretax:.4f}",
            f"{b.price_ttc:.4f}",
        ])

    table = Table(data, colWidths=[60, 90, 90, 100, 100])
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), VERT_FONCE),
        ("TEXTCOLOR", (0, 0), (-1, 0), BLANC),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, 0), 10),
        ("ALIGN", (0, 0), (-1, 0), "CENTER"),
        ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
        ("FONTSIZE", (0, 1), (-1, -1), 9),
        ("ALIGN", (0, 1), (0, -1), "CENTER"),
        ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [BLANC, GRIS_CLAIR]),
        ("GRID", (0, 0), (-1, -1), 0.5, HexColor("#cccccc")),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("TOPPADDING", (0, 0), (-1, -1), 6),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
    ]))

    table_w, table_h = table.wrap(0, 0)
    x = (PAGE_W - table_w) / 2
    y = PAGE_H - 90 - table_h
    table.drawOn(c, x, y)

    c.setFillColor(NOIR)
    c.setFont("Helvetica", 9)
    c.drawString(MARGE, y - 20, "Prix en MAD/kWh, TVA 14 %. Tarifs basse tension résidentiels.")

    _footer(c)


def _footer(c: canvas.Canvas):
    c.setFillColor(HexColor("#999999"))
    c.setFont("Helvetica", 8)
    c.drawCentredString(PAGE_W / 2, 20,
                        "Diagnostic solaire — Document généré automatiquement")
