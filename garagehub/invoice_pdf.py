"""
Printable GST invoice.

Renders an invoice view-model (see ``garagehub.converters.to_app_invoice``)
into an A4 PDF with reportlab: garage header from the settings, bill-to and
vehicle details, line items with their GST, totals, notes and signature
lines.
"""
from io import BytesIO
from typing import Mapping, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

BRAND_COLOR = colors.HexColor("#1E3A5F")
GRID_COLOR = colors.HexColor("#CBD5E1")
HEADER_FILL = colors.HexColor("#F1F5F9")

DEFAULT_NOTES = "Thank you for your business."

ITEM_COLUMNS = ("#", "Description", "HSN/SAC", "Qty", "Rate", "Amount", "CGST", "SGST", "Total")


def money(value) -> str:
    return f"Rs. {float(value or 0):,.2f}"


def _quantity(value) -> str:
    return f"{float(value or 0):g}"


def _text(value: Optional[str]) -> str:
    """Escape free text for a Paragraph and keep its line breaks."""
    return escape(value or "").replace("\n", "<br/>")


def _styles() -> dict:
    sheet = getSampleStyleSheet()
    normal = sheet["Normal"]
    return {
        "title": ParagraphStyle("garage", parent=sheet["Title"], textColor=BRAND_COLOR, spaceAfter=2),
        "heading": ParagraphStyle("heading", parent=sheet["Heading3"], spaceBefore=4, spaceAfter=4),
        "normal": normal,
        "small": ParagraphStyle("small", parent=normal, fontSize=8, leading=10),
        "meta": ParagraphStyle("meta", parent=normal, fontSize=8, textColor=colors.grey),
    }


def _header(garage_name: str, settings: Mapping[str, Optional[str]], styles: dict) -> list:
    elems = [Paragraph(_text(garage_name), styles["title"])]
    lines = [_text(settings.get("address"))]
    if settings.get("phone"):
        lines.append(f"Phone: {_text(settings['phone'])}")
    if settings.get("email"):
        lines.append(f"Email: {_text(settings['email'])}")
    if settings.get("gstin"):
        lines.append(f"<b>GSTIN:</b> {_text(settings['gstin'])}")
    elems.append(Paragraph("<br/>".join(line for line in lines if line), styles["normal"]))
    elems.append(Spacer(1, 4 * mm))
    elems.append(Paragraph("TAX INVOICE", styles["heading"]))
    return elems


def _details(invoice: Mapping, settings: Mapping[str, Optional[str]], styles: dict) -> Table:
    advisor = invoice.get("advisorName") or settings.get("default_advisor") or ""
    left = [
        f"<b>Bill to:</b> {_text(invoice.get('customerName'))}",
        f"<b>Phone:</b> {_text(invoice.get('customerPhone'))}",
        f"<b>Vehicle:</b> {_text(invoice.get('carDetails'))}",
    ]
    if invoice.get("mileage"):
        left.append(f"<b>Mileage:</b> {invoice['mileage']:,} km")
    right = [
        f"<b>Invoice no:</b> {_text(invoice.get('invoiceNumber'))}",
        f"<b>Date:</b> {_text(invoice.get('date'))}",
        f"<b>Status:</b> {_text(invoice.get('status'))}",
    ]
    if advisor:
        right.append(f"<b>Service advisor:</b> {_text(advisor)}")
    if invoice.get("warrantyInfo"):
        right.append(f"<b>Warranty:</b> {_text(invoice['warrantyInfo'])}")

    table = Table(
        [[Paragraph("<br/>".join(left), styles["normal"]), Paragraph("<br/>".join(right), styles["normal"])]],
        colWidths=[90 * mm, 80 * mm],
    )
    table.setStyle(TableStyle([
        ("BOX", (0, 0), (-1, -1), 0.5, GRID_COLOR),
        ("LINEAFTER", (0, 0), (0, -1), 0.5, GRID_COLOR),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
    ]))
    return table


def _items(invoice: Mapping, styles: dict) -> Table:
    data = [list(ITEM_COLUMNS)]
    for position, item in enumerate(invoice.get("items") or [], start=1):
        cgst = float(item.get("cgstAmount") or 0)
        sgst = float(item.get("sgstAmount") or 0)
        total = float(item.get("totalPrice") or 0)
        data.append([
            str(position),
            Paragraph(_text(item.get("description")), styles["small"]),
            item.get("hsnSac") or "",
            _quantity(item.get("quantity")),
            money(item.get("unitPrice")),
            money(total),
            f"{money(cgst)}\n@ {float(item.get('cgstRate') or 0):g}%",
            f"{money(sgst)}\n@ {float(item.get('sgstRate') or 0):g}%",
            money(total + cgst + sgst + float(item.get("igstAmount") or 0)),
        ])
    if len(data) == 1:
        data.append(["", "No items", "", "", "", "", "", "", ""])

    table = Table(
        data,
        colWidths=[8 * mm, 46 * mm, 16 * mm, 10 * mm, 20 * mm, 20 * mm, 18 * mm, 18 * mm, 22 * mm],
        repeatRows=1,
    )
    table.setStyle(TableStyle([
        ("GRID", (0, 0), (-1, -1), 0.5, GRID_COLOR),
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_FILL),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 7.5),
        ("ALIGN", (3, 1), (-1, -1), "RIGHT"),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
    ]))
    return table


def _totals(invoice: Mapping) -> Table:
    rows = [["Subtotal", money(invoice.get("subtotal"))]]
    if invoice.get("discount"):
        rows.append(["Discount", f"- {money(invoice['discount'])}"])
    for key, label in (("cgstAmount", "CGST"), ("sgstAmount", "SGST"), ("igstAmount", "IGST")):
        if invoice.get(key):
            rows.append([label, money(invoice[key])])
    rows.append(["Grand total", money(invoice.get("finalAmount"))])

    last = len(rows) - 1
    table = Table(rows, colWidths=[40 * mm, 35 * mm], hAlign="RIGHT")
    table.setStyle(TableStyle([
        ("ALIGN", (1, 0), (1, -1), "RIGHT"),
        ("LINEABOVE", (0, last), (-1, last), 0.75, BRAND_COLOR),
        ("FONTNAME", (0, last), (-1, last), "Helvetica-Bold"),
        ("TEXTCOLOR", (0, last), (-1, last), BRAND_COLOR),
    ]))
    return table


def _signatures(garage_name: str) -> Table:
    table = Table(
        [["_______________________", "_______________________"],
         ["Customer Signature", f"For {garage_name}\nAuthorized Signature"]],
        colWidths=[85 * mm, 85 * mm],
    )
    table.setStyle(TableStyle([
        ("ALIGN", (1, 0), (1, -1), "RIGHT"),
        ("TOPPADDING", (0, 0), (-1, 0), 14 * mm),
    ]))
    return table


def render_invoice_pdf(invoice: Mapping, settings: Mapping[str, Optional[str]], garage_name: str) -> bytes:
    """Render the invoice view-model to PDF bytes."""
    styles = _styles()
    garage_name = settings.get("garage_name") or garage_name
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=20 * mm,
        rightMargin=20 * mm,
        topMargin=15 * mm,
        bottomMargin=15 * mm,
        title=f"Invoice {invoice.get('invoiceNumber', '')}",
        author=garage_name,
    )

    elems = _header(garage_name, settings, styles)
    elems += [
        _details(invoice, settings, styles),
        Spacer(1, 5 * mm),
        _items(invoice, styles),
        Spacer(1, 4 * mm),
        _totals(invoice),
        Spacer(1, 6 * mm),
        Paragraph("<b>Notes</b>", styles["normal"]),
        Paragraph(_text(invoice.get("notes") or settings.get("invoice_notes") or DEFAULT_NOTES), styles["normal"]),
        _signatures(garage_name),
    ]
    if settings.get("payment_instructions"):
        elems += [
            Spacer(1, 6 * mm),
            Paragraph(f"<b>Payment:</b> {_text(settings['payment_instructions'])}", styles["meta"]),
        ]
    doc.build(elems)
    return buffer.getvalue()
