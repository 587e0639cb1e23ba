# contracts/pdf_generator.py

import os
import uuid
from io import BytesIO

from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.utils import timezone

from reportlab.pdfgen import canvas
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.lib import colors

MARGIN = 50
LINE_HEIGHT = 14
ACCENT = colors.HexColor("#1f4e5f")


class _Writer:
    """Top-to-bottom text cursor over a reportlab canvas, paging as needed."""

    def __init__(self, p, width, height):
        self.p = p
        self.width = width
        self.height = height
        self.y = height - MARGIN

    def _ensure_room(self, needed=LINE_HEIGHT):
        if self.y - needed < MARGIN:
            self.p.showPage()
            self.y = self.height - MARGIN

    def heading(self, text):
        self.space(6)
        self._ensure_room(LINE_HEIGHT * 2)
        self.p.setFillColor(ACCENT)
        self.p.setFont("Helvetica-Bold", 12)
        self.p.drawString(MARGIN, self.y, text)
        self.p.setFillColor(colors.black)
        self.y -= LINE_HEIGHT + 2

    def line(self, text, font="Helvetica", size=10):
        for chunk in simpleSplit(text, font, size, self.width - 2 * MARGIN):
            self._ensure_room()
            self.p.setFont(font, size)
            self.p.drawString(MARGIN, self.y, chunk)
            self.y -= LINE_HEIGHT

    def centered(self, text, font="Helvetica", size=10):
        self._ensure_room()
        self.p.setFont(font, size)
        self.p.drawCentredString(self.width / 2.0, self.y, text)
        self.y -= LINE_HEIGHT

    def space(self, amount=LINE_HEIGHT):
        self.y -= amount


def _type_clauses(terms):
    currency = terms.get("currency", "")
    contract_type = terms.get("contract_type")

    if contract_type == "mudarabah":
        return [
            "Mudarabah agreement: the investor provides capital and the entrepreneur manages the project.",
            f"Profit share: {terms.get('profit_share')}% of profits to the investor, remainder to the entrepreneur.",
            "Loss: the investor bears the loss of capital in case of project failure.",
            "Management: the entrepreneur is responsible for managing the project.",
        ]
    if contract_type == "musharaka":
        return [
            "Musharaka agreement: both parties contribute capital and share profits as agreed.",
            f"Profit share: {terms.get('profit_share')}% of profits to the investor, remainder to the entrepreneur.",
            "Loss: both parties share losses proportionally.",
            "Management: both parties participate in project management.",
        ]
    return [
        f"Conventional loan: the investor provides {terms.get('investment_amount')} {currency} as a loan.",
        f"Interest rate: {terms.get('interest_rate') or 'TBD'}% per annum.",
        "Repayment: the entrepreneur repays principal plus interest as agreed.",
        "Default: terms are enforced according to applicable law.",
    ]


def generate_contract_pdf(contract_id, terms):
    """
    Render the contract document and save it with Django's default storage.

    Returns the storage path (e.g. 'contracts/contract_<id>_<hex>.pdf').
    Works with local filesystem and S3 storage alike.
    """
    buffer = BytesIO()
    page_size = A4
    p = canvas.Canvas(buffer, pagesize=page_size)
    width, height = page_size
    p.setTitle(f"Investment contract {contract_id}")

    w = _Writer(p, width, height)
    currency = terms.get("currency", settings.MARKETPLACE_CURRENCY)

    # ---------- Header ----------
    p.setFillColor(ACCENT)
    w.centered("PREDIKA INVESTMENT CONTRACT", font="Helvetica-Bold", size=20)
    p.setFillColor(colors.black)
    w.centered(f"Contract type: {str(terms.get('contract_type', '')).upper()}")
    w.space()

    # ---------- Details ----------
    w.heading("CONTRACT DETAILS")
    w.line(f"Project: {terms.get('project_title')}")
    w.line(f"Investment amount: {terms.get('investment_amount')} {currency}")
    w.line(f"Expected return: {terms.get('expected_return') or 'TBD'}%")
    if terms.get("sharia_compliant"):
        w.line("Structured as a Sharia-compliant agreement.")

    # ---------- Parties ----------
    investor = terms.get("investor", {})
    entrepreneur = terms.get("entrepreneur", {})
    w.heading("PARTIES")
    w.line(f"Investor: {investor.get('name')} <{investor.get('email')}>")
    w.line(f"Entrepreneur: {entrepreneur.get('name')} <{entrepreneur.get('email')}>")
    w.line("Platform: Predika")

    # ---------- Duration ----------
    w.heading("DURATION")
    w.line(f"Start date: {terms.get('start_date')}")
    w.line(f"End date: {terms.get('end_date')}")
    w.line(f"Duration: {terms.get('duration_months')} months")

    # ---------- Terms ----------
    w.heading("TERMS & CONDITIONS")
    for index, clause in enumerate(_type_clauses(terms), start=1):
        w.line(f"{index}. {clause}")

    conditions = terms.get("conditions") or []
    if conditions:
        w.space(4)
        w.line("Additional conditions:", font="Helvetica-Bold")
        for index, condition in enumerate(conditions, start=1):
            w.line(f"{index}. {condition}", size=9)

    # ---------- Signatures ----------
    w.heading("SIGNATURES")
    for label, who in (
        ("Investor", investor.get("email")),
        ("Entrepreneur", entrepreneur.get("email")),
        ("Admin/Platform", "Predika Platform"),
    ):
        w.line(f"{label} signature: ________________________    Date: ______________", size=9)
        w.line(who or "", size=9)
        w.space(6)

    # ---------- Footer ----------
    p.setFont("Helvetica-Oblique", 8)
    p.drawCentredString(
        width / 2.0,
        MARGIN / 2.0,
        f"Generated: {timezone.now().isoformat()} | Contract ID: {contract_id}",
    )

    p.showPage()
    p.save()

    buffer.seek(0)
    pdf_bytes = buffer.getvalue()

    base_name = f"contract_{contract_id}_{uuid.uuid4().hex[:8]}"
    filename = os.path.join("contracts", f"{base_name}.pdf").replace("\\", "/")

    return default_storage.save(filename, ContentFile(pdf_bytes))
