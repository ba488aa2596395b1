"""PDF export of a rendered preview.

The rasterized preview is stretched over one A4 portrait page.
"""
from __future__ import annotations

import io

from PIL import Image
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

PDF_FILENAME = "handwritten-text.pdf"


def build_pdf(image: Image.Image, title: str = PDF_FILENAME) -> bytes:
    """Embed the image as a single full-bleed A4 page and return the PDF bytes."""
    page_w, page_h = A4
    buf = io.BytesIO()
    pdf = canvas.Canvas(buf, pagesize=A4)
    pdf.setTitle(title)
    pdf.drawImage(ImageReader(image.convert("RGB")), 0, 0, width=page_w, height=page_h)
    pdf.showPage()
    pdf.save()
    return buf.getvalue()
