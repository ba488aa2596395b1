"""Handwriting preview rendering.

Draws the document text onto an A4-proportioned page with the paper, ink and
font chosen in the StyleConfig. The resulting image is what gets exported.
"""
from __future__ import annotations

import os
from typing import Dict, List, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from handwriting.models import FontStyle, PageType, PenColor, StyleConfig

PLACEHOLDER = "Your handwritten text will appear here..."

# Preview is captured at twice its on-screen size
SCALE = 2
PAGE_W, PAGE_H = 794 * SCALE, 1123 * SCALE
MARGIN_X = 48 * SCALE
MARGIN_TOP = 64 * SCALE
MARGIN_BOTTOM = 48 * SCALE
RULED_LINE_HEIGHT = 32 * SCALE
RELAXED_LINE_HEIGHT = 1.6

INK: Dict[PenColor, Tuple[int, int, int]] = {
    PenColor.BLACK: (33, 33, 33),
    PenColor.BLUE: (30, 64, 175),
    PenColor.RED: (185, 28, 28),
}

PAPER: Dict[PageType, Tuple[int, int, int]] = {
    PageType.PLAIN: (255, 255, 255),
    PageType.RULED: (253, 253, 250),
    PageType.NOTEBOOK: (252, 247, 232),
}

RULE_COLOR = (173, 206, 225)
MARGIN_COLOR = (205, 80, 80)
GRID_COLOR = (236, 228, 205)

FONT_FILES: Dict[FontStyle, str] = {
    FontStyle.CURSIVE: "DancingScript-Regular.ttf",
    FontStyle.PRINT: "PatrickHand-Regular.ttf",
    FontStyle.ELEGANT: "GreatVibes-Regular.ttf",
}


def load_font(font_style: FontStyle, size: int, font_dir: Optional[str] = None):
    """Return the font for a style, or Pillow's default font at the same size."""
    path = os.path.join(font_dir or "", FONT_FILES[font_style])
    try:
        return ImageFont.truetype(path, size)
    except OSError:
        return ImageFont.load_default(size=size)


def draw_paper(draw: ImageDraw.ImageDraw, page_type: PageType) -> None:
    if page_type == PageType.RULED:
        y = MARGIN_TOP
        while y < PAGE_H:
            draw.line([(0, y), (PAGE_W, y)], fill=RULE_COLOR, width=SCALE)
            y += RULED_LINE_HEIGHT
        draw.line([(MARGIN_X - 12 * SCALE, 0), (MARGIN_X - 12 * SCALE, PAGE_H)],
                  fill=MARGIN_COLOR, width=SCALE)
    elif page_type == PageType.NOTEBOOK:
        step = 20 * SCALE
        for x in range(0, PAGE_W, step):
            draw.line([(x, 0), (x, PAGE_H)], fill=GRID_COLOR, width=1)
        for y in range(0, PAGE_H, step):
            draw.line([(0, y), (PAGE_W, y)], fill=GRID_COLOR, width=1)


def wrap_text(text: str, font, max_width: int) -> List[str]:
    """Break text into lines no wider than max_width, keeping explicit newlines."""
    lines: List[str] = []
    for paragraph in text.split("\n"):
        current = ""
        for word in paragraph.split(" "):
            candidate = word if not current else current + " " + word
            if font.getlength(candidate) <= max_width or not current:
                current = candidate
            else:
                lines.append(current)
                current = word
        lines.append(current)
    return lines


def line_height(style: StyleConfig) -> int:
    if style.page_type == PageType.RULED:
        return RULED_LINE_HEIGHT
    return int(style.font_size * SCALE * RELAXED_LINE_HEIGHT)


def render_preview(text: str, style: StyleConfig, font_dir: Optional[str] = None) -> Image.Image:
    """Render text as a handwriting page and return the RGB image.

    Lines that do not fit on the page are dropped; the export is a single page.
    """
    image = Image.new("RGB", (PAGE_W, PAGE_H), PAPER[style.page_type])
    draw = ImageDraw.Draw(image)
    draw_paper(draw, style.page_type)

    font = load_font(style.font_style, style.font_size * SCALE, font_dir)
    ink = INK[style.pen_color]
    if not text:
        text, ink = PLACEHOLDER, tuple(min(255, c + 120) for c in ink)

    step = line_height(style)
    # Glyphs rest on the line: the baseline of line n is MARGIN_TOP + n * step
    ascent = font.getbbox("Hg")[3]
    baseline = MARGIN_TOP + step
    for line in wrap_text(text, font, PAGE_W - 2 * MARGIN_X):
        if baseline > PAGE_H - MARGIN_BOTTOM:
            break
        if line:
            draw.text((MARGIN_X, baseline - int(ascent * 0.8)), line, font=font, fill=ink)
        baseline += step
    return image
