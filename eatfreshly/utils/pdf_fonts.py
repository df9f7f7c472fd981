"""Font selection for ReportLab output, so currency signs render."""

from __future__ import annotations

from functools import lru_cache
import logging
from pathlib import Path

from eatfreshly.core.config import settings

logger = logging.getLogger(__name__)

UNICODE_FONT_NAME = "EatFreshlySans"
BUILTIN_FONT_NAME = "Helvetica"

FONT_CANDIDATES: tuple[str, ...] = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/noto/NotoSans-Regular.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/Library/Fonts/Arial Unicode.ttf",
    "/System/Library/Fonts/Supplemental/Arial Unicode.ttf",
    r"C:\Windows\Fonts\segoeui.ttf",
)

# currency -> (sign needing a TTF, ASCII fallback)
CURRENCY_SIGNS: dict[str, tuple[str, str]] = {
    "inr": ("\u20b9", "Rs."),
    "usd": ("$", "$"),
    "eur": ("\u20ac", "EUR"),
    "gbp": ("\u00a3", "GBP"),
}


def find_unicode_ttf() -> str | None:
    return next((path for path in FONT_CANDIDATES if Path(path).exists()), None)


@lru_cache(maxsize=1)
def register_pdf_font() -> str:
    """Register a TrueType font once and return the font name to use."""
    font_path = find_unicode_ttf()
    if font_path is None:
        logger.warning("[PDF] No TrueType font found; amounts use ASCII currency prefixes.")
        return BUILTIN_FONT_NAME

    from reportlab.pdfbase import pdfmetrics
    from reportlab.pdfbase.ttfonts import TTFont

    pdfmetrics.registerFont(TTFont(UNICODE_FONT_NAME, font_path))
    logger.info("[PDF] Registered %s from %s", UNICODE_FONT_NAME, font_path)
    return UNICODE_FONT_NAME


def currency_symbol(font_name: str, currency: str | None = None) -> str:
    code = (currency or settings.payment_currency).lower()
    sign, fallback = CURRENCY_SIGNS.get(code, (code.upper(), code.upper()))
    return sign if font_name == UNICODE_FONT_NAME else fallback
