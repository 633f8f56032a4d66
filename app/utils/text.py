"""Text helpers for catalog names and promotion labels."""

import unicodedata

WEEKDAY_NAMES = (
    "Domingo",
    "Lunes",
    "Martes",
    "Miércoles",
    "Jueves",
    "Viernes",
    "Sábado",
)


def normalize_text(value) -> str:
    """Lowercase, trimmed and accent-free, for category and name matching."""
    decomposed = unicodedata.normalize("NFD", str(value or ""))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.lower().strip()


def sanitize_promotion_label(label) -> str:
    """Drop a dangling leading separator left by label concatenation."""
    text = str(label or "")
    return text[1:] if text.startswith("-") else text


def weekday_display_name(weekday: int) -> str:
    """Spanish day name for 0=Sunday .. 6=Saturday."""
    return WEEKDAY_NAMES[weekday % 7]
