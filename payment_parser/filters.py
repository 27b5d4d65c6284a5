"""
Gate applied before any extraction.

Payment apps notify about everything: money the device owner sent, marketing
pushes, app reminders. Only incoming payments with a visible amount may reach
the parsers.
"""
from __future__ import annotations

import re
from typing import Optional

from common.countries import registry
from payment_parser.types import RejectReason

_SYMBOLS = r"(?:s/|bs\.|r\$|\$|€)"

OUTGOING_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        rf"enviaste\s+{_SYMBOLS}",
        r"le\s+(?:yapeaste|yapeast|plineaste|plineast)\s+",
        rf"pagaste\s+{_SYMBOLS}",
        rf"transferiste\s+{_SYMBOLS}",
        r"enviaste\s+un\s+pago",
        r"hiciste\s+un\s+pago",
        r"realizaste\s+un\s+pago",
        r"you\s+(?:sent|paid)\s+",
    )
)

SPAM_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        # marketing
        r"aprovecha",
        r"descuento",
        r"promoci[oó]n",
        r"oferta",
        r"gana\s+(?:hasta|un|dinero|puntos)",
        r"\bsale\b",
        r"\bdiscount",
        r"\d+\s*%\s*off\b",
        r"\bpromo\b",
        r"sorteo",
        r"premio",
        # product offers
        r"productos?\s+(?:desde|a|por|hasta)",
        r"compra\s+(?:ahora|ya|con)",
        r"pide\s+(?:ahora|ya)",
        r"paga\s+con\s+(?:yape|bizum|pix)",
        r"tiene\s+productos?",
        r"zapatillas?\s+desde",
        r"combo\s+a\s+",
        r"pizza\s+(?:grande|mediana|familiar)\s+a\s+",
        # price ranges
        rf"desde\s+{_SYMBOLS}",
        rf"hasta\s+{_SYMBOLS}",
        r"desde\s+.*hasta\s+",
        rf"\bfrom\s+{_SYMBOLS}",
        rf"\bup\s+to\s+{_SYMBOLS}",
        rf"\bfrom\s+.*\bto\s+{_SYMBOLS}",
        # app messages
        r"actualiza\s+(?:tu\s+)?app",
        r"nueva\s+versi[oó]n",
        r"recordatorio",
        r"pendiente",
        r"vence",
        r"protege\s+tu\s+cuenta",
        r"seguridad",
        r"te\s+invita",
        r"conoce",
        r"descubre",
        r"nuevo.*en\s+",
        r"activa",
        r"configura",
        r"completa\s+tu\s+perfil",
        r"verifica\s+tu",
        r"confirma\s+tu",
    )
)

# union of every supported country's symbol
AMOUNT_PRESENCE_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(re.escape(symbol) + r"\s*\d", re.IGNORECASE)
    for symbol in registry.currency_symbols()
)


def normalize(text: str) -> str:
    return text.lower().strip()


def _require_str(text: object) -> None:
    if not isinstance(text, str):
        raise TypeError(f"notification text must be str, got {type(text).__name__}")


def is_outgoing_payment(text: str) -> bool:
    normalized = normalize(text)
    return any(p.search(normalized) for p in OUTGOING_PATTERNS)


def is_spam(text: str) -> bool:
    normalized = normalize(text)
    return any(p.search(normalized) for p in SPAM_PATTERNS)


def has_valid_amount(text: str) -> bool:
    normalized = normalize(text)
    return any(p.search(normalized) for p in AMOUNT_PRESENCE_PATTERNS)


def should_reject(text: str) -> Optional[RejectReason]:
    _require_str(text)

    if is_outgoing_payment(text):
        return RejectReason.outgoing
    if is_spam(text):
        return RejectReason.promotional
    if not has_valid_amount(text):
        return RejectReason.no_amount
    return None
