"""
Supported countries: currency, phone metadata and which wallets exist there.

The table is static and never mutated at runtime. Account registration reads
the same profiles for phone validation and formatting, so the shape of
``CountryProfile`` is part of the public contract.
"""
from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Optional

_NON_DIGITS = re.compile(r"\D")


@dataclass(frozen=True)
class CountryProfile:
    code: str
    name: str
    currency_code: str
    currency_symbol: str
    phone_country_code: str
    phone_digit_length: int
    supported_wallets: tuple[str, ...]
    has_dedicated_parser: bool
    flag: str = ""
    timezone: str = ""

    @property
    def phone_prefix(self) -> str:
        """Phone country code reduced to digits ("+1-809" -> "1809")."""
        return _digits(self.phone_country_code)


def _digits(value: str) -> str:
    return _NON_DIGITS.sub("", value)


_PROFILES: tuple[CountryProfile, ...] = (
    # Sudamérica
    CountryProfile("PE", "Perú", "PEN", "S/", "+51", 9,
                   ("yape", "plin", "bcp", "bbva", "interbank"), True, "🇵🇪", "America/Lima"),
    CountryProfile("BO", "Bolivia", "BOB", "Bs.", "+591", 8,
                   ("yape_bolivia", "tigo_money", "bcp_bolivia"), True, "🇧🇴", "America/La_Paz"),
    CountryProfile("AR", "Argentina", "ARS", "$", "+54", 10,
                   ("mercadopago", "uala", "brubank", "modo"), False, "🇦🇷", "America/Argentina/Buenos_Aires"),
    CountryProfile("BR", "Brasil", "BRL", "R$", "+55", 11,
                   ("pix", "picpay", "mercadopago", "nubank"), False, "🇧🇷", "America/Sao_Paulo"),
    CountryProfile("CL", "Chile", "CLP", "$", "+56", 9,
                   ("mach", "mercadopago", "tenpo", "bci"), False, "🇨🇱", "America/Santiago"),
    CountryProfile("CO", "Colombia", "COP", "$", "+57", 10,
                   ("nequi", "daviplata", "bancolombia", "movii"), False, "🇨🇴", "America/Bogota"),
    CountryProfile("EC", "Ecuador", "USD", "$", "+593", 9,
                   ("banco_pichincha", "banco_guayaquil", "produbanco"), False, "🇪🇨", "America/Guayaquil"),
    CountryProfile("PY", "Paraguay", "PYG", "₲", "+595", 9,
                   ("tigo_money", "personal_pay", "zimple"), False, "🇵🇾", "America/Asuncion"),
    CountryProfile("UY", "Uruguay", "UYU", "$", "+598", 8,
                   ("prex", "mercadopago", "midinero"), False, "🇺🇾", "America/Montevideo"),
    CountryProfile("VE", "Venezuela", "VES", "Bs.", "+58", 10,
                   ("pago_movil", "banesco", "mercantil"), False, "🇻🇪", "America/Caracas"),
    # Centroamérica y Caribe
    CountryProfile("MX", "México", "MXN", "$", "+52", 10,
                   ("mercadopago", "clip", "rappi_pay", "bbva"), False, "🇲🇽", "America/Mexico_City"),
    CountryProfile("GT", "Guatemala", "GTQ", "Q", "+502", 8,
                   ("banco_industrial", "bantrab"), False, "🇬🇹", "America/Guatemala"),
    CountryProfile("HN", "Honduras", "HNL", "L", "+504", 8,
                   ("tigo_money", "banco_atlantida"), False, "🇭🇳", "America/Tegucigalpa"),
    CountryProfile("SV", "El Salvador", "USD", "$", "+503", 8,
                   ("tigo_money", "banco_agricola", "chivo"), False, "🇸🇻", "America/El_Salvador"),
    CountryProfile("NI", "Nicaragua", "NIO", "C$", "+505", 8,
                   ("bac", "banpro"), False, "🇳🇮", "America/Managua"),
    CountryProfile("CR", "Costa Rica", "CRC", "₡", "+506", 8,
                   ("sinpe_movil", "bac", "banco_nacional"), False, "🇨🇷", "America/Costa_Rica"),
    CountryProfile("PA", "Panamá", "PAB", "B/.", "+507", 8,
                   ("yappy", "nequi_panama", "banco_general"), False, "🇵🇦", "America/Panama"),
    CountryProfile("CU", "Cuba", "CUP", "$", "+53", 8,
                   ("transfermovil", "enzona"), False, "🇨🇺", "America/Havana"),
    CountryProfile("DO", "República Dominicana", "DOP", "RD$", "+1-809", 7,
                   ("banco_popular", "banreservas"), False, "🇩🇴", "America/Santo_Domingo"),
    # Europa
    CountryProfile("ES", "España", "EUR", "€", "+34", 9,
                   ("bizum", "bbva", "santander", "caixabank"), False, "🇪🇸", "Europe/Madrid"),
    # Norteamérica
    CountryProfile("US", "Estados Unidos", "USD", "$", "+1", 10,
                   ("zelle", "venmo", "cash_app", "apple_pay", "paypal"), False, "🇺🇸", "America/New_York"),
)

DEFAULT_CURRENCY_SYMBOL = "S/"


class CountryRegistry:
    def __init__(self, profiles: tuple[CountryProfile, ...] | list[CountryProfile]):
        self._profiles = tuple(profiles)
        self._by_code = {p.code: p for p in self._profiles}
        # "1809" must be tried before "1", "591" before "59"...
        self._by_prefix_len = sorted(
            self._profiles,
            key=lambda p: len(p.phone_prefix),
            reverse=True,
        )

    def get(self, code: Optional[str]) -> Optional[CountryProfile]:
        if not code:
            return None
        return self._by_code.get(code.strip().upper())

    def all(self) -> list[CountryProfile]:
        return list(self._profiles)

    def with_dedicated_parser(self) -> list[CountryProfile]:
        return [p for p in self._profiles if p.has_dedicated_parser]

    def has_parser(self, code: Optional[str]) -> bool:
        profile = self.get(code)
        return profile.has_dedicated_parser if profile else False

    def get_currency_symbol(self, code: Optional[str]) -> str:
        profile = self.get(code)
        return profile.currency_symbol if profile else DEFAULT_CURRENCY_SYMBOL

    def currency_symbols(self) -> list[str]:
        seen: list[str] = []
        for p in self._profiles:
            if p.currency_symbol not in seen:
                seen.append(p.currency_symbol)
        return seen

    def detect_from_phone(self, phone: str) -> Optional[str]:
        cleaned = _digits(phone)
        if not cleaned:
            return None
        for p in self._by_prefix_len:
            if cleaned.startswith(p.phone_prefix):
                return p.code
        return None

    def validate_phone(self, phone: str, code: str) -> bool:
        profile = self.get(code)
        if profile is None:
            return False

        cleaned = _digits(phone)
        prefix = profile.phone_prefix
        if not cleaned.startswith(prefix):
            return False
        return len(cleaned) == len(prefix) + profile.phone_digit_length

    def format_phone(self, phone: str, code: str) -> str:
        profile = self.get(code)
        if profile is None:
            return phone

        cleaned = _digits(phone)
        prefix = profile.phone_prefix
        if cleaned.startswith(prefix):
            return f"{profile.phone_country_code} {cleaned[len(prefix):]}"
        return phone


registry = CountryRegistry(_PROFILES)


def get_country(code: Optional[str]) -> Optional[CountryProfile]:
    return registry.get(code)


def detect_country_from_phone(phone: str) -> Optional[str]:
    return registry.detect_from_phone(phone)


def validate_phone(phone: str, code: str) -> bool:
    return registry.validate_phone(phone, code)


def format_phone(phone: str, code: str) -> str:
    return registry.format_phone(phone, code)
