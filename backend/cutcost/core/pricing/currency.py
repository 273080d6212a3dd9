"""Supported currencies, locale-based default detection and formatting (Babel)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from babel import Locale, UnknownLocaleError
from babel.numbers import format_currency as _babel_format_currency
from babel.numbers import get_territory_currencies

log = logging.getLogger(__name__)

FALLBACK_LOCALE = "en-US"


@dataclass(frozen=True)
class CurrencyOption:
    code: str
    name: str

    @property
    def label(self) -> str:
        return f"{self.name} ({self.code})"


# First entry is the default when the locale's currency is not offered.
CURRENCY_OPTIONS: tuple[CurrencyOption, ...] = (
    CurrencyOption("IDR", "Indonesia Rupiah"),
    CurrencyOption("USD", "US Dollar"),
    CurrencyOption("EUR", "Euro"),
    CurrencyOption("GBP", "British Pound"),
    CurrencyOption("JPY", "Japanese Yen"),
    CurrencyOption("CNY", "Chinese Yuan"),
)


def normalize_locale(tag: str) -> str:
    """'en_us' / ' en-US ' -> 'en-US' style tag accepted by Locale.parse(sep='-')."""
    tag = tag.strip().replace("_", "-")
    parts = tag.split("-")
    if len(parts) > 1 and len(parts[-1]) == 2:
        parts[-1] = parts[-1].upper()
    parts[0] = parts[0].lower()
    return "-".join(parts)


def parse_locale(tag: str) -> Locale:
    return Locale.parse(normalize_locale(tag), sep="-")


def locale_from_accept_language(header: str | None, default: str = FALLBACK_LOCALE) -> str:
    """First language tag of an Accept-Language header, ignoring quality values."""
    if not header:
        return default
    first = header.split(",")[0].split(";")[0].strip()
    if not first or first == "*":
        return default
    return normalize_locale(first)


def detect_currency(locale_tag: str, options: Sequence[CurrencyOption] = CURRENCY_OPTIONS) -> str:
    """Currency code native to the locale's territory if offered, else the first option."""
    default = options[0].code
    try:
        territory = parse_locale(locale_tag).territory
        if territory is None:
            log.debug("Locale %r has no territory; using default currency %s", locale_tag, default)
            return default
        currencies = get_territory_currencies(territory)
    except (UnknownLocaleError, ValueError, TypeError) as e:
        log.error("Error detecting user currency for locale %r: %s", locale_tag, e)
        return default

    if currencies and currencies[0] in {o.code for o in options}:
        return currencies[0]
    return default


def format_currency(amount: float, code: str, locale_tag: str) -> str:
    """Locale-aware currency formatting, e.g. 50 USD in en-US -> '$50.00'."""
    try:
        locale = parse_locale(locale_tag)
    except (UnknownLocaleError, ValueError, TypeError) as e:
        log.warning("Unknown locale %r for currency formatting (%s); using %s", locale_tag, e, FALLBACK_LOCALE)
        locale = parse_locale(FALLBACK_LOCALE)
    return _babel_format_currency(amount, code, locale=locale)
