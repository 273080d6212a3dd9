"""Shared FastAPI dependencies."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from fastapi import Header, Query

from cutcost.config import settings
from cutcost.core.calculator.catalog import CalculatorConfig, build_config
from cutcost.core.pricing.currency import locale_from_accept_language, normalize_locale


@lru_cache
def get_config() -> CalculatorConfig:
    return build_config(settings)


def resolve_locale(
    locale: Optional[str] = Query(None, description="BCP 47 locale tag, e.g. en-US"),
    accept_language: Optional[str] = Header(None),
) -> str:
    """Explicit ?locale=, else the browser's Accept-Language, else the configured default."""
    if locale and locale.strip():
        return normalize_locale(locale)
    return locale_from_accept_language(accept_language, settings.default_locale)
