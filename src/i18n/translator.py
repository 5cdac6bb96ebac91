"""
src/i18n/translator.py
───────────────────────
English/Arabic labels for the dashboard, read from JSON locale files.

Usage:
    from src.i18n.translator import t, set_lang

    t("nav.overview", "ar")                                  # → "نظرة عامة"
    t("bridge.calibration_count", count=12, target=50)       # → "12 of 50 samples"
    set_lang("ar")
    text_direction()                                          # → "rtl"

Lookup order for a key: requested language, then English, then the key
itself. Placeholders in a label are filled with str.format(**params).
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path

_LOCALES_DIR = Path(__file__).parent / "locales"
FALLBACK_LANG = "en"
SUPPORTED_LANGS = ("en", "ar")
RTL_LANGS = frozenset({"ar"})

_current_lang: str = FALLBACK_LANG


@lru_cache(maxsize=len(SUPPORTED_LANGS))
def _load_locale(lang: str) -> dict:
    with open(_LOCALES_DIR / f"{lang}.json", encoding="utf-8") as f:
        return json.load(f)


def _lookup(locale: dict, key: str) -> str | None:
    node: dict | str = locale
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node if isinstance(node, str) else None


def normalize_lang(lang: str | None) -> str:
    """Map anything unsupported (including None from an empty store) to English."""
    return lang if lang in SUPPORTED_LANGS else FALLBACK_LANG


def set_lang(lang: str) -> None:
    """Set the module-level default language."""
    global _current_lang
    _current_lang = normalize_lang(lang)


def get_lang() -> str:
    return _current_lang


def t(key: str, lang: str | None = None, **params) -> str:
    """
    Translate a dot-separated key such as "bridge.baseline".

    Args:
        key: Dot-separated path into the locale file
        lang: Language override; uses the module default if None
        **params: Values for {placeholders} in the label

    Returns:
        The label, or the key itself when no locale defines it.
    """
    code = normalize_lang(lang or _current_lang)
    label = _lookup(_load_locale(code), key)
    if label is None and code != FALLBACK_LANG:
        label = _lookup(_load_locale(FALLBACK_LANG), key)
    if label is None:
        return key
    return label.format(**params) if params else label


def text_direction(lang: str | None = None) -> str:
    return "rtl" if normalize_lang(lang or _current_lang) in RTL_LANGS else "ltr"
