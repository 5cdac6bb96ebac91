"""
tests/test_translator.py
─────────────────────────
Tests for the JSON-locale translator.
"""
import pytest

from src.i18n.translator import get_lang, normalize_lang, set_lang, t, text_direction


@pytest.fixture(autouse=True)
def reset_lang():
    yield
    set_lang("en")


class TestTranslate:
    def test_english(self):
        assert t("nav.overview", "en") == "Overview"

    def test_arabic(self):
        assert t("nav.alerts", "ar") == "التنبيهات"

    def test_missing_key_returns_key(self):
        assert t("nav.nowhere", "en") == "nav.nowhere"

    def test_unknown_language_falls_back(self):
        assert t("nav.overview", "fr") == "Overview"

    def test_module_default(self):
        set_lang("ar")
        assert get_lang() == "ar"
        assert t("bridge.recalibrate") == "إعادة المعايرة"

    def test_placeholders(self):
        assert t("bridge.calibration_count", "en", count=12, target=50) == "12 of 50 samples"
        assert t("bridge.calibration_count", "ar", count=3, target=50).startswith("3 ")

    def test_normalize_lang(self):
        assert normalize_lang(None) == "en"
        assert normalize_lang("ar") == "ar"

    def test_unsupported_default_rejected(self):
        set_lang("de")
        assert get_lang() == "en"

    def test_locales_share_keys(self):
        import json
        from pathlib import Path

        locales = Path(__file__).parent.parent / "src" / "i18n" / "locales"

        def keys(node, prefix=""):
            out = set()
            for k, v in node.items():
                out |= keys(v, f"{prefix}{k}.") if isinstance(v, dict) else {prefix + k}
            return out

        en = json.loads((locales / "en.json").read_text(encoding="utf-8"))
        ar = json.loads((locales / "ar.json").read_text(encoding="utf-8"))
        assert keys(en) == keys(ar)


class TestDirection:
    def test_rtl_for_arabic(self):
        assert text_direction("ar") == "rtl"
        assert text_direction("en") == "ltr"
