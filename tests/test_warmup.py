"""
Tests for cache warming and catalog export.
"""

import pytest

from lingocache.core.keys import hash_key
from lingocache.languages import Language
from lingocache.warmup import UI_STRINGS, export_catalog, load_strings, warm_translation_cache


class TestLoadStrings:
    def test_plain_list(self, tmp_path):
        path = tmp_path / "strings.yaml"
        path.write_text("- Welcome\n- Sign in\n- ''\n- 42\n")

        assert load_strings(path) == ["Welcome", "Sign in"]

    def test_strings_key(self, tmp_path):
        path = tmp_path / "strings.yaml"
        path.write_text("strings:\n  - Welcome\n  - Log out\n")

        assert load_strings(path) == ["Welcome", "Log out"]

    def test_label_catalog(self, tmp_path):
        path = tmp_path / "labels.yaml"
        path.write_text("nav.home: Home\nnav.about: About us\n")

        assert load_strings(path) == ["Home", "About us"]

    def test_missing_file(self, tmp_path):
        assert load_strings(tmp_path / "nope.yaml") == []


class TestWarmTranslationCache:
    @pytest.mark.asyncio
    async def test_warms_each_language(self, translator, storage):
        stats = await warm_translation_cache(
            translator,
            languages=[Language.HE, "ru"],
            texts=["Welcome", "Welcome", "Sign in"],
            include_ui=False,
        )

        assert stats == {
            "languages": 2,
            "texts": 2,
            "translations": 4,
            "cached": 0,
            "errors": 0,
        }
        assert await storage.get(hash_key("Welcome", "he")) is not None
        assert await storage.get(hash_key("Sign in", "ru")) is not None

    @pytest.mark.asyncio
    async def test_second_run_is_cached(self, translator, backend):
        await warm_translation_cache(translator, languages=["he"], include_ui=True)
        calls = len(backend.calls)

        stats = await warm_translation_cache(translator, languages=["he"], include_ui=True)

        assert calls == len(UI_STRINGS)
        assert len(backend.calls) == calls
        assert stats["cached"] == len(UI_STRINGS)
        assert stats["translations"] == 0

    @pytest.mark.asyncio
    async def test_batches(self, translator, backend):
        texts = [f"Label {i}" for i in range(5)]

        stats = await warm_translation_cache(
            translator, languages=["ar"], texts=texts, include_ui=False, batch_size=2
        )

        assert stats["translations"] == 5
        assert len(backend.calls) == 5

    @pytest.mark.asyncio
    async def test_errors_are_counted(self, translator, backend):
        backend.error = RuntimeError("backend down")

        stats = await warm_translation_cache(
            translator, languages=["he", "ar"], texts=["Welcome"], include_ui=False
        )

        assert stats["errors"] == 2
        assert stats["translations"] == 0


class TestExportCatalog:
    @pytest.mark.asyncio
    async def test_catalog_shape(self, translator):
        catalog = await export_catalog(translator, ["Save", "Save", "Cancel"], [Language.HE, "en"])

        assert catalog == {
            "he": {"Save": "[he] Save", "Cancel": "[he] Cancel"},
            "en": {"Save": "Save", "Cancel": "Cancel"},
        }
