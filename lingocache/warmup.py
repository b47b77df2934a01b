"""
Cache warming for translations.

Pre-translates static content (UI strings, labels from YAML files) to
priority languages so users never hit a cold cache.

Run on:
- Deploy (recommended)
- Cron job (to catch new content)

Usage:
    # Warm priority languages
    await warm_translation_cache(translator)

    # Specific languages and extra strings
    await warm_translation_cache(translator, languages=["he", "ar"], texts=labels)

    # CLI
    python -m lingocache.warmup --strings config/strings.yaml -l he ar
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

import yaml

from lingocache.languages import WARM_UP_LANGUAGES, Language, get_language_name
from lingocache.translator import Translator

logger = logging.getLogger(__name__)


# Common UI strings that should be pre-translated
UI_STRINGS = [
    "Home",
    "Back",
    "Next",
    "Continue",
    "Cancel",
    "Save",
    "Submit",
    "Edit",
    "Delete",
    "Search",
    "Loading...",
    "Something went wrong",
    "Please try again",
]


def load_strings(path: str | Path) -> list[str]:
    """
    Load strings from a YAML file.

    Accepts a plain list, a {"strings": [...]} mapping, or any mapping whose
    values are strings (e.g. a key -> label catalog).
    """
    path = Path(path)
    if not path.exists():
        logger.warning(f"Strings file not found: {path}")
        return []

    with open(path) as f:
        data = yaml.safe_load(f)

    if isinstance(data, dict):
        data = data.get("strings", list(data.values()))

    if not isinstance(data, list):
        return []

    return [s for s in data if isinstance(s, str) and s.strip()]


async def warm_translation_cache(
    translator: Translator,
    languages: list[str | Language] | None = None,
    texts: list[str] | None = None,
    include_ui: bool = True,
    source: str = "en",
    context: str | None = "user interface labels",
    batch_size: int = 50,
) -> dict[str, Any]:
    """
    Pre-warm the translation cache.

    Args:
        translator: Translator to warm
        languages: Languages to warm (defaults to WARM_UP_LANGUAGES)
        texts: Extra strings to translate
        include_ui: Include common UI strings
        source: Source language of the strings
        context: Context passed to every translation
        batch_size: Texts per translate_batch call

    Returns:
        Stats dict with counts
    """
    if languages is None:
        languages = WARM_UP_LANGUAGES

    lang_codes = [
        lang.value if isinstance(lang, Language) else str(lang)
        for lang in languages
    ]

    all_texts: list[str] = list(texts or [])
    if include_ui:
        all_texts.extend(UI_STRINGS)

    # Deduplicate, keep order
    all_texts = list(dict.fromkeys(t for t in all_texts if t and t.strip()))

    stats = {
        "languages": len(lang_codes),
        "texts": len(all_texts),
        "translations": 0,
        "cached": 0,
        "errors": 0,
    }

    for lang in lang_codes:
        logger.info(f"Warming {get_language_name(lang)} ({lang}): {len(all_texts)} texts")

        for i in range(0, len(all_texts), batch_size):
            batch = all_texts[i:i + batch_size]
            try:
                results = await translator.translate_batch(
                    batch, target=lang, source=source, context=context
                )
            except Exception as e:
                stats["errors"] += 1
                logger.warning(f"Error warming {lang} batch {i // batch_size}: {e}")
                continue

            stats["cached"] += sum(1 for r in results if r.cached)
            stats["translations"] += sum(1 for r in results if not r.cached)

    await translator.drain()

    logger.info(
        f"Warm-up complete: {stats['translations']} new, "
        f"{stats['cached']} already cached, {stats['errors']} errors"
    )
    return stats


async def export_catalog(
    translator: Translator,
    texts: list[str],
    languages: list[str | Language],
    source: str = "en",
) -> dict[str, dict[str, str]]:
    """
    Build {lang: {text: translation}} for already-warmed texts.

    Runs through translate_batch, so anything still missing is translated.
    """
    texts = list(dict.fromkeys(t for t in texts if t and t.strip()))
    catalog: dict[str, dict[str, str]] = {}

    for lang in languages:
        code = lang.value if isinstance(lang, Language) else str(lang)
        results = await translator.translate_batch(texts, target=code, source=source)
        catalog[code] = {text: result.text for text, result in zip(texts, results)}

    return catalog


# =============================================================================
# CLI Entry Point
# =============================================================================


def main():
    """Run cache warm-up from command line."""
    import argparse

    from lingocache.translator import create_translator

    parser = argparse.ArgumentParser(
        description="Warm translation cache for priority languages"
    )
    parser.add_argument(
        "--languages", "-l",
        nargs="+",
        help="Specific languages to warm (default: priority languages)"
    )
    parser.add_argument(
        "--strings", "-s",
        help="YAML file with extra strings to translate"
    )
    parser.add_argument(
        "--output", "-o",
        help="Write the warmed catalog ({lang: {text: translation}}) to this YAML file"
    )
    parser.add_argument(
        "--no-ui",
        action="store_true",
        help="Skip the built-in UI strings"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Minimal output"
    )

    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING if args.quiet else logging.INFO)

    texts = load_strings(args.strings) if args.strings else []

    translator = create_translator()

    async def _run() -> dict[str, Any]:
        stats = await warm_translation_cache(
            translator,
            languages=args.languages,
            texts=texts,
            include_ui=not args.no_ui,
        )
        if args.output:
            catalog = await export_catalog(
                translator,
                texts + (UI_STRINGS if not args.no_ui else []),
                args.languages or WARM_UP_LANGUAGES,
            )
            with open(args.output, "w") as f:
                yaml.safe_dump(catalog, f, allow_unicode=True, sort_keys=False)
        return stats

    stats = asyncio.run(_run())

    if not args.quiet:
        for key, value in stats.items():
            print(f"{key}: {value}")


if __name__ == "__main__":
    main()
