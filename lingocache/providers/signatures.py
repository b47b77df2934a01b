"""
DSPy Signatures for translation.

Signatures define the input/output structure for AI tasks.
DSPy handles prompting and parsing.
"""

from __future__ import annotations

import dspy


class TranslateText(dspy.Signature):
    """
    Translate text from a known source language.

    Keep numbers, measurements and proper nouns unchanged. Use natural
    phrasing in the target language. Return only the translation.
    """

    text: str = dspy.InputField(desc="Text to translate")
    source_language: str = dspy.InputField(desc="Source language name (e.g., 'English')")
    target_language: str = dspy.InputField(desc="Target language name (e.g., 'Hebrew')")
    context: str = dspy.InputField(desc="Context about the text")

    translated_text: str = dspy.OutputField(desc="Translated text")


class DetectAndTranslate(dspy.Signature):
    """
    Detect the language of text and translate it.

    Keep numbers, measurements and proper nouns unchanged. Use natural
    phrasing in the target language.
    """

    text: str = dspy.InputField(desc="Text to translate")
    target_language: str = dspy.InputField(desc="Target language name")
    context: str = dspy.InputField(desc="Context about the text")

    response: str = dspy.OutputField(
        desc='JSON object: {"from": "<ISO 639-1 code>", "text": "<translation>"}'
    )


class DetectLanguage(dspy.Signature):
    """Detect the language of text."""

    text: str = dspy.InputField(desc="Text to analyze")
    allowed_codes: str = dspy.InputField(desc="Comma-separated language codes to choose from")

    language_code: str = dspy.OutputField(desc="Exactly one code from allowed_codes")
