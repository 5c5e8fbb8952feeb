"""Word lookups behind /api/word-info.

A lookup strategy is chosen once from the word's script and the story
language, then exactly one external service is asked:

- DictionaryLookup: English words, public dictionary API.
- AiWordLookup: words in any other language, explained by the LLM in English.
- AiCharacterLookup: a single Hangul/Han/Kana character (character mode).
"""
import os
from dataclasses import dataclass
from typing import Optional, Union
from urllib.parse import quote

import httpx

from log import get_logger
from models import WordInfo
from tokenizer import Script, detect_script, normalize_word
from llm import LLMError, analyze_word, analyze_character, deterministic_pronunciation, language_code

logger = get_logger("lingotales.lookup")

DICTIONARY_API_URL = os.environ.get("DICTIONARY_API_URL", "https://api.dictionaryapi.dev/api/v2/entries/en")
DICTIONARY_TIMEOUT = 10

_LATIN_LANGUAGES = {"English", "Spanish", "French", "German", "Italian", "Portuguese"}
_SCRIPT_LANGUAGES = {
    Script.HANGUL: ("Korean",),
    Script.HAN: ("Chinese", "Japanese"),
    Script.KANA: ("Japanese",),
}


class LookupFailed(Exception):
    """No usable word information could be obtained."""


@dataclass(frozen=True)
class DictionaryLookup:
    name = "dictionary"

    async def fetch(self, word: str, context: str) -> WordInfo:
        payload = await fetch_dictionary_entries(word)
        return parse_dictionary_entries(payload, word, context)


@dataclass(frozen=True)
class AiWordLookup:
    language: str
    name = "ai-word"

    async def fetch(self, word: str, context: str) -> WordInfo:
        try:
            result = await analyze_word(word, context, self.language)
        except LLMError as e:
            raise LookupFailed(str(e)) from e
        return _ai_word_info(word, context, self.language, result)


@dataclass(frozen=True)
class AiCharacterLookup:
    language: str
    name = "ai-character"

    async def fetch(self, word: str, context: str) -> WordInfo:
        try:
            result = await analyze_character(word, context, self.language)
        except LLMError as e:
            raise LookupFailed(str(e)) from e
        return _ai_word_info(word, context, self.language, result)


LookupStrategy = Union[DictionaryLookup, AiWordLookup, AiCharacterLookup]


def select_strategy(word: str, language: Optional[str] = None) -> LookupStrategy:
    script = detect_script(word)
    if script in _SCRIPT_LANGUAGES:
        candidates = _SCRIPT_LANGUAGES[script]
        lang = language if language in candidates else candidates[0]
        if len(word) == 1:
            return AiCharacterLookup(lang)
        return AiWordLookup(lang)
    if script is Script.LATIN and (language not in _LATIN_LANGUAGES or language == "English"):
        return DictionaryLookup()
    return AiWordLookup(language or "foreign-language")


def _ai_word_info(word: str, context: str, language: str, result: dict) -> WordInfo:
    note = result.get("note")
    return WordInfo(
        word=word,
        translation=result["translation"].strip(),
        partOfSpeech=result["partOfSpeech"].strip(),
        context=context,
        note=note.strip() if isinstance(note, str) and note.strip() else None,
        pronunciation=deterministic_pronunciation(word, language_code(language)),
    )


async def fetch_dictionary_entries(word: str):
    try:
        async with httpx.AsyncClient(timeout=DICTIONARY_TIMEOUT) as client:
            resp = await client.get(f"{DICTIONARY_API_URL}/{quote(word.lower())}")
    except httpx.HTTPError as e:
        raise LookupFailed("Dictionary service unreachable") from e
    if resp.status_code != 200:
        raise LookupFailed(f"Dictionary returned {resp.status_code}")
    try:
        return resp.json()
    except ValueError as e:
        raise LookupFailed("Malformed dictionary response") from e


def parse_dictionary_entries(payload, word: str, context: str) -> WordInfo:
    """First definition of the first meaning that has one."""
    if not isinstance(payload, list):
        raise LookupFailed("Malformed dictionary response")
    for entry in payload:
        if not isinstance(entry, dict):
            continue
        for meaning in entry.get("meanings") or []:
            if not isinstance(meaning, dict):
                continue
            for definition in meaning.get("definitions") or []:
                if isinstance(definition, dict) and definition.get("definition"):
                    return WordInfo(
                        word=word,
                        translation=definition["definition"],
                        partOfSpeech=meaning.get("partOfSpeech") or "",
                        context=context,
                        note=definition.get("example") or None,
                        pronunciation=entry.get("phonetic") or None,
                    )
    raise LookupFailed("No definition found")


async def resolve_word_info(word: str, context: str = "", language: Optional[str] = None) -> WordInfo:
    term = normalize_word(word)
    if not term:
        raise LookupFailed("Nothing to look up")
    strategy = select_strategy(term, language)
    logger.info("Word lookup", extra={"component": "lookup", "strategy": strategy.name})
    return await strategy.fetch(term, context)
