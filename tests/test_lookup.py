"""Tests for word lookup strategy selection and the dictionary parser."""
import asyncio

import pytest

import lookup
from lookup import (
    AiCharacterLookup, AiWordLookup, DictionaryLookup, LookupFailed,
    parse_dictionary_entries, resolve_word_info, select_strategy,
)


DICTIONARY_PAYLOAD = [{
    "word": "run",
    "phonetic": "/ɹʌn/",
    "meanings": [
        {"partOfSpeech": "noun", "definitions": []},
        {"partOfSpeech": "verb", "definitions": [
            {"definition": "To move swiftly on foot.", "example": "Run to the shop."},
            {"definition": "To flee."},
        ]},
    ],
}]


@pytest.mark.parametrize("word, language, expected", [
    ("run", None, DictionaryLookup()),
    ("run", "English", DictionaryLookup()),
    ("gato", "Spanish", AiWordLookup("Spanish")),
    ("Haus", "German", AiWordLookup("German")),
    ("학생", "Korean", AiWordLookup("Korean")),
    ("학", "Korean", AiCharacterLookup("Korean")),
    ("学生", "Chinese", AiWordLookup("Chinese")),
    ("学", "Japanese", AiCharacterLookup("Japanese")),
    ("学", None, AiCharacterLookup("Chinese")),
    ("ねこ", "Korean", AiWordLookup("Japanese")),
    ("Тест", None, AiWordLookup("foreign-language")),
])
def test_select_strategy(word, language, expected):
    assert select_strategy(word, language) == expected


def test_parse_dictionary_takes_first_definition():
    info = parse_dictionary_entries(DICTIONARY_PAYLOAD, "run", "I run daily.")
    assert info.translation == "To move swiftly on foot."
    assert info.partOfSpeech == "verb"
    assert info.note == "Run to the shop."
    assert info.pronunciation == "/ɹʌn/"
    assert info.context == "I run daily."


@pytest.mark.parametrize("payload", [
    {"title": "No Definitions Found"},
    [],
    [{"meanings": [{"partOfSpeech": "noun", "definitions": [{"definition": ""}]}]}],
    ["junk"],
])
def test_parse_dictionary_rejects_unusable_payloads(payload):
    with pytest.raises(LookupFailed):
        parse_dictionary_entries(payload, "run", "")


def test_resolve_english_word_uses_dictionary(monkeypatch):
    asked = []

    async def fake_fetch(word):
        asked.append(word)
        return DICTIONARY_PAYLOAD

    monkeypatch.setattr(lookup, "fetch_dictionary_entries", fake_fetch)
    info = asyncio.run(resolve_word_info("run,", "I run daily."))
    assert asked == ["run"]
    assert info.word == "run"


def test_resolve_foreign_word_asks_llm(fake_llm):
    fake_llm.reply({"translation": "cat", "partOfSpeech": "noun", "note": "Masculine."})
    info = asyncio.run(resolve_word_info("gato.", "El gato duerme.", "Spanish"))
    assert (info.translation, info.partOfSpeech, info.note) == ("cat", "noun", "Masculine.")
    assert info.pronunciation is None
    assert '"gato"' in fake_llm.prompts[0]
    assert "El gato duerme." in fake_llm.prompts[0]


def test_resolve_korean_word_adds_romanization(fake_llm):
    fake_llm.reply({"translation": "student", "partOfSpeech": "noun", "note": None})
    info = asyncio.run(resolve_word_info("학생", "저는 학생입니다.", "Korean"))
    assert info.translation == "student"
    assert info.note is None
    assert info.pronunciation


def test_resolve_character_uses_character_prompt(fake_llm):
    fake_llm.reply({"translation": "study", "partOfSpeech": "character", "note": "学生: student"})
    info = asyncio.run(resolve_word_info("学", "我是学生。", "Chinese"))
    assert info.pronunciation == "xué"
    assert "single Chinese character" in fake_llm.prompts[0]


def test_llm_failure_becomes_lookup_failed(fake_llm):
    fake_llm.reply({"translation": "cat"})
    with pytest.raises(LookupFailed):
        asyncio.run(resolve_word_info("gato", "", "Spanish"))


def test_empty_word_is_rejected_before_any_call(fake_llm):
    with pytest.raises(LookupFailed):
        asyncio.run(resolve_word_info("?!", "", "Spanish"))
    assert fake_llm.calls == []
