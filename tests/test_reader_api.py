"""Tests for translate, word-info and segment routes."""
import lookup
from llm import RateLimitError


def test_translate_uses_cache_unless_fresh(client, fake_llm):
    fake_llm.reply({"translation": "The cat sleeps."})
    fake_llm.reply({"translation": "The cat is sleeping."})
    body = {"sentence": "El gato duerme.", "targetLanguage": "English"}

    assert client.post("/api/translate", json=body).json() == {"translation": "The cat sleeps."}
    assert client.post("/api/translate", json=body).json() == {"translation": "The cat sleeps."}
    assert len(fake_llm.calls) == 1

    fresh = client.post("/api/translate", json={**body, "fresh": True}).json()
    assert fresh == {"translation": "The cat is sleeping."}
    assert client.post("/api/translate", json=body).json() == fresh
    assert len(fake_llm.calls) == 2


def test_translate_failures(client, fake_llm):
    assert client.post("/api/translate", json={"sentence": "  "}).status_code == 400
    resp = client.post("/api/translate", json={"sentence": "Hola."})
    assert resp.status_code == 502
    assert resp.json()["detail"] == "Translation failed"
    fake_llm.reply(RateLimitError())
    assert client.post("/api/translate", json={"sentence": "Hola."}).status_code == 429


def test_word_info_dictionary(client, monkeypatch):
    async def fake_fetch(word):
        return [{"phonetic": "/kæt/", "meanings": [
            {"partOfSpeech": "noun", "definitions": [{"definition": "A small feline."}]},
        ]}]

    monkeypatch.setattr(lookup, "fetch_dictionary_entries", fake_fetch)
    resp = client.post("/api/word-info", json={"word": "Cat!", "context": "The cat sat."})
    assert resp.status_code == 200
    assert resp.json() == {
        "word": "Cat", "translation": "A small feline.", "partOfSpeech": "noun",
        "context": "The cat sat.", "note": None, "pronunciation": "/kæt/",
    }


def test_word_info_foreign_language(client, fake_llm):
    fake_llm.reply({"translation": "house", "partOfSpeech": "noun", "note": None})
    resp = client.post("/api/word-info", json={"word": "casa", "context": "La casa.", "language": "Spanish"})
    assert resp.status_code == 200
    assert resp.json()["translation"] == "house"


def test_word_info_rejects_punctuation(client, fake_llm):
    resp = client.post("/api/word-info", json={"word": "!!!", "context": "Wow!!!"})
    assert resp.status_code == 400
    assert fake_llm.calls == []


def test_word_info_lookup_failure(client, monkeypatch):
    async def failing(word):
        raise lookup.LookupFailed("Dictionary returned 404")

    monkeypatch.setattr(lookup, "fetch_dictionary_entries", failing)
    resp = client.post("/api/word-info", json={"word": "zzzq"})
    assert resp.status_code == 502
    assert resp.json()["detail"] == "Failed to get word information"


def test_segment(client):
    resp = client.post("/api/segment", json={"text": 'He said "Stop! Now." Then left. tail'})
    assert resp.status_code == 200
    data = resp.json()
    assert data["mode"] == "word"
    assert [s["text"] for s in data["sentences"]] == ['He said "Stop! Now."', "Then left."]
    tokens = data["sentences"][1]["tokens"]
    assert tokens[0] == {"text": "Then", "isToken": True}
    assert "".join(t["text"] for t in tokens) == "Then left."


def test_segment_character_mode_and_bad_mode(client):
    data = client.post("/api/segment", json={"text": "我是学生。", "mode": "character"}).json()
    assert [t["text"] for t in data["sentences"][0]["tokens"] if t["isToken"]] == ["我", "是", "学", "生"]
    assert client.post("/api/segment", json={"text": "Hi.", "mode": "syllable"}).status_code == 400
