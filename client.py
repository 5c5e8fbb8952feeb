"""Async client for the LingoTales API, plus the local preference file."""
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx

from log import get_logger
from models import (
    DEFAULT_STORY_LANGUAGE, STORY_LANGUAGES,
    Deck, FormSuggestion, Story, StoryRequest, StoryResponse, VocabEntry, WordInfo,
)

logger = get_logger("lingotales.client")

API_URL = os.environ.get("LINGOTALES_URL", "http://localhost:8847")
PREFS_PATH = Path(os.environ.get("LINGOTALES_PREFS_PATH", Path.home() / ".lingotales" / "preferences.json"))

STORY_LANGUAGE_KEY = "storyLanguage"
HIGH_DEMAND_MESSAGE = ("The AI service is temporarily unavailable due to high demand. "
                       "Please try again in a few minutes.")


class ApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class Preferences:
    """String key-value settings kept in a small JSON file."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else PREFS_PATH

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError):
            logger.warning("Unreadable preferences file, using defaults", extra={"detail": str(self.path)})
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)} if isinstance(data, dict) else {}

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._load().get(key, default)

    def set(self, key: str, value: str):
        data = self._load()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2))

    @property
    def story_language(self) -> str:
        return self.get(STORY_LANGUAGE_KEY, DEFAULT_STORY_LANGUAGE)

    @story_language.setter
    def story_language(self, language: str):
        if language not in STORY_LANGUAGES:
            raise ValueError(f"Unsupported story language: {language}")
        self.set(STORY_LANGUAGE_KEY, language)


class ApiClient:
    """Thin wrapper over the REST endpoints.

    Usage:
        async with ApiClient() as api:
            story = await api.generate_story(form)
    """

    def __init__(self, base_url: str = None, password: Optional[str] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None, timeout: float = 120):
        headers = {"X-App-Password": password} if password else {}
        self._http = httpx.AsyncClient(
            base_url=base_url or API_URL, headers=headers, transport=transport, timeout=timeout,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()

    async def aclose(self):
        await self._http.aclose()

    async def _request(self, method: str, path: str, failure: str, **kwargs) -> Any:
        try:
            resp = await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(failure, extra={"endpoint": path, "detail": str(e)})
            raise ApiError(failure) from e
        if resp.status_code >= 400:
            logger.warning(failure, extra={"endpoint": path, "status_code": resp.status_code})
            if "rate limit exceeded" in resp.text.lower():
                raise ApiError(HIGH_DEMAND_MESSAGE, resp.status_code)
            raise ApiError(failure, resp.status_code)
        try:
            return resp.json()
        except ValueError as e:
            raise ApiError(failure, resp.status_code) from e

    # --- Generation ---

    async def generate_story(self, form: Dict[str, Any], language: Optional[str] = None) -> StoryResponse:
        # Raises pydantic.ValidationError before anything is sent.
        req = StoryRequest(**{**form, "language": language or form.get("language")})
        data = await self._request("POST", "/api/generate", "Failed to generate story",
                                   json=req.model_dump(mode="json"))
        return StoryResponse(**data)

    async def generate_form(self) -> FormSuggestion:
        data = await self._request("POST", "/api/generate-form", "Failed to generate story setup")
        return FormSuggestion(**data)

    # --- Reading aids ---

    async def translate(self, sentence: str, target_language: str = "English", fresh: bool = False) -> str:
        data = await self._request("POST", "/api/translate", "Translation failed", json={
            "sentence": sentence, "targetLanguage": target_language, "fresh": fresh,
        })
        if not isinstance(data, dict) or not isinstance(data.get("translation"), str):
            raise ApiError("Translation failed")
        return data["translation"]

    async def word_info(self, word: str, context: str = "", language: Optional[str] = None) -> WordInfo:
        data = await self._request("POST", "/api/word-info", "Failed to get word information", json={
            "word": word, "context": context, "language": language,
        })
        return WordInfo(**data)

    # --- Stories ---

    async def save_story(self, story: StoryResponse, reading_level: str, word_count: int) -> Story:
        data = await self._request("POST", "/api/stories", "Failed to save story", json={
            "title": story.title, "content": story.content,
            "readingLevel": reading_level, "wordCount": word_count,
        })
        return Story(**data)

    async def list_stories(self) -> List[Story]:
        data = await self._request("GET", "/api/stories", "Failed to fetch stories")
        return [Story(**s) for s in data]

    async def get_story(self, story_id: int) -> Story:
        data = await self._request("GET", f"/api/stories/{story_id}", "Failed to fetch story")
        return Story(**data)

    # --- Decks & vocabulary ---

    async def create_deck(self, name: str, description: Optional[str] = None) -> Deck:
        data = await self._request("POST", "/api/decks", "Failed to create deck",
                                   json={"name": name, "description": description})
        return Deck(**data)

    async def list_decks(self) -> List[Deck]:
        data = await self._request("GET", "/api/decks", "Failed to fetch decks")
        return [Deck(**d) for d in data]

    async def delete_deck(self, deck_id: int):
        await self._request("DELETE", f"/api/decks/{deck_id}", "Failed to delete deck")

    async def add_word(self, deck_id: int, word: str, translation: str, part_of_speech: str = "",
                       context: Optional[str] = None) -> VocabEntry:
        data = await self._request("POST", "/api/vocabulary", "Failed to add word", json={
            "word": word, "translation": translation, "partOfSpeech": part_of_speech,
            "context": context, "deckId": deck_id,
        })
        return VocabEntry(**data)

    async def save_word_info(self, deck_id: int, info: WordInfo) -> VocabEntry:
        return await self.add_word(deck_id, info.word, info.translation, info.partOfSpeech, info.context or None)

    async def list_vocabulary(self, deck_id: Optional[int] = None) -> List[VocabEntry]:
        params = {"deckId": deck_id} if deck_id is not None else None
        data = await self._request("GET", "/api/vocabulary", "Failed to fetch vocabulary", params=params)
        return [VocabEntry(**v) for v in data]

    async def update_word(self, entry_id: int, **patch) -> VocabEntry:
        data = await self._request("PUT", f"/api/vocabulary/{entry_id}", "Failed to update word", json=patch)
        return VocabEntry(**data)

    async def delete_word(self, entry_id: int):
        await self._request("DELETE", f"/api/vocabulary/{entry_id}", "Failed to delete word")
