"""LLM interaction (OpenAI / OpenRouter), prompt building, and pronunciation."""
import os
import json
import re as _re
from typing import Optional, List

import httpx
import pykakasi
from pypinyin import pinyin, Style as PinyinStyle
from korean_romanizer.romanizer import Romanizer

from log import get_logger
from models import STORY_LANGUAGES, READING_LEVEL_LABELS, StoryRequest

logger = get_logger("lingotales.llm")

# --- Config ---
_PROVIDERS = {
    "openai": ("https://api.openai.com/v1", "OPENAI_API_KEY", "gpt-4o"),
    "openrouter": ("https://openrouter.ai/api/v1", "OPENROUTER_API_KEY", "openai/gpt-4o"),
}
LLM_PROVIDER = os.environ.get("LINGOTALES_LLM_PROVIDER", "openai").lower()
if LLM_PROVIDER not in _PROVIDERS:
    logger.warning("Unknown LLM provider, falling back to openai", extra={"provider": LLM_PROVIDER})
    LLM_PROVIDER = "openai"
LLM_BASE_URL, _key_env, _default_model = _PROVIDERS[LLM_PROVIDER]
LLM_API_KEY = os.environ.get(_key_env, "")
LLM_MODEL = os.environ.get("LINGOTALES_MODEL", _default_model)
LLM_TIMEOUT = float(os.environ.get("LINGOTALES_LLM_TIMEOUT", "60"))

RATE_LIMIT_MESSAGE = "API rate limit exceeded. Please try again in a few minutes."
QUOTA_MESSAGE = "AI API quota exceeded. Please check your API key."


class LLMError(Exception):
    """The AI service failed or answered with something unusable."""


class RateLimitError(LLMError):
    def __init__(self, message: str = RATE_LIMIT_MESSAGE):
        super().__init__(message)


class QuotaExceededError(LLMError):
    def __init__(self, message: str = QUOTA_MESSAGE):
        super().__init__(message)


# --- Pronunciation ---
_kakasi = pykakasi.kakasi()


def deterministic_pronunciation(text: str, lang_code: str) -> Optional[str]:
    """Romanize Japanese, Chinese or Korean text without asking the LLM."""
    if lang_code == "ja":
        result = _kakasi.convert(text)
        return " ".join(item["hepburn"] for item in result if item["hepburn"].strip())
    elif lang_code == "zh":
        result = pinyin(text, style=PinyinStyle.TONE)
        return " ".join(p[0] for p in result)
    elif lang_code == "ko":
        return Romanizer(text).romanize()
    return None


# --- Helpers ---

def parse_json_object(text: str) -> Optional[dict]:
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        match = _re.search(r'\{.*\}', text, _re.DOTALL)
        if not match:
            return None
        try:
            parsed = json.loads(match.group())
        except json.JSONDecodeError:
            return None
    return parsed if isinstance(parsed, dict) else None


def _classify_error(status_code: int, body: str):
    if "insufficient_quota" in body:
        raise QuotaExceededError()
    if status_code == 429 or "rate_limit_exceeded" in body:
        raise RateLimitError()


async def chat_completion(messages: list, model: str = None, temperature: float = 0.7,
                          max_tokens: int = 1024, json_mode: bool = True,
                          timeout: float = None) -> Optional[str]:
    """Call the chat-completions API and return the content string.

    Returns None on transport errors and non-200 answers. Rate-limit and
    quota answers raise, since callers report them differently.
    """
    if not LLM_API_KEY:
        logger.warning("No API key configured", extra={"provider": LLM_PROVIDER})
        return None
    payload = {
        "model": model or LLM_MODEL,
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max_tokens,
    }
    if json_mode:
        payload["response_format"] = {"type": "json_object"}
    try:
        async with httpx.AsyncClient(timeout=timeout or LLM_TIMEOUT) as client:
            resp = await client.post(
                f"{LLM_BASE_URL}/chat/completions",
                headers={"Authorization": f"Bearer {LLM_API_KEY}"},
                json=payload,
            )
    except httpx.HTTPError:
        logger.exception("LLM request failed", extra={"provider": LLM_PROVIDER})
        return None

    if resp.status_code != 200:
        logger.warning("LLM API error", extra={
            "provider": LLM_PROVIDER, "status_code": resp.status_code, "detail": resp.text[:200],
        })
        _classify_error(resp.status_code, resp.text)
        return None
    try:
        return resp.json()["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError):
        logger.warning("Malformed LLM response", extra={"provider": LLM_PROVIDER})
        return None


async def check_llm_connectivity() -> bool:
    if not LLM_API_KEY:
        return False
    try:
        async with httpx.AsyncClient(timeout=10) as client:
            resp = await client.get(
                f"{LLM_BASE_URL}/models",
                headers={"Authorization": f"Bearer {LLM_API_KEY}"},
            )
            return resp.status_code == 200
    except httpx.HTTPError:
        logger.warning("LLM provider not reachable", extra={"provider": LLM_PROVIDER})
        return False


async def _chat_json(system: str, prompt: str, required: List[str], **kwargs) -> dict:
    text = await chat_completion(
        [{"role": "system", "content": system}, {"role": "user", "content": prompt}],
        **kwargs,
    )
    if text is None:
        raise LLMError("AI service unavailable")
    result = parse_json_object(text)
    if not result or any(not isinstance(result.get(k), str) or not result[k].strip() for k in required):
        logger.warning("Missing required fields in LLM response", extra={"detail": (text or "")[:200]})
        raise LLMError("Malformed AI response")
    return result


# --- Story generation ---

async def generate_form_data() -> dict:
    prompt = """Generate a story setup with these constraints:
1. The setting must be modern/contemporary (no fantasy or historical settings)
2. The setting must be 3 words or less
3. The character names should be modern and realistic
4. No supernatural or fantasy elements

Respond with a JSON object in this format:
{
  "setting": "string (max 3 words)",
  "characterName": "string",
  "additionalCharacters": "string (2-3 names)",
  "additionalContext": "string (1-2 sentences of context)"
}"""
    system = ("You are a writing assistant that generates contemporary story setups. "
              "Always use modern settings and realistic character names.")
    result = await _chat_json(system, prompt, ["setting", "characterName"], temperature=0.7, max_tokens=300)
    return {
        "setting": result["setting"].strip(),
        "characterName": result["characterName"].strip(),
        "additionalCharacters": str(result.get("additionalCharacters") or ""),
        "additionalContext": str(result.get("additionalContext") or ""),
    }


async def generate_story(req: StoryRequest) -> dict:
    language = req.language or "English"
    level = f"{req.readingLevel.value} ({READING_LEVEL_LABELS[req.readingLevel]})"
    prompt = f"""As a creative writing assistant, create a story in {language} with these parameters:
- Setting: {req.setting}
- Main character: {req.characterName}
- Additional characters: {req.additionalCharacters or "None"}
- Reading level: {level}
- Target word count: {req.wordCount}
- Additional context: {req.additionalContext or "None"}

The story should be appropriate for reading level {req.readingLevel.value}.
Every sentence must end with punctuation.

Respond with a JSON object containing exactly two fields:
{{
  "title": "A creative title for the story",
  "content": "The complete story text"
}}"""
    system = ("You are a creative writing assistant. Always respond with a JSON object containing "
              "exactly two fields: 'title' and 'content'. The title should be a creative name for "
              "the story, and the content should be the complete story text.")
    result = await _chat_json(system, prompt, ["title", "content"], temperature=0.8, max_tokens=2000)
    return {"title": result["title"].strip(), "content": result["content"].strip()}


# --- Reading aids ---

async def translate_text(text: str, target_language: str = "English") -> str:
    prompt = f"""Translate the following text into {target_language}. Keep the meaning and tone; do not explain.

Text: "{text}"

Respond with a JSON object: {{"translation": "..."}}"""
    system = f"You are a precise translator into {target_language}. Respond with valid JSON only."
    result = await _chat_json(system, prompt, ["translation"], temperature=0.3, max_tokens=500)
    return result["translation"].strip()


async def analyze_word(word: str, context: str, language: str) -> dict:
    """Explain a word from a {language} story in English."""
    prompt = f"""Analyze the {language} word "{word}" as it is used in this sentence:
"{context}"

Respond with a JSON object:
{{
  "translation": "English meaning in this context",
  "partOfSpeech": "noun, verb, adjective, adverb, particle, ...",
  "note": "one short usage or grammar note in English, or null"
}}"""
    system = f"You are a {language} language teacher. Respond with valid JSON only."
    return await _chat_json(system, prompt, ["translation", "partOfSpeech"], temperature=0.3, max_tokens=300)


async def analyze_character(char: str, context: str, language: str) -> dict:
    """Explain a single syllable/character clicked in character mode."""
    prompt = f"""The learner clicked the single {language} character "{char}" in this sentence:
"{context}"

Explain the character on its own and, if it belongs to a longer word in the sentence, name that word.

Respond with a JSON object:
{{
  "translation": "English meaning of the character (or of the word it belongs to)",
  "partOfSpeech": "character, syllable, particle, noun, ...",
  "note": "the containing word and its meaning, or null"
}}"""
    system = f"You are a {language} writing-system tutor. Respond with valid JSON only."
    return await _chat_json(system, prompt, ["translation", "partOfSpeech"], temperature=0.3, max_tokens=300)


def language_code(language: Optional[str]) -> str:
    return STORY_LANGUAGES.get(language or "English", "")
