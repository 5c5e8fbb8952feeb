"""Pydantic schemas and constants for LingoTales."""
from enum import Enum
from typing import Annotated, Optional, List

from pydantic import BaseModel, Field, StringConstraints

# --- Constants ---
STORY_LANGUAGES = {
    "English": "en",
    "Spanish": "es",
    "French": "fr",
    "German": "de",
    "Italian": "it",
    "Portuguese": "pt",
    "Chinese": "zh",
    "Japanese": "ja",
    "Korean": "ko",
}

DEFAULT_STORY_LANGUAGE = "English"
MIN_WORD_COUNT = 50
MAX_WORD_COUNT = 500


class ReadingLevel(str, Enum):
    """CEFR proficiency levels."""
    A1 = "A1"  # Beginner
    A2 = "A2"  # Elementary
    B1 = "B1"  # Intermediate
    B2 = "B2"  # Upper Intermediate
    C1 = "C1"  # Advanced
    C2 = "C2"  # Mastery


READING_LEVEL_LABELS = {
    ReadingLevel.A1: "Beginner",
    ReadingLevel.A2: "Elementary",
    ReadingLevel.B1: "Intermediate",
    ReadingLevel.B2: "Upper Intermediate",
    ReadingLevel.C1: "Advanced",
    ReadingLevel.C2: "Mastery",
}

# --- Story generation ---

class StoryRequest(BaseModel):
    """Story form data. Validation runs before anything is sent upstream."""
    setting: str = Field(min_length=2)
    characterName: str = Field(min_length=1)
    additionalCharacters: str = ""
    readingLevel: ReadingLevel
    wordCount: int = Field(default=250, ge=MIN_WORD_COUNT, le=MAX_WORD_COUNT)
    additionalContext: str = ""
    language: Optional[str] = None


class StoryResponse(BaseModel):
    title: str
    content: str


class FormSuggestion(BaseModel):
    setting: str = ""
    characterName: str = ""
    additionalCharacters: str = ""
    additionalContext: str = ""

# --- Reading aids ---

class TranslateRequest(BaseModel):
    sentence: str
    targetLanguage: str = "English"
    fresh: bool = False


class WordInfoRequest(BaseModel):
    word: str
    context: str = ""
    language: Optional[str] = None


class WordInfo(BaseModel):
    word: str
    translation: str
    partOfSpeech: str
    context: str = ""
    note: Optional[str] = None
    pronunciation: Optional[str] = None


class SegmentRequest(BaseModel):
    text: str
    mode: str = "word"

# --- Persistence ---

class StoryCreate(BaseModel):
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    readingLevel: ReadingLevel
    wordCount: int = Field(ge=1)


# Surrounding whitespace is stripped before the length check.
NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class DeckCreate(BaseModel):
    name: NonBlankStr
    description: Optional[str] = None


class VocabCreate(BaseModel):
    word: NonBlankStr
    translation: NonBlankStr
    partOfSpeech: str = ""
    context: Optional[str] = None
    deckId: int


class VocabUpdate(BaseModel):
    word: Optional[NonBlankStr] = None
    translation: Optional[NonBlankStr] = None
    partOfSpeech: Optional[str] = None
    context: Optional[str] = None


class VocabEntry(BaseModel):
    id: int
    word: str
    translation: str
    partOfSpeech: str
    context: Optional[str] = None
    deckId: int
    createdAt: float


class Deck(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    createdAt: float
    vocabulary: List[VocabEntry] = []


class Story(BaseModel):
    id: int
    title: str
    content: str
    readingLevel: ReadingLevel
    wordCount: int
    createdAt: float
