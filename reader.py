"""Story reader state: translation panels and the word lookup modal.

Each sentence (and the title) gets its own TranslationPanel:

    CLOSED -> open -> LOADING -> SHOWN | ERROR
    SHOWN  -> close -> CLOSED            (translation stays cached)
    SHOWN  -> refresh -> LOADING -> SHOWN | ERROR

Panels never share state, so any number of them can be loading at once.
Results that arrive after the reader is disposed are dropped.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, List, Optional

from log import get_logger
from models import WordInfo
from tokenizer import (
    SegmentMode, WordToken,
    normalize_word, preferred_mode, segment, segment_into_sentences,
)

logger = get_logger("lingotales.reader")

TRANSLATION_ERROR = "Failed to load translation"
WORD_LOOKUP_ERROR = "Failed to get word information"
SAVE_WORD_ERROR = "Failed to save word. Please try again."

# (text, fresh) -> translation
PanelFetch = Callable[[str, bool], Awaitable[str]]
# (text, target_language, fresh) -> translation
Translator = Callable[[str, str, bool], Awaitable[str]]
# (word, context) -> WordInfo
WordFetch = Callable[[str, str], Awaitable[WordInfo]]
Notifier = Callable[[str], None]


class PanelState(str, Enum):
    CLOSED = "closed"
    LOADING = "loading"
    SHOWN = "shown"
    ERROR = "error"


def _log_notice(message: str):
    logger.warning(message, extra={"component": "reader"})


class TranslationPanel:
    """Lazy, cached translation of one piece of text."""

    def __init__(self, text: str):
        self.text = text
        self.state = PanelState.CLOSED
        self.translation: Optional[str] = None
        self.error: Optional[str] = None
        self._request = 0
        self._pending = False
        self._detached = False

    @property
    def is_open(self) -> bool:
        return self.state is not PanelState.CLOSED

    async def open(self, fetch: PanelFetch):
        if self.is_open:
            return
        if self.translation is not None:
            self.state = PanelState.SHOWN
            return
        # Reopened while the first fetch is still out; it will fill the panel.
        if self._pending:
            self.state = PanelState.LOADING
            return
        await self._load(fetch, fresh=False)

    def close(self):
        self.state = PanelState.CLOSED

    async def toggle(self, fetch: PanelFetch):
        if self.is_open:
            self.close()
        else:
            await self.open(fetch)

    async def refresh(self, fetch: PanelFetch):
        if self.state is PanelState.LOADING or self._pending:
            return
        await self._load(fetch, fresh=True)

    def detach(self):
        self._detached = True

    async def _load(self, fetch: PanelFetch, fresh: bool):
        self._request += 1
        request = self._request
        self.state = PanelState.LOADING
        self.error = None
        self._pending = True
        try:
            translation = await fetch(self.text, fresh)
        except Exception:
            self._pending = False
            logger.exception("Translation failed", extra={"component": "reader"})
            if self._current(request) and self.state is PanelState.LOADING:
                self.state = PanelState.ERROR
                self.error = TRANSLATION_ERROR
            return
        self._pending = False
        if not self._current(request):
            return
        self.translation = translation
        # Closed while loading: keep the result, stay closed.
        if self.state is PanelState.LOADING:
            self.state = PanelState.SHOWN

    def _current(self, request: int) -> bool:
        return not self._detached and request == self._request


@dataclass
class WordModal:
    word: str
    context: str
    state: PanelState = PanelState.LOADING
    info: Optional[WordInfo] = None
    error: Optional[str] = None


class WordLookupDispatcher:
    """Turns a click on a word into one lookup request and a modal."""

    def __init__(self, fetch: WordFetch, notify: Optional[Notifier] = None):
        self._fetch = fetch
        self._notify = notify or _log_notice
        self.modal: Optional[WordModal] = None
        self._detached = False

    async def lookup(self, word: str, context: str = "") -> Optional[WordInfo]:
        term = normalize_word(word)
        if not term:
            return None
        modal = WordModal(word=term, context=context)
        self.modal = modal
        try:
            info = await self._fetch(term, context)
        except Exception:
            logger.exception("Word lookup failed", extra={"component": "reader"})
            if not self._detached:
                modal.state = PanelState.ERROR
                modal.error = WORD_LOOKUP_ERROR
                if self.modal is modal:
                    self._notify(WORD_LOOKUP_ERROR)
            return None
        if self._detached:
            return None
        modal.info = info
        modal.state = PanelState.SHOWN
        return info

    async def save(self, deck_id: int, save: Callable[[int, WordInfo], Awaitable[object]]) -> bool:
        """Store the word shown in the modal into a deck."""
        modal = self.modal
        if modal is None or modal.info is None:
            return False
        try:
            await save(deck_id, modal.info)
        except Exception:
            logger.exception("Saving word failed", extra={"component": "reader"})
            self._notify(SAVE_WORD_ERROR)
            return False
        self.close()
        return True

    def close(self):
        self.modal = None

    def detach(self):
        self._detached = True


class StoryReader:
    """Everything the reader screen needs for one story."""

    def __init__(self, title: str, content: str, translate: Translator,
                 lookup_word: Optional[Callable[..., Awaitable[WordInfo]]] = None,
                 story_language: Optional[str] = None, target_language: str = "English",
                 mode: Optional[SegmentMode] = None, notify: Optional[Notifier] = None):
        self.title = title
        self.content = content
        self.story_language = story_language
        self.target_language = target_language
        self.mode = SegmentMode(mode) if mode else preferred_mode(content)
        self.title_panel = TranslationPanel(title)
        self.sentences: List[TranslationPanel] = [TranslationPanel(s) for s in segment_into_sentences(content)]
        self._translate = translate
        self._lookup_word = lookup_word
        self.dispatcher = WordLookupDispatcher(self._fetch_word, notify) if lookup_word else None

    async def _fetch_translation(self, text: str, fresh: bool) -> str:
        return await self._translate(text, self.target_language, fresh)

    async def _fetch_word(self, word: str, context: str) -> WordInfo:
        return await self._lookup_word(word, context, self.story_language)

    def tokens(self, index: int) -> List[WordToken]:
        return segment(self.sentences[index].text, self.mode)

    async def toggle_title(self):
        await self.title_panel.toggle(self._fetch_translation)

    async def toggle_sentence(self, index: int):
        await self.sentences[index].toggle(self._fetch_translation)

    async def refresh_title(self):
        await self.title_panel.refresh(self._fetch_translation)

    async def refresh_sentence(self, index: int):
        await self.sentences[index].refresh(self._fetch_translation)

    async def click_word(self, index: int, token: WordToken) -> Optional[WordInfo]:
        if self.dispatcher is None or not token.is_token:
            return None
        return await self.dispatcher.lookup(token.text, self.sentences[index].text)

    def dispose(self):
        self.title_panel.detach()
        for panel in self.sentences:
            panel.detach()
        if self.dispatcher is not None:
            self.dispatcher.detach()
