"""Sentence and word segmentation for the story reader.

Sentences keep quoted dialogue attached to the sentence around it. Word
segmentation is lossless: joining the token texts of a sentence gives the
sentence back, with every run of letters/numbers (any script) marked as a
clickable token and everything else passed through untouched.
"""
import re
import unicodedata
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import List

TERMINATORS = frozenset(".!?。！？")
QUOTE_PAIRS = {'"': '"', "“": "”", "«": "»", "「": "」", "『": "』"}
# Curly/CJK closers; a straight quote only closes when it is unbalanced.
CLOSING_QUOTES = frozenset("”»」』’")

_WORD_RE = re.compile(r"[^\W_]+")
_CHAR_RE = re.compile(r"[^\W_]")


class SegmentMode(str, Enum):
    WORD = "word"
    CHARACTER = "character"


class Script(str, Enum):
    HANGUL = "hangul"
    HAN = "han"
    KANA = "kana"
    LATIN = "latin"
    OTHER = "other"


@dataclass(frozen=True)
class WordToken:
    text: str
    is_token: bool

    @property
    def is_punctuation_or_whitespace(self) -> bool:
        return not self.is_token

    def to_dict(self) -> dict:
        return {"text": self.text, "isToken": self.is_token}


def _is_decimal_point(text: str, pos: int) -> bool:
    return (
        text[pos] == "."
        and 0 < pos < len(text) - 1
        and text[pos - 1].isdigit()
        and text[pos + 1].isdigit()
    )


def _quote_ends_sentence(text: str, pos: int) -> bool:
    """Decide whether a quote ending in a terminator also ends the sentence.

    `"Where are you?" asked Tom.` continues; `"Stop!" Then he left.` does not.
    """
    rest = text[pos:].lstrip()
    if not rest:
        return True
    nxt = rest[0]
    return nxt.isupper() or nxt in QUOTE_PAIRS


def segment_into_sentences(text: str) -> List[str]:
    """Split story text into sentences.

    Consumes quoted runs or plain characters until a terminator (optionally
    followed by a closing quote). Text after the last terminator is dropped.
    """
    sentences: List[str] = []
    n = len(text)
    start = 0
    pos = 0

    def emit(end: int):
        sentence = text[start:end].strip()
        if sentence:
            sentences.append(sentence)

    while pos < n:
        ch = text[pos]

        if ch in QUOTE_PAIRS:
            close = text.find(QUOTE_PAIRS[ch], pos + 1)
            if close == -1:
                pos += 1  # unbalanced, treat as plain text
                continue
            inner = text[pos + 1:close].rstrip()
            pos = close + 1
            if inner and inner[-1] in TERMINATORS and _quote_ends_sentence(text, pos):
                emit(pos)
                start = pos
            continue

        if ch in TERMINATORS and not _is_decimal_point(text, pos):
            while pos < n and text[pos] in TERMINATORS:
                pos += 1
            if pos < n and (
                text[pos] in CLOSING_QUOTES
                or (text[pos] == '"' and text.find('"', pos + 1) == -1)
            ):
                pos += 1
            emit(pos)
            start = pos
            continue

        pos += 1

    return sentences


def _split(sentence: str, pattern: re.Pattern) -> List[WordToken]:
    tokens: List[WordToken] = []
    last = 0
    for match in pattern.finditer(sentence):
        if match.start() > last:
            tokens.append(WordToken(sentence[last:match.start()], False))
        tokens.append(WordToken(match.group(), True))
        last = match.end()
    if last < len(sentence):
        tokens.append(WordToken(sentence[last:], False))
    return tokens


def segment_into_words(sentence: str) -> List[WordToken]:
    """Maximal runs of Unicode letters/numbers become clickable tokens."""
    return _split(sentence, _WORD_RE)


def segment_into_characters(sentence: str) -> List[WordToken]:
    """Fallback mode: every letter/number code point is its own token."""
    return _split(sentence, _CHAR_RE)


def segment(sentence: str, mode: SegmentMode = SegmentMode.WORD) -> List[WordToken]:
    if SegmentMode(mode) is SegmentMode.CHARACTER:
        return segment_into_characters(sentence)
    return segment_into_words(sentence)


def char_script(ch: str) -> Script:
    cp = ord(ch)
    if 0xAC00 <= cp <= 0xD7AF or 0x1100 <= cp <= 0x11FF or 0x3130 <= cp <= 0x318F:
        return Script.HANGUL
    if 0x4E00 <= cp <= 0x9FFF or 0x3400 <= cp <= 0x4DBF:
        return Script.HAN
    if 0x3040 <= cp <= 0x30FF:
        return Script.KANA
    if ch.isalpha() and unicodedata.name(ch, "").startswith("LATIN"):
        return Script.LATIN
    return Script.OTHER


def detect_script(text: str) -> Script:
    """Return the dominant script among the letters of `text`."""
    counts = Counter(char_script(ch) for ch in text if ch.isalpha())
    if not counts:
        return Script.OTHER
    # Japanese mixes kana and kanji; any kana means Japanese.
    if counts[Script.KANA]:
        return Script.KANA
    return counts.most_common(1)[0][0]


def preferred_mode(text: str) -> SegmentMode:
    """Scripts written without spaces fall back to per-character tokens."""
    if detect_script(text) in (Script.HAN, Script.KANA):
        return SegmentMode.CHARACTER
    return SegmentMode.WORD


APOSTROPHES = "'’"


def normalize_word(word: str) -> str:
    """Keep only letters and apostrophes; used before any lookup is sent."""
    return "".join(ch for ch in word if ch.isalpha() or ch in APOSTROPHES)
