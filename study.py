"""Deck study session and swipe-to-delete rows.

These hold the state the gesture functions deliberately do not: which card
is showing, whether it is flipped, and whether a delete is awaiting
confirmation.
"""
from typing import Awaitable, Callable, List, Optional, Sequence

from log import get_logger
from gestures import (
    CardAction, ItemAction, DELETE_THRESHOLD,
    classify_card_gesture, classify_item_swipe, clamp_drag, exceeds_tap_tolerance,
)
from models import VocabEntry

logger = get_logger("lingotales.study")


class StudySession:
    """Walks through a deck one flashcard at a time."""

    def __init__(self, vocabulary: Sequence[VocabEntry]):
        self.vocabulary: List[VocabEntry] = list(vocabulary)
        self.index = 0
        self.flipped = False
        self.known = 0
        self.again = 0
        self._suppress_tap = False

    @property
    def is_empty(self) -> bool:
        return not self.vocabulary

    @property
    def is_completed(self) -> bool:
        return not self.is_empty and self.index >= len(self.vocabulary)

    @property
    def current(self) -> Optional[VocabEntry]:
        if self.index < len(self.vocabulary):
            return self.vocabulary[self.index]
        return None

    @property
    def progress(self) -> str:
        return f"{min(self.index + 1, len(self.vocabulary))} / {len(self.vocabulary)}"

    def release(self, start_x: float, end_x: float, velocity_x: float) -> CardAction:
        """Apply the end of a drag on the current card."""
        if exceeds_tap_tolerance(end_x - start_x):
            self._suppress_tap = True
        return self._apply(classify_card_gesture(start_x, end_x, velocity_x))

    def _apply(self, action: CardAction) -> CardAction:
        if self.current is None:
            return CardAction.NONE
        if action is CardAction.ADVANCE_RIGHT:
            self.known += 1
        elif action is CardAction.ADVANCE_LEFT:
            self.again += 1
        if action is not CardAction.NONE:
            self.index += 1
            self.flipped = False
        return action

    def tap(self) -> bool:
        """Flip the card unless this tap is the tail end of a drag."""
        if self._suppress_tap:
            self._suppress_tap = False
            return self.flipped
        if self.current is not None:
            self.flipped = not self.flipped
        return self.flipped

    def mark_again(self) -> CardAction:
        return self._apply(CardAction.ADVANCE_LEFT)

    def mark_known(self) -> CardAction:
        return self._apply(CardAction.ADVANCE_RIGHT)

    def restart(self):
        self.index = 0
        self.flipped = False
        self.known = 0
        self.again = 0
        self._suppress_tap = False


class SwipeToDeleteRow:
    """One vocabulary row that can be dragged left to delete."""

    def __init__(self, entry_id: int, threshold: float = DELETE_THRESHOLD):
        self.entry_id = entry_id
        self.threshold = threshold
        self.delta_x = 0.0
        self.confirming = False
        self.deleted = False

    @property
    def offset(self) -> float:
        return clamp_drag(self.delta_x)

    def drag(self, dx: float):
        self.delta_x += dx

    def release(self) -> ItemAction:
        action = classify_item_swipe(self.delta_x, self.threshold)
        if action is ItemAction.DELETE:
            self.confirming = True
        self.delta_x = 0.0
        return action

    def cancel(self):
        self.confirming = False
        self.delta_x = 0.0

    async def confirm(self, delete: Callable[[int], Awaitable[object]]) -> bool:
        """Run the caller's delete; on failure the row snaps back."""
        if not self.confirming:
            return False
        self.confirming = False
        try:
            await delete(self.entry_id)
        except Exception:
            logger.exception("Failed to delete vocabulary entry", extra={"component": "study"})
            return False
        self.deleted = True
        return True
