"""Swipe/drag classification for flashcards and vocabulary rows.

Every function here is pure: one gesture sample in, one action out. The
caller owns the card index, flip state and open confirmations (see study.py).
"""
from enum import Enum

# Flashcards
SWIPE_DISTANCE_THRESHOLD = 100
SWIPE_VELOCITY_THRESHOLD = 800

# Vocabulary rows
DELETE_THRESHOLD = 50
SIMPLE_DELETE_THRESHOLD = 100
MAX_DRAG_OFFSET = 100

# Movement beyond this many pixels turns a tap into a drag.
TAP_TOLERANCE = 5


class CardAction(str, Enum):
    ADVANCE_RIGHT = "advance-right"
    ADVANCE_LEFT = "advance-left"
    NONE = "none"


class ItemAction(str, Enum):
    DELETE = "delete"
    NONE = "none"


def classify_card_gesture(start_x: float, end_x: float, velocity_x: float) -> CardAction:
    """Advance on a long drag or a fast flick, otherwise snap back."""
    delta = end_x - start_x
    if abs(delta) <= SWIPE_DISTANCE_THRESHOLD and abs(velocity_x) <= SWIPE_VELOCITY_THRESHOLD:
        return CardAction.NONE
    direction = delta if delta != 0 else velocity_x
    if direction > 0:
        return CardAction.ADVANCE_RIGHT
    if direction < 0:
        return CardAction.ADVANCE_LEFT
    return CardAction.NONE


def clamp_drag(delta_x: float) -> float:
    """Leftward drag distance clamped to [0, MAX_DRAG_OFFSET] for display."""
    return max(0.0, min(float(MAX_DRAG_OFFSET), -float(delta_x)))


def classify_item_swipe(delta_x: float, threshold: float = DELETE_THRESHOLD) -> ItemAction:
    """A leftward drag past `threshold` asks for a delete confirmation."""
    if -delta_x > threshold:
        return ItemAction.DELETE
    return ItemAction.NONE


def exceeds_tap_tolerance(dx: float, dy: float = 0.0) -> bool:
    return abs(dx) > TAP_TOLERANCE or abs(dy) > TAP_TOLERANCE
