"""Tests for sentence and word segmentation."""
import pytest

from tokenizer import (
    Script, SegmentMode, WordToken,
    detect_script, normalize_word, preferred_mode, segment,
    segment_into_characters, segment_into_sentences, segment_into_words,
)


STORY = (
    'Maria walked into the café. She ordered 2.5 kilos of coffee! '
    'He said "Stop! Now." Then left. "Where are you?" asked Tom. Was it over?'
)


def test_sentences_basic_split():
    assert segment_into_sentences("One. Two! Three?") == ["One.", "Two!", "Three?"]


def test_quoted_dialogue_stays_in_one_sentence():
    assert segment_into_sentences('He said "Stop! Now." Then left.') == [
        'He said "Stop! Now."',
        "Then left.",
    ]


def test_quote_followed_by_lowercase_continues_sentence():
    assert segment_into_sentences('"Where are you?" asked Tom. He waited.') == [
        '"Where are you?" asked Tom.',
        "He waited.",
    ]


def test_decimal_point_is_not_a_terminator():
    assert segment_into_sentences("It cost 2.5 euros. Cheap.") == ["It cost 2.5 euros.", "Cheap."]


def test_terminator_runs_and_closing_quote():
    assert segment_into_sentences("What?! Really.") == ["What?!", "Really."]
    assert segment_into_sentences("“Go.” She went.") == ["“Go.”", "She went."]


def test_trailing_fragment_without_terminator_is_dropped():
    assert segment_into_sentences("Complete sentence. dangling words") == ["Complete sentence."]


def test_empty_and_whitespace_text():
    assert segment_into_sentences("") == []
    assert segment_into_sentences("   \n ") == []


def test_cjk_terminators():
    assert segment_into_sentences("今日は晴れです。散歩に行きます！") == ["今日は晴れです。", "散歩に行きます！"]
    assert segment_into_sentences("「止まれ！」と言った。「はい。」") == ["「止まれ！」と言った。", "「はい。」"]


@pytest.mark.parametrize("sentence", segment_into_sentences(STORY) + [
    "¿Dónde está la estación?",
    "안녕하세요, 저는 학생입니다.",
    "Don't stop—keep going...",
    "\tTabs\tand  double  spaces.",
])
def test_word_tokens_concatenate_to_sentence(sentence):
    tokens = segment_into_words(sentence)
    assert "".join(t.text for t in tokens) == sentence
    assert "".join(t.text for t in segment_into_characters(sentence)) == sentence


def test_word_tokens_mark_letters_and_numbers():
    tokens = segment_into_words("Hello, world 42!")
    assert tokens == [
        WordToken("Hello", True),
        WordToken(", ", False),
        WordToken("world", True),
        WordToken(" ", False),
        WordToken("42", True),
        WordToken("!", False),
    ]
    assert tokens[1].is_punctuation_or_whitespace


def test_korean_words_are_tokens():
    clickable = [t.text for t in segment_into_words("저는 학생입니다.") if t.is_token]
    assert clickable == ["저는", "학생입니다"]


def test_character_mode_splits_every_letter():
    clickable = [t.text for t in segment("猫が好き。", SegmentMode.CHARACTER) if t.is_token]
    assert clickable == ["猫", "が", "好", "き"]


def test_segment_accepts_mode_string():
    assert segment("ab", "character") == [WordToken("a", True), WordToken("b", True)]


def test_token_to_dict():
    assert WordToken("cat", True).to_dict() == {"text": "cat", "isToken": True}


def test_detect_script():
    assert detect_script("hello") is Script.LATIN
    assert detect_script("학생") is Script.HANGUL
    assert detect_script("学生") is Script.HAN
    assert detect_script("学生です") is Script.KANA
    assert detect_script("123") is Script.OTHER


def test_preferred_mode():
    assert preferred_mode("The cat sat.") is SegmentMode.WORD
    assert preferred_mode("저는 학생입니다.") is SegmentMode.WORD
    assert preferred_mode("我是学生。") is SegmentMode.CHARACTER


def test_normalize_word():
    assert normalize_word("Hello!") == "Hello"
    assert normalize_word("don't,") == "don't"
    assert normalize_word("!!!") == ""
    assert normalize_word("학생") == "학생"
