import unicodedata
from dataclasses import dataclass
from typing import List, Sequence

from .models import Thresholds, TimedClip
from .tokenizer import Tokenizer


EDGE_LENIENCY_SECONDS = 4.0
EDGE_MIN_CHARS_PER_SECOND = 0.3
EDGE_WORD_CUTOFF = 3
SHORT_TEXT_MAX_WORDS = 3
SHORT_TEXT_MIN_SECONDS_PER_WORD = 0.05
MAX_SENTENCES_PER_CLIP = 3


@dataclass(frozen=True)
class ClipLimits:
    lenient_edge: bool
    very_edge: bool
    max_duration: float
    min_duration: float
    max_seconds_per_word: float
    min_seconds_per_word: float
    min_chars_per_second: float
    max_chars_per_second: float


def _is_punctuation_or_space(char: str) -> bool:
    return char.isspace() or unicodedata.category(char).startswith("P")


def bare_text(text: str) -> str:
    start = 0
    end = len(text)
    while start < end and _is_punctuation_or_space(text[start]):
        start += 1
    while end > start and _is_punctuation_or_space(text[end - 1]):
        end -= 1
    return text[start:end]


def is_very_edge_clip(
    clip: TimedClip,
    clips: Sequence[TimedClip],
    is_first_or_last_smil: bool,
) -> bool:
    """Leading or trailing clip of the book's first/last overlay, exempt from long/slow checks."""
    if not is_first_or_last_smil or not clips:
        return False
    return clip.clip_end == clips[-1].clip_end or clip.index == 0


def clip_limits(
    clip: TimedClip,
    clips: Sequence[TimedClip],
    word_count: int,
    text_length: int,
    is_first_or_last_smil: bool,
    thresholds: Thresholds,
) -> ClipLimits:
    at_file_edge = clip.index == 0 or clip.index == len(clips) - 1
    lenient_edge = word_count < EDGE_WORD_CUTOFF and at_file_edge
    extra_time = EDGE_LENIENCY_SECONDS if lenient_edge else 0.0

    low_word_count = word_count <= thresholds.min_words_for_check
    short_text = low_word_count or text_length < thresholds.min_chars_for_check

    max_duration = (
        thresholds.max_duration_for_low_word_count
        if low_word_count
        else thresholds.max_clip_duration
    ) + extra_time
    min_duration = (
        thresholds.min_duration_for_low_word_count
        if short_text
        else thresholds.min_clip_duration
    )

    return ClipLimits(
        lenient_edge=lenient_edge,
        very_edge=is_very_edge_clip(clip, clips, is_first_or_last_smil),
        max_duration=max_duration,
        min_duration=min_duration,
        max_seconds_per_word=thresholds.max_seconds_per_word + extra_time,
        min_seconds_per_word=(
            SHORT_TEXT_MIN_SECONDS_PER_WORD
            if word_count <= SHORT_TEXT_MAX_WORDS
            else thresholds.min_seconds_per_word
        ),
        min_chars_per_second=(
            EDGE_MIN_CHARS_PER_SECOND if lenient_edge else thresholds.min_chars_per_second
        ),
        max_chars_per_second=thresholds.max_chars_per_second,
    )


def _pacing_message(
    clip: TimedClip,
    limits: ClipLimits,
    text_length: int,
    word_count: int,
) -> str:
    duration = clip.duration
    if duration == 0:
        chars_per_second = float("inf") if text_length else 0.0
    else:
        chars_per_second = text_length / duration
    seconds_per_word = duration / word_count

    if duration > limits.max_duration and not limits.very_edge:
        return f"Long duration {duration}s"
    if seconds_per_word > limits.max_seconds_per_word and not limits.very_edge:
        return f"Slow pace {seconds_per_word:.2f}"
    if duration < limits.min_duration:
        return f"Short duration ({duration}s)"
    if seconds_per_word < limits.min_seconds_per_word:
        return f"Fast pace {seconds_per_word:.2f}"
    if chars_per_second < limits.min_chars_per_second:
        # Slow chars/s is detected but intentionally not reported.
        return ""
    if chars_per_second > limits.max_chars_per_second:
        return f"Fast chars per second ({chars_per_second} cps)"
    return ""


def check_clip(
    clip: TimedClip,
    text: str,
    clips: Sequence[TimedClip],
    is_first_or_last_smil: bool,
    thresholds: Thresholds,
    tokenizer: Tokenizer,
) -> List[str]:
    """Return the warning messages for one clip whose fragment text is already resolved."""
    if not text:
        return ["Empty fragment"]

    bare = bare_text(text)
    if not bare:
        return []

    messages: List[str] = []
    if len(tokenizer.segment_sentences(bare)) > MAX_SENTENCES_PER_CLIP:
        messages.append("Too many sentences in frag")

    word_count = len(tokenizer.segment_words(bare))
    if word_count == 0:
        messages.append("No words in frag")
        return messages

    limits = clip_limits(
        clip,
        clips,
        word_count=word_count,
        text_length=len(text),
        is_first_or_last_smil=is_first_or_last_smil,
        thresholds=thresholds,
    )
    pacing = _pacing_message(clip, limits, len(text), word_count)
    if pacing:
        messages.append(pacing)
    return messages
