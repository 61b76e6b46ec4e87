from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional, Union


@dataclass(frozen=True)
class TimedClip:
    overlay_file: str
    audio_file: str
    clip_begin: float
    clip_end: float
    text_href: str
    raw_markup: str = ""
    index: int = 0

    @property
    def duration(self) -> float:
        return self.clip_end - self.clip_begin


@dataclass(frozen=True)
class Thresholds:
    # Looking for real outliers where multiple sentences are grouped
    max_clip_duration: float = 45.0
    min_clip_duration: float = 0.3

    # Silence between clips; declared for config compatibility, no check reads it
    max_gap_duration: float = 1.5

    max_seconds_per_word: float = 3.5
    min_seconds_per_word: float = 0.14

    min_chars_per_second: float = 3.0
    max_chars_per_second: float = 100.0

    # Low text count special case
    min_words_for_check: int = 2
    min_chars_for_check: int = 6
    max_duration_for_low_word_count: float = 3.5
    min_duration_for_low_word_count: float = 0.1

    # How far two clips may overlap before the overlap is reported
    overlap_tolerance: float = 0.0

    # Reserved for near-identical (begin, end) detection, which is not implemented
    duplicate_timing_tolerance: float = 0.0

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "Thresholds":
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(values) - set(known))
        if unknown:
            raise ValueError(f"Unknown threshold(s): {', '.join(unknown)}")

        coerced: Dict[str, Any] = {}
        for name, value in values.items():
            target_type = int if known[name].type is int else float
            if isinstance(value, bool):
                raise ValueError(f"Threshold {name} must be a number, got {value!r}")
            try:
                coerced[name] = target_type(value)
            except (TypeError, ValueError) as exc:
                raise ValueError(
                    f"Threshold {name} must be a number, got {value!r}"
                ) from exc
        return cls(**coerced)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ClipWarning:
    message: str
    clip: TimedClip

    def format(self) -> str:
        clip = self.clip
        return (
            f"[WARN] {self.message} -- href:{clip.text_href} "
            f"-- frag: {clip.clip_begin}s to {clip.clip_end}s "
            f"-- audioFile:{clip.audio_file}"
        )


@dataclass(frozen=True)
class OverlapWarning:
    audio_file: str
    previous: TimedClip
    current: TimedClip

    def format(self) -> str:
        prev = self.previous
        curr = self.current
        return "\n".join(
            [
                f"[WARN] Overlap in {self.audio_file}:",
                f"  → Previous: {prev.clip_begin}s–{prev.clip_end}s ({prev.text_href})",
                f"  → Current:  {curr.clip_begin}s–{curr.clip_end}s ({curr.text_href})",
            ]
        )


Diagnostic = Union[ClipWarning, OverlapWarning]


@dataclass
class SmilCheckResult:
    smil_path: str
    clip_count: int = 0
    warnings: List[Diagnostic] = field(default_factory=list)

    @property
    def overlaps(self) -> List[OverlapWarning]:
        return [w for w in self.warnings if isinstance(w, OverlapWarning)]


@dataclass
class BookCheckResult:
    smil_paths: List[str]
    results: List[SmilCheckResult]
    package_path: Optional[str] = None

    @property
    def warning_count(self) -> int:
        return sum(len(result.warnings) for result in self.results)
