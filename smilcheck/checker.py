import os
from typing import Callable, Optional

from .errors import SmilDocumentError
from .events import EventEmitter
from .fragments import FragmentResolver
from .heuristics import check_clip
from .models import ClipWarning, Diagnostic, SmilCheckResult, Thresholds
from .overlaps import find_overlaps
from .smil_parser import load_clips
from .timecodes import format_time_short
from .tokenizer import NltkTokenizer, Tokenizer


class SmilChecker:
    """Validate the clips of one SMIL file; create a new checker per file."""

    def __init__(
        self,
        thresholds: Optional[Thresholds] = None,
        tokenizer: Optional[Tokenizer] = None,
        events: Optional[EventEmitter] = None,
    ):
        self.thresholds = thresholds or Thresholds()
        self.tokenizer = tokenizer or NltkTokenizer()
        self.events = events
        self.resolver: Optional[FragmentResolver] = None

    def _report(self, result: SmilCheckResult, warning: Diagnostic) -> None:
        result.warnings.append(warning)
        if self.events is not None:
            self.events.diagnostic(warning)

    def _unreadable(self, exc: SmilDocumentError) -> None:
        if self.events is not None:
            self.events.warn(f"{exc} Nothing to check.")

    def check_smil(self, smil_path: str, is_first_or_last_smil: bool) -> SmilCheckResult:
        result = SmilCheckResult(smil_path=smil_path)
        clips = load_clips(smil_path, on_error=self._unreadable)
        result.clip_count = len(clips)
        self.resolver = FragmentResolver(os.path.dirname(smil_path), events=self.events)

        for clip in clips:
            text = self.resolver.text_for_fragment(clip.text_href)
            for message in check_clip(
                clip,
                text,
                clips,
                is_first_or_last_smil=is_first_or_last_smil,
                thresholds=self.thresholds,
                tokenizer=self.tokenizer,
            ):
                self._report(result, ClipWarning(message=message, clip=clip))

        for overlap in find_overlaps(clips, self.thresholds.overlap_tolerance):
            self._report(result, overlap)

        if self.events is not None:
            summary = (
                f"Checked {os.path.basename(smil_path)}: {len(clips)} clips, "
                f"{len(result.warnings)} warnings ({len(result.overlaps)} overlaps)"
            )
            if clips:
                summary += f", audio to {format_time_short(max(c.clip_end for c in clips))}"
            self.events.info(summary)
        return result


CheckerFactory = Callable[[], SmilChecker]
