from typing import Dict, List, Sequence

from .models import OverlapWarning, TimedClip


def group_by_audio_file(clips: Sequence[TimedClip]) -> Dict[str, List[TimedClip]]:
    groups: Dict[str, List[TimedClip]] = {}
    for clip in clips:
        groups.setdefault(clip.audio_file, []).append(clip)
    return groups


def find_overlaps(
    clips: Sequence[TimedClip],
    tolerance: float = 0.0,
) -> List[OverlapWarning]:
    """Report adjacent clips (by start time, per audio file) whose ranges overlap."""
    overlaps: List[OverlapWarning] = []
    for audio_file, group in group_by_audio_file(clips).items():
        ordered = sorted(group, key=lambda clip: clip.clip_begin)
        for prev, curr in zip(ordered, ordered[1:]):
            if curr.clip_begin < prev.clip_end - tolerance:
                overlaps.append(
                    OverlapWarning(audio_file=audio_file, previous=prev, current=curr)
                )
    return overlaps
