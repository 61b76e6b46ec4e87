"""
Clip time helpers for SMIL clipBegin/clipEnd values.
"""

import math
from typing import Optional


def parse_time(value: str) -> Optional[float]:
    """
    Convert a SMIL clock value to seconds.

    Accepts plain seconds ("12.5" or "12.5s"), MM:SS and HH:MM:SS, where every
    component may be fractional.

    Returns:
        Seconds as float, or None when the value does not fit any of the forms
    """
    if value is None:
        return None

    clean = str(value).strip().replace("s", "")
    parts = clean.split(":")
    if len(parts) > 3:
        return None

    numbers = []
    for part in parts:
        try:
            number = float(part)
        except ValueError:
            return None
        if not math.isfinite(number):
            return None
        numbers.append(number)

    if len(numbers) == 1:
        return numbers[0]
    if len(numbers) == 2:
        return numbers[0] * 60 + numbers[1]
    return numbers[0] * 3600 + numbers[1] * 60 + numbers[2]


def format_time(seconds: float) -> str:
    """
    Convert seconds to HH:MM:SS.ss (hundredths are truncated).
    """
    total_hundredths = int(seconds * 100)
    hours = total_hundredths // 360000
    minutes = (total_hundredths % 360000) // 6000
    secs = (total_hundredths % 6000) // 100
    fraction = total_hundredths % 100
    return f"{hours:02d}:{minutes:02d}:{secs:02d}.{fraction:02d}"


def format_time_short(seconds: float) -> str:
    return format_time(seconds)[:-3]
