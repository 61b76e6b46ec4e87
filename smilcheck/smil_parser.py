import os
from typing import Any, Callable, List, Optional

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from lxml import etree

from .errors import SmilDocumentError
from .models import TimedClip
from .timecodes import parse_time



def read_smil_document(smil_path: str) -> BeautifulSoup:
    try:
        with open(smil_path, "rb") as smil_file:
            data = smil_file.read()
    except OSError as exc:
        raise SmilDocumentError(f"Cannot read SMIL file {smil_path}: {exc}") from exc

    if not data.strip():
        raise SmilDocumentError(f"SMIL file {smil_path} is empty.")

    # BeautifulSoup recovers from broken markup; reject it before handing it over
    try:
        etree.fromstring(
            data, parser=etree.XMLParser(resolve_entities=False, no_network=True)
        )
        document = BeautifulSoup(data, "xml")
    except (etree.XMLSyntaxError, ParserRejectedMarkup) as exc:
        raise SmilDocumentError(f"Cannot parse SMIL file {smil_path}: {exc}") from exc
    if document.find() is None:
        raise SmilDocumentError(f"SMIL file {smil_path} has no XML root element.")
    return document


def _clip_from_par(par: Any, overlay_file: str, index: int) -> Optional[TimedClip]:
    audio = par.find("audio", recursive=False)
    text = par.find("text", recursive=False)
    if audio is None or text is None:
        return None

    begin_value = audio.get("clipBegin")
    end_value = audio.get("clipEnd")
    audio_src = audio.get("src")
    text_src = text.get("src")
    if begin_value is None or end_value is None or audio_src is None or text_src is None:
        return None

    clip_begin = parse_time(begin_value)
    clip_end = parse_time(end_value)
    if clip_begin is None or clip_end is None:
        return None

    return TimedClip(
        overlay_file=overlay_file,
        audio_file=audio_src,
        clip_begin=clip_begin,
        clip_end=clip_end,
        text_href=text_src,
        raw_markup=str(par),
        index=index,
    )


def extract_clips(document: BeautifulSoup, overlay_file: str) -> List[TimedClip]:
    """Return one clip per well-formed <par>, in document order."""
    clips: List[TimedClip] = []
    for par in document.find_all("par"):
        clip = _clip_from_par(par, overlay_file, len(clips))
        if clip is not None:
            clips.append(clip)
    return clips


def load_clips(
    smil_path: str,
    on_error: Optional[Callable[[SmilDocumentError], None]] = None,
) -> List[TimedClip]:
    """Clips of one SMIL file; an unreadable or malformed file yields no clips."""
    try:
        document = read_smil_document(smil_path)
    except SmilDocumentError as exc:
        if on_error is not None:
            on_error(exc)
        return []
    return extract_clips(document, os.path.basename(smil_path))
