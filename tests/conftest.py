"""Shared fixtures that write SMIL, XHTML and EPUB files under tmp_path."""

import sys
import zipfile
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))


XHTML_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<html xmlns="http://www.w3.org/1999/xhtml" xmlns:epub="http://www.idpf.org/2007/ops">
<head><title>{title}</title></head>
<body>
<p>{spans}</p>
</body>
</html>
"""

PAR_TEMPLATE = """    <par id="par{idx}">
      <text src="{href}"/>
      <audio src="{audio}" clipBegin="{begin}" clipEnd="{end}"/>
    </par>
"""

SMIL_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<smil xmlns="http://www.w3.org/ns/SMIL" xmlns:epub="http://www.idpf.org/2007/ops" version="3.0">
  <body>
    <seq id="seq1" epub:textref="{textref}" epub:type="chapter">
{pars}    </seq>
  </body>
</smil>
"""

CONTAINER_XML = """<?xml version="1.0" encoding="UTF-8"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="OEBPS/content.opf" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>
"""


def build_xhtml(spans: Dict[str, str], title: str = "Chapter") -> str:
    body = " ".join(f'<span id="{span_id}">{text}</span>' for span_id, text in spans.items())
    return XHTML_TEMPLATE.format(title=title, spans=body)


def build_smil(
    clips: Sequence[Tuple[str, str, str, str]],
    textref: str = "chapter.xhtml",
) -> str:
    """Clips are (begin, end, text href, audio src) tuples."""
    pars = "".join(
        PAR_TEMPLATE.format(idx=idx, begin=begin, end=end, href=href, audio=audio)
        for idx, (begin, end, href, audio) in enumerate(clips)
    )
    return SMIL_TEMPLATE.format(textref=textref, pars=pars)


def build_opf(chapters: Iterable[str], overlays: Optional[Dict[str, str]] = None) -> str:
    """Chapters are ids of text/<id>.xhtml; overlays maps chapter id to overlay media type."""
    chapters = list(chapters)
    overlays = overlays if overlays is not None else {
        chapter: "application/smil+xml" for chapter in chapters
    }
    items: List[str] = []
    itemrefs: List[str] = []
    for chapter in chapters:
        overlay_attr = f' media-overlay="{chapter}_overlay"' if chapter in overlays else ""
        items.append(
            f'<item id="{chapter}" href="text/{chapter}.xhtml" '
            f'media-type="application/xhtml+xml"{overlay_attr}/>'
        )
        if chapter in overlays:
            items.append(
                f'<item id="{chapter}_overlay" href="smil/{chapter}.smil" '
                f'media-type="{overlays[chapter]}"/>'
            )
        itemrefs.append(f'<itemref idref="{chapter}"/>')

    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<package xmlns="http://www.idpf.org/2007/opf" version="3.0" unique-identifier="uid">\n'
        '  <metadata xmlns:dc="http://purl.org/dc/elements/1.1/">'
        "<dc:title>Test Book</dc:title></metadata>\n"
        f"  <manifest>\n    {chr(10).join(items)}\n  </manifest>\n"
        f"  <spine>\n    {chr(10).join(itemrefs)}\n  </spine>\n"
        "</package>\n"
    )


@pytest.fixture
def write_chapter(tmp_path):
    """Write chapter.xhtml and chapter.smil side by side; return the SMIL path."""

    def _write(
        spans: Dict[str, str],
        clips: Sequence[Tuple[str, str, str, str]],
        name: str = "chapter",
    ) -> Path:
        (tmp_path / f"{name}.xhtml").write_text(build_xhtml(spans), encoding="utf-8")
        smil_path = tmp_path / f"{name}.smil"
        smil_path.write_text(build_smil(clips, textref=f"{name}.xhtml"), encoding="utf-8")
        return smil_path

    return _write


@pytest.fixture
def build_epub(tmp_path):
    """Write an EPUB whose chapters each carry an XHTML document and a SMIL overlay.

    ``chapters`` maps chapter id to (spans, clips); clip hrefs and audio paths are
    relative to OEBPS/smil/.
    """

    def _build(
        chapters: Dict[str, Tuple[Dict[str, str], Sequence[Tuple[str, str, str, str]]]],
        name: str = "book.epub",
        overlays: Optional[Dict[str, str]] = None,
    ) -> Path:
        epub_path = tmp_path / name
        with zipfile.ZipFile(epub_path, "w") as archive:
            archive.writestr("mimetype", "application/epub+zip", zipfile.ZIP_STORED)
            archive.writestr("META-INF/container.xml", CONTAINER_XML)
            archive.writestr("OEBPS/content.opf", build_opf(chapters, overlays))
            for chapter, (spans, clips) in chapters.items():
                archive.writestr(
                    f"OEBPS/text/{chapter}.xhtml", build_xhtml(spans, title=chapter)
                )
                archive.writestr(
                    f"OEBPS/smil/{chapter}.smil",
                    build_smil(clips, textref=f"../text/{chapter}.xhtml"),
                )
        return epub_path

    return _build
