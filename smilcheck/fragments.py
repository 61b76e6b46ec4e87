import os
import urllib.parse
from typing import Dict, Optional, Tuple

from bs4 import BeautifulSoup

from .events import EventEmitter


def split_fragment(href: str) -> Optional[Tuple[str, str]]:
    if "#" not in href:
        return None
    file_part, fragment = href.split("#", 1)
    return file_part, fragment


class FragmentResolver:
    """Resolve text hrefs of one SMIL file, caching each parsed text document."""

    def __init__(self, base_dir: str, events: Optional[EventEmitter] = None):
        self.base_dir = base_dir
        self.events = events
        self._documents: Dict[str, Optional[BeautifulSoup]] = {}

    @property
    def cached_documents(self) -> int:
        return sum(1 for document in self._documents.values() if document is not None)

    def _document_for(self, file_part: str) -> Optional[BeautifulSoup]:
        path = os.path.normpath(
            os.path.join(self.base_dir, urllib.parse.unquote(file_part))
        )
        if path in self._documents:
            return self._documents[path]

        try:
            with open(path, "rb") as text_file:
                document: Optional[BeautifulSoup] = BeautifulSoup(
                    text_file.read(), "html.parser"
                )
        except OSError as exc:
            document = None
            if self.events is not None:
                self.events.warn(f"Cannot read text document {path}: {exc}")

        self._documents[path] = document
        return document

    def text_for_fragment(self, href: str) -> str:
        parts = split_fragment(href)
        if parts is None:
            return ""

        file_part, fragment = parts
        document = self._document_for(file_part)
        if document is None:
            return ""

        node = document.find(id=urllib.parse.unquote(fragment))
        if node is None:
            return ""
        return node.get_text()
