from typing import List, Protocol

from nltk.tokenize import RegexpTokenizer
from nltk.tokenize.punkt import PunktSentenceTokenizer


WORD_PATTERN = r"\w+(?:['’\-]\w+)*"


class Tokenizer(Protocol):
    def segment_sentences(self, text: str) -> List[str]:
        ...

    def segment_words(self, text: str) -> List[str]:
        ...


class NltkTokenizer:
    """Punkt sentence splitting and regex word splitting; needs no NLTK data download."""

    def __init__(self) -> None:
        self._sentences = PunktSentenceTokenizer()
        self._words = RegexpTokenizer(WORD_PATTERN)

    def segment_sentences(self, text: str) -> List[str]:
        return [s for s in self._sentences.tokenize(text) if s.strip()]

    def segment_words(self, text: str) -> List[str]:
        return [w for w in self._words.tokenize(text) if w.strip()]
