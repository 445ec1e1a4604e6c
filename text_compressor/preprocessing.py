from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Tuple

import nltk

from .datatypes import Token
from .errors import PreprocessingError

logger = logging.getLogger(__name__)

# a symbol is a word if it has at least one letter, digit, apostrophe or hyphen
_WORD_RE = re.compile(r"[^\W_]|['-]")

# (resource path, download id) alternatives; newer NLTK releases renamed both
_RESOURCES: Tuple[Tuple[Tuple[str, str], ...], ...] = (
    (("tokenizers/punkt_tab", "punkt_tab"), ("tokenizers/punkt", "punkt")),
    (("taggers/averaged_perceptron_tagger_eng", "averaged_perceptron_tagger_eng"),
     ("taggers/averaged_perceptron_tagger", "averaged_perceptron_tagger")),
)

DEFAULT_STOPWORDS = frozenset({
    'a', 'able', 'about', 'above', 'after', 'all', 'also', 'an', 'and', 'any', 'as', 'ask', 'at',
    'back', 'bad', 'be', 'because', 'beneath', 'big', 'but', 'by', 'call', 'can', 'case', 'child',
    'come', 'company', 'could', 'day', 'different', 'do', 'early', 'even', 'eye', 'fact', 'feel',
    'few', 'find', 'first', 'for', 'from', 'get', 'give', 'go', 'good', 'government', 'great',
    'group', 'hand', 'have', 'he', 'her', 'high', 'him', 'his', 'how', 'i', 'if', 'important', 'in',
    'into', 'it', 'its', 'just', 'know', 'large', 'last', 'leave', 'life', 'like', 'little', 'long',
    'look', 'make', 'man', 'me', 'most', 'my', 'new', 'next', 'no', 'not', 'now', 'number', 'of',
    'old', 'on', 'one', 'only', 'or', 'other', 'our', 'out', 'over', 'own', 'part', 'people',
    'person', 'place', 'point', 'problem', 'public', 'right', 'same', 'say', 'see', 'seem', 'she',
    'small', 'so', 'some', 'take', 'tell', 'than', 'that', 'the', 'their', 'them', 'then', 'there',
    'these', 'they', 'thing', 'think', 'this', 'time', 'to', 'try', 'two', 'under', 'up', 'us',
    'use', 'want', 'way', 'we', 'week', 'well', 'what', 'when', 'which', 'who', 'will', 'with',
    'woman', 'work', 'world', 'would', 'year', 'you', 'young', 'your',
})


@dataclass
class PreprocessConfig:
    language: str = "english"
    use_punkt: bool = True          # False: split on . ! ? followed by whitespace
    download_missing: bool = False  # fetch missing NLTK data instead of failing


class Preprocessor(Protocol):
    def split_sentences(self, text: str) -> List[str]: ...

    def tokenize(self, sentence: str) -> List[str]: ...

    def tag(self, tokens: Sequence[str]) -> List[str]: ...


def split_sentences(text: str) -> List[str]:
    # Split on . ! ? while keeping order; naive but serviceable
    parts = re.split(r"(?<=[.!?])\s+", text.strip())
    return [p.strip() for p in parts if p.strip()]


class NltkPreprocessor:
    """
    Sentence splitting, tokenization and Penn Treebank POS tagging with NLTK.

    Resources are looked up once, the first time any method is used. A missing
    resource is a fatal `PreprocessingError` unless `download_missing` is set.
    """

    def __init__(self, cfg: Optional[PreprocessConfig] = None):
        self.cfg = cfg or PreprocessConfig()
        self._ready = False

    def _ensure_resources(self) -> None:
        if self._ready:
            return
        for alternatives in _RESOURCES:
            if any(_has_resource(path) for path, _ in alternatives):
                continue
            path, package = alternatives[0]
            if not self.cfg.download_missing:
                raise PreprocessingError(
                    f"NLTK resource '{path}' not found. Run: python -m nltk.downloader {package}")
            logger.info("Downloading NLTK resource '%s'...", package)
            if not nltk.download(package, quiet=True):
                raise PreprocessingError(f"NLTK resource '{package}' could not be downloaded")
        self._ready = True
        logger.info("NLTK sentence splitter, tokenizer and POS tagger initialised")

    def split_sentences(self, text: str) -> List[str]:
        if not self.cfg.use_punkt:
            return split_sentences(text)
        self._ensure_resources()
        return [s.strip() for s in nltk.sent_tokenize(text, language=self.cfg.language) if s.strip()]

    def tokenize(self, sentence: str) -> List[str]:
        self._ensure_resources()
        return nltk.word_tokenize(sentence, language=self.cfg.language, preserve_line=True)

    def tag(self, tokens: Sequence[str]) -> List[str]:
        self._ensure_resources()
        return [tag for _, tag in nltk.pos_tag(list(tokens))]


def _has_resource(path: str) -> bool:
    try:
        nltk.data.find(path)
    except LookupError:
        return False
    return True


def is_word(symbol: str) -> bool:
    if symbol is None or not symbol.strip():
        raise ValueError("'symbol' is empty")
    return _WORD_RE.search(symbol.strip()) is not None


def parse_tokens(sentence: str, preprocessor: Preprocessor) -> List[Token]:
    """Tokenize and tag one sentence, keeping only word symbols."""
    if sentence is None or not sentence.strip():
        raise ValueError("'sentence' is empty")
    symbols = preprocessor.tokenize(sentence.strip())
    tags = preprocessor.tag(symbols)
    if len(tags) != len(symbols):
        raise ValueError(f"tagger returned {len(tags)} tag/s for {len(symbols)} token/s")
    return [Token.parse(sym, tag) for sym, tag in zip(symbols, tags)
            if sym.strip() and is_word(sym)]
