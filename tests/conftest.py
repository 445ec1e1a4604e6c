"""Shared test fixtures for the word-graph compressor."""

import re

import pytest

from text_compressor.encoding import DefaultGraphEncoder
from text_compressor.graphing import WordGraph


# ============================================================================
# Preprocessing
# ============================================================================

VERBS = {
    "sat": "VBD", "slept": "VBD", "jumped": "VBD", "visited": "VBD", "wanted": "VBD",
    "postponed": "VBD", "paid": "VBD", "visit": "VB", "runs": "VBZ", "ran": "VBD",
}
DETERMINERS = {"the": "DT", "a": "DT"}


class FakePreprocessor:
    """Deterministic stand-in for the NLTK service: regex split, lookup tagging."""

    def __init__(self):
        self.calls = 0

    def split_sentences(self, text):
        self.calls += 1
        return [p.strip() for p in re.split(r"(?<=[.!?])\s+", text.strip()) if p.strip()]

    def tokenize(self, sentence):
        return re.findall(r"[\w'-]+|[^\w\s]", sentence)

    def tag(self, tokens):
        tags = []
        for tok in tokens:
            low = tok.lower()
            if low in VERBS:
                tags.append(VERBS[low])
            elif low in DETERMINERS:
                tags.append(DETERMINERS[low])
            elif not re.search(r"\w", tok):
                tags.append(tok)
            else:
                tags.append("NN")
        return tags


@pytest.fixture
def preprocessor():
    return FakePreprocessor()


@pytest.fixture
def encoder(preprocessor):
    return DefaultGraphEncoder(preprocessor)


# ============================================================================
# Graphs
# ============================================================================

@pytest.fixture
def graph():
    return WordGraph()


@pytest.fixture
def cat_graph(graph, encoder):
    """'The cat sat.' + 'The cat slept.' with 'the' as the only stop word."""
    max_length = encoder.encode(graph, ["The cat sat.", "The cat slept."], {"the"})
    return graph, max_length
