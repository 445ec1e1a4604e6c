from __future__ import annotations


class CompressionError(Exception):
    """Base class for failures that abort a whole `process` call."""


class GraphStoreError(CompressionError):
    """The word graph cannot be created, read or cleared."""


class PreprocessingError(CompressionError):
    """NLP resources (sentence splitter, tokenizer, tagger) are unavailable."""
