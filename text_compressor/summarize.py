from __future__ import annotations
import logging
import time
from dataclasses import dataclass, field
from typing import Collection, Optional, Sequence

from .compression import DefaultPathCompressor, PathCompressor
from .encoding import DefaultGraphEncoder, GraphEncoder, check_sentences
from .graphing import WordGraph
from .preprocessing import DEFAULT_STOPWORDS, Preprocessor
from .weighting import AdvancedGraphWeigher, GraphWeigher, get_weigher

logger = logging.getLogger(__name__)


@dataclass
class SummarizerConfig:
    encoder: GraphEncoder = field(default_factory=DefaultGraphEncoder)
    weigher: GraphWeigher = field(default_factory=AdvancedGraphWeigher)
    compressor: PathCompressor = field(default_factory=DefaultPathCompressor)

    def __post_init__(self):
        for name, method in (("encoder", "encode"), ("weigher", "weight"), ("compressor", "compress")):
            strategy = getattr(self, name)
            if strategy is None or not callable(getattr(strategy, method, None)):
                raise TypeError(f"'{name}' must provide a '{method}' method, "
                                f"got {type(strategy).__name__}")


class Summarizer:
    """Compresses a handful of related sentences into one via a word graph."""

    def __init__(self, config: Optional[SummarizerConfig] = None, graph: Optional[WordGraph] = None):
        self.config = config or SummarizerConfig()
        self.graph = graph if graph is not None else WordGraph()

    def process(self, sentences: Sequence[str], stop_words: Collection[str]) -> Optional[str]:
        check_sentences(sentences)
        if stop_words is None or isinstance(stop_words, str):
            raise ValueError("'stop_words' must be a collection of strings")
        if not sentences:
            return None

        elapsed = time.perf_counter()
        logger.debug("Compressing the following sentences:\n\t%s", "\n\t".join(sentences))
        self.graph.reset()
        max_length = self.config.encoder.encode(self.graph, sentences, stop_words)
        self.config.weigher.weight(self.graph)
        # no path may be as long as the longest sentence itself
        summary = self.config.compressor.compress(self.graph, max_length)
        elapsed = time.perf_counter() - elapsed
        logger.info("Compression completed in %.3f s.", elapsed)
        return summary


def summarize(sentences: Sequence[str],
              stop_words: Optional[Collection[str]] = None,
              weigher: str = "advanced",
              preprocessor: Optional[Preprocessor] = None) -> Optional[str]:
    # Pipeline glue
    config = SummarizerConfig(encoder=DefaultGraphEncoder(preprocessor),
                              weigher=get_weigher(weigher))
    stop_words = DEFAULT_STOPWORDS if stop_words is None else stop_words
    return Summarizer(config).process(sentences, stop_words)
