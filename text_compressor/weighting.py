from __future__ import annotations
import logging
import math
import time
from typing import Callable, Dict, Protocol

from .datatypes import CONTAINS, FOLLOWS, EdgeRef
from .graphing import WordGraph

logger = logging.getLogger(__name__)

_PROGRESS_EVERY = 50


class GraphWeigher(Protocol):
    def weight(self, graph: WordGraph) -> None:
        """Set the `weight` (a cost) of every FOLLOWS edge in `graph`."""
        ...


def _weigh_all(graph: WordGraph, cost: Callable[[WordGraph, EdgeRef], float]) -> int:
    if graph is None:
        raise ValueError("'graph' is None")
    total = 0
    with graph.transaction():
        elapsed = time.perf_counter()
        logger.debug("Computing weights between words...")
        for edge in graph.edges(FOLLOWS):
            graph.set_edge(edge, "weight", cost(graph, edge))
            total += 1
            if total % _PROGRESS_EVERY == 0:
                logger.debug("%d relationships analysed so far...", total)
        elapsed = time.perf_counter() - elapsed
        logger.info("%d relationship/s analysed in %.3f s.", total, elapsed)
    return total


def adjacency_evidence(graph: WordGraph, tail: int, head: int) -> float:
    """
    Sum of 1 / (q - p) over every sentence containing `tail` at position p
    and `head` at position q.
    """
    denom = 0.0
    for contains_tail in graph.in_edges(tail, CONTAINS):
        p = graph.get_edge(contains_tail, "position", 0)
        for contains_head in graph.out_edges(contains_tail.tail, CONTAINS):
            if contains_head.head != head:
                continue
            q = graph.get_edge(contains_head, "position", 0)
            if q != p:
                denom += 1.0 / (q - p)
    return denom


class AdvancedGraphWeigher:
    """
    Weights inversely proportional to how often two words appear close together
    in the same sentence, scaled down by the words' own frequencies.

    Edges whose endpoints never share a sentence (START and END edges among
    them) cost +inf.
    """

    def weight(self, graph: WordGraph) -> None:
        _weigh_all(graph, self.cost)

    @staticmethod
    def cost(graph: WordGraph, edge: EdgeRef) -> float:
        freq_tail = float(graph.get(edge.tail, "frequency", 1))
        freq_head = float(graph.get(edge.head, "frequency", 1))
        denom = adjacency_evidence(graph, edge.tail, edge.head)
        if denom == 0.0:
            return math.inf
        return ((freq_tail + freq_head) / denom) / (freq_tail * freq_head)


class NaiveGraphWeigher:
    """Weights inversely proportional to the frequency of the FOLLOWS edge."""

    def weight(self, graph: WordGraph) -> None:
        _weigh_all(graph, self.cost)

    @staticmethod
    def cost(graph: WordGraph, edge: EdgeRef) -> float:
        return 1.0 / float(graph.get_edge(edge, "frequency", 1))


WEIGHERS: Dict[str, Callable[[], GraphWeigher]] = {
    "advanced": AdvancedGraphWeigher,
    "naive": NaiveGraphWeigher,
}


def get_weigher(name: str) -> GraphWeigher:
    try:
        return WEIGHERS[name]()
    except KeyError:
        raise ValueError(f"Unknown weigher: {name}") from None
