from __future__ import annotations
import itertools
import logging
import math
import time
from typing import List, Optional, Protocol, Sequence

import networkx as nx

from .datatypes import END, START, CostPath
from .graphing import WordGraph

logger = logging.getLogger(__name__)

# paths shorter than this (in edges) are almost never full sentences
MIN_DEPTH = 8


class PathCompressor(Protocol):
    def compress(self, graph: WordGraph, max_depth: int) -> Optional[str]:
        """Return the sentence that best summarises `graph`, if any."""
        ...


def has_verb(graph: WordGraph, nodes: Sequence[int]) -> bool:
    return any(graph.get(n, "is_verb", False) for n in nodes)


def decode(graph: WordGraph, nodes: Sequence[int]) -> Optional[str]:
    """Join the surface forms along a path; terminals contribute nothing."""
    words = [graph.get(n, "surface", "") for n in nodes]
    sentence = " ".join(w for w in words if w).strip()
    if not sentence:
        return None
    return sentence + "."


def path_cost(graph: WordGraph, nodes: Sequence[int]) -> CostPath:
    cost = 0.0
    finite_cost = 0.0
    for tail, head in zip(nodes, nodes[1:]):
        edge = graph.follows(tail, head)
        weight = float(graph.get_edge(edge, "weight", 1.0))
        cost += weight
        if math.isfinite(weight):
            finite_cost += weight
    return CostPath(nodes=list(nodes), cost=cost, finite_cost=finite_cost)


class DefaultPathCompressor:
    """
    Picks the cheapest START -> END path over FOLLOWS edges.

    Paths longer than `max_depth` edges are never enumerated; paths shorter
    than `min_depth` edges or without a verb are discarded. Equal costs are
    settled by the finite part of the cost (START/END edges are often
    infinite), then by length, then by enumeration order. `max_paths` caps
    how many paths are enumerated at all.
    """

    def __init__(self, min_depth: int = MIN_DEPTH, max_paths: Optional[int] = None):
        if min_depth < 1:
            raise ValueError("'min_depth' must be positive")
        if max_paths is not None and max_paths < 1:
            raise ValueError("'max_paths' must be positive")
        self.min_depth = min_depth
        self.max_paths = max_paths

    def rank(self, graph: WordGraph, max_depth: int) -> List[CostPath]:
        """All qualifying paths, cheapest first."""
        if graph is None:
            raise ValueError("'graph' is None")
        if max_depth < 0:
            raise ValueError("'max_depth' must not be negative")
        start, end = graph.find_one(START), graph.find_one(END)
        if start is None or end is None:
            return []

        elapsed = time.perf_counter()
        logger.debug("Computing all the paths between START and END nodes and their costs...")
        paths = nx.all_simple_paths(graph.follows_view(), start, end, cutoff=max_depth)
        if self.max_paths is not None:
            paths = itertools.islice(paths, self.max_paths)
        total = 0
        valid: List[CostPath] = []
        for nodes in paths:
            total += 1
            if len(nodes) - 1 >= self.min_depth and has_verb(graph, nodes):
                valid.append(path_cost(graph, nodes))
        valid.sort(key=CostPath.rank_key)
        elapsed = time.perf_counter() - elapsed
        logger.info("%d valid path/s found (out of %d possible) in %.3f s.",
                    len(valid), total, elapsed)
        return valid

    def compress(self, graph: WordGraph, max_depth: int) -> Optional[str]:
        ranked = self.rank(graph, max_depth)
        if not ranked:
            return None
        logger.debug("Generating the compressive summary")
        return decode(graph, ranked[0].nodes)
