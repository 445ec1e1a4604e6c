from __future__ import annotations
import logging
from collections import defaultdict
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

import networkx as nx

from .datatypes import (CONTAINS, EDGE_KINDS, END, FOLLOWS, NODE_KINDS, SENTENCE, START,
                        WORD, EdgeRef)
from .errors import GraphStoreError

logger = logging.getLogger(__name__)

_SCALARS = (bool, int, float, str)


def _check_props(props: Dict[str, Any]) -> None:
    for name, value in props.items():
        if not isinstance(value, _SCALARS):
            raise ValueError(f"property '{name}' must be a number, a string or a boolean, "
                             f"got {type(value).__name__}")


class WordGraph:
    """
    In-memory property graph holding one word graph.

    Nodes carry a `kind` (START, END, WORD, SENTENCE) and scalar properties;
    edges carry a `kind` (FOLLOWS, CONTAINS) and scalar properties. WORD nodes
    are indexed by (tag, text). All mutations of one pipeline phase should
    happen inside `transaction()` so that a failing phase leaves no trace.
    """

    def __init__(self):
        self._g = nx.MultiDiGraph()
        self._next_id = 0
        self._words: Dict[Tuple[str, str], List[int]] = defaultdict(list)
        self._tx_depth = 0

    # ---- lifecycle -------------------------------------------------------

    def reset(self) -> None:
        if self._tx_depth:
            raise GraphStoreError("graph can't be cleared inside a transaction")
        self._g.clear()
        self._words.clear()
        self._next_id = 0
        logger.debug("Word graph cleared")

    @contextmanager
    def transaction(self) -> Iterator["WordGraph"]:
        if self._tx_depth:
            # nested: join the outer transaction
            self._tx_depth += 1
            try:
                yield self
            finally:
                self._tx_depth -= 1
            return

        snapshot = (self._g.copy(), self._next_id, {k: list(v) for k, v in self._words.items()})
        self._tx_depth = 1
        try:
            yield self
        except BaseException:
            self._g, self._next_id, words = snapshot
            self._words = defaultdict(list, words)
            logger.debug("Transaction rolled back")
            raise
        finally:
            self._tx_depth = 0

    # ---- nodes -----------------------------------------------------------

    def create_node(self, kind: str, **props: Any) -> int:
        if kind not in NODE_KINDS:
            raise ValueError(f"Unknown node kind: {kind}")
        _check_props(props)
        if kind == WORD and not (props.get("tag") and props.get("text")):
            raise ValueError("WORD nodes need a non-empty 'tag' and 'text'")
        node = self._next_id
        self._next_id += 1
        self._g.add_node(node, kind=kind, **props)
        if kind == WORD:
            self._words[(props["tag"], props["text"])].append(node)
        return node

    def kind(self, node: int) -> str:
        return self._attrs(node)["kind"]

    def get(self, node: int, prop: str, default: Any = None) -> Any:
        return self._attrs(node).get(prop, default)

    def set(self, node: int, prop: str, value: Any) -> None:
        if prop in ("kind", "tag", "text"):
            raise ValueError(f"property '{prop}' is read-only")
        _check_props({prop: value})
        self._attrs(node)[prop] = value

    def words(self, tag: str, text: str) -> List[int]:
        """WORD nodes sharing (tag, text), in creation order."""
        return list(self._words.get((tag, text), ()))

    def find_nodes(self, kind: str, **props: Any) -> List[int]:
        return [n for n, d in self._g.nodes(data=True)
                if d["kind"] == kind and all(d.get(k) == v for k, v in props.items())]

    def find_one(self, kind: str) -> Optional[int]:
        nodes = self.find_nodes(kind)
        return nodes[0] if nodes else None

    def count(self, kind: str) -> int:
        return sum(1 for _, k in self._g.nodes(data="kind") if k == kind)

    def nodes(self, kind: Optional[str] = None) -> List[int]:
        if kind is None:
            return list(self._g.nodes)
        return self.find_nodes(kind)

    def _attrs(self, node: int) -> Dict[str, Any]:
        try:
            return self._g.nodes[node]
        except KeyError:
            raise GraphStoreError(f"node {node} does not exist") from None

    # ---- edges -----------------------------------------------------------

    def create_edge(self, tail: int, head: int, kind: str, **props: Any) -> EdgeRef:
        if kind not in EDGE_KINDS:
            raise ValueError(f"Unknown edge kind: {kind}")
        for node in (tail, head):
            if node not in self._g:
                raise GraphStoreError(f"node {node} does not exist")
        _check_props(props)
        key = self._g.add_edge(tail, head, kind=kind, **props)
        return EdgeRef(tail, head, key)

    def get_edge(self, edge: EdgeRef, prop: str, default: Any = None) -> Any:
        return self._edge_attrs(edge).get(prop, default)

    def set_edge(self, edge: EdgeRef, prop: str, value: Any) -> None:
        if prop == "kind":
            raise ValueError("property 'kind' is read-only")
        _check_props({prop: value})
        self._edge_attrs(edge)[prop] = value

    def edges(self, kind: str) -> List[EdgeRef]:
        return [EdgeRef(u, v, k) for u, v, k, d in self._g.edges(keys=True, data="kind")
                if d == kind]

    def out_edges(self, node: int, kind: str) -> List[EdgeRef]:
        self._attrs(node)
        return [EdgeRef(u, v, k) for u, v, k, d in self._g.out_edges(node, keys=True, data="kind")
                if d == kind]

    def in_edges(self, node: int, kind: str) -> List[EdgeRef]:
        self._attrs(node)
        return [EdgeRef(u, v, k) for u, v, k, d in self._g.in_edges(node, keys=True, data="kind")
                if d == kind]

    def follows(self, tail: int, head: int) -> Optional[EdgeRef]:
        """The FOLLOWS edge tail -> head, if any (there is at most one)."""
        for key, data in self._g.get_edge_data(tail, head, default={}).items():
            if data["kind"] == FOLLOWS:
                return EdgeRef(tail, head, key)
        return None

    def follows_view(self) -> nx.MultiDiGraph:
        """Read-only view of the graph restricted to FOLLOWS edges."""
        g = self._g
        return nx.subgraph_view(g, filter_edge=lambda u, v, k: g.edges[u, v, k]["kind"] == FOLLOWS)

    def _edge_attrs(self, edge: EdgeRef) -> Dict[str, Any]:
        try:
            return self._g.edges[edge.tail, edge.head, edge.key]
        except KeyError:
            raise GraphStoreError(f"edge {edge} does not exist") from None

    # ---- introspection ---------------------------------------------------

    def stats(self) -> Dict[str, int]:
        out = {kind.lower(): self.count(kind) for kind in (START, END, WORD, SENTENCE)}
        for kind in (FOLLOWS, CONTAINS):
            out[kind.lower()] = len(self.edges(kind))
        return out

    def __len__(self) -> int:
        return self._g.number_of_nodes()
