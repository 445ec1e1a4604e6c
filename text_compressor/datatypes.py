from __future__ import annotations
from dataclasses import dataclass
from typing import Collection, List, NamedTuple, Tuple

# node kinds
START = "START"
END = "END"
WORD = "WORD"
SENTENCE = "SENTENCE"

# edge kinds
FOLLOWS = "FOLLOWS"
CONTAINS = "CONTAINS"

NODE_KINDS = (START, END, WORD, SENTENCE)
EDGE_KINDS = (FOLLOWS, CONTAINS)


class EdgeRef(NamedTuple):
    tail: int
    head: int
    key: int


@dataclass(frozen=True)
class Token:
    text: str     # lowercased
    surface: str  # as written
    tag: str      # POS tag

    @classmethod
    def parse(cls, surface: str, tag: str) -> "Token":
        if surface is None or not surface.strip():
            raise ValueError("'token' is empty")
        if tag is None or not tag.strip():
            raise ValueError("'tag' is empty")
        surface = surface.strip()
        return cls(text=surface.lower(), surface=surface, tag=tag.strip())

    @property
    def is_verb(self) -> bool:
        return self.tag.startswith("VB")

    def is_stop_word(self, stop_words: Collection[str]) -> bool:
        return self.text in stop_words


@dataclass
class Context:
    """Similarity between a token's neighbourhood and a candidate WORD node."""
    node: int
    matches: int = 0
    occurrences: float = 0.0

    def is_empty(self) -> bool:
        return self.matches <= 0

    def rank_key(self) -> Tuple[int, float]:
        return (self.matches, self.occurrences)


@dataclass
class CostPath:
    nodes: List[int]
    cost: float
    finite_cost: float = 0.0

    @property
    def length(self) -> int:
        return len(self.nodes) - 1

    def rank_key(self) -> Tuple[float, float, int]:
        return (self.cost, self.finite_cost, self.length)
