from __future__ import annotations
import logging
import time
from collections import defaultdict
from typing import Collection, Dict, List, Optional, Protocol, Sequence, Set

from .datatypes import CONTAINS, END, FOLLOWS, SENTENCE, START, WORD, Context, EdgeRef, Token
from .graphing import WordGraph
from .preprocessing import NltkPreprocessor, Preprocessor, parse_tokens

logger = logging.getLogger(__name__)

# how many words around a token (and how deep along FOLLOWS) make up its context
CONTEXT_DISTANCE = 3

PRECEDING = "preceding"
FOLLOWING = "following"


class GraphEncoder(Protocol):
    def encode(self, graph: WordGraph, sentences: Sequence[str], stop_words: Collection[str]) -> int:
        """Encode `sentences` into `graph`; return the word count of the longest sentence."""
        ...


def terminal(graph: WordGraph, kind: str) -> int:
    """Return the START or END node, bumping its frequency, or create it with frequency 1."""
    if kind not in (START, END):
        raise ValueError(f"Not a terminal kind: {kind}")
    node = graph.find_one(kind)
    if node is None:
        return graph.create_node(kind, frequency=1)
    graph.set(node, "frequency", graph.get(node, "frequency", 0) + 1)
    return node


def link(graph: WordGraph, tail: int, head: int) -> EdgeRef:
    """Create the FOLLOWS edge tail -> head with frequency 1, or bump the existing one."""
    edge = graph.follows(tail, head)
    if edge is None:
        return graph.create_edge(tail, head, FOLLOWS, frequency=1)
    graph.set_edge(edge, "frequency", graph.get_edge(edge, "frequency", 0) + 1)
    return edge


def create_word(graph: WordGraph, token: Token, stop_word: bool) -> int:
    return graph.create_node(WORD, tag=token.tag, text=token.text, surface=token.surface,
                             frequency=1, is_stop_word=stop_word, is_verb=token.is_verb)


def texts_from_tokens(tokens: Sequence[Token], pos: int, direction: str,
                      distance: int = CONTEXT_DISTANCE) -> Set[str]:
    if direction == PRECEDING:
        window = tokens[max(0, pos - distance):pos]
    else:
        window = tokens[pos + 1:pos + 1 + distance]
    return {t.text for t in window}


def texts_from_node(graph: WordGraph, node: int, direction: str,
                    distance: int = CONTEXT_DISTANCE) -> Dict[str, float]:
    """
    Word texts reachable from `node` within `distance` FOLLOWS hops in one direction,
    mapped to the summed frequencies of the nodes met along every path.
    Terminal nodes carry no text and stop the walk.
    """
    result: Dict[str, float] = defaultdict(float)
    if distance <= 0:
        return result
    if direction == PRECEDING:
        neighbours = [e.tail for e in graph.in_edges(node, FOLLOWS)]
    else:
        neighbours = [e.head for e in graph.out_edges(node, FOLLOWS)]
    for other in neighbours:
        text = graph.get(other, "text", "")
        if not text:
            continue
        result[text] += graph.get(other, "frequency", 1)
        if distance > 1:
            for deeper, freq in texts_from_node(graph, other, direction, distance - 1).items():
                result[deeper] += freq
    return result


def context_of(graph: WordGraph, tokens: Sequence[Token], pos: int, node: int) -> Context:
    context = Context(node=node)
    for direction in (PRECEDING, FOLLOWING):
        texts = texts_from_tokens(tokens, pos, direction)
        if not texts:
            continue
        freq_texts = texts_from_node(graph, node, direction)
        common = freq_texts.keys() & texts
        context.matches += len(common)
        context.occurrences += sum(freq_texts[t] for t in common)
    return context


def _best(contexts: List[Context]) -> Context:
    # equal scores: the earliest created node wins
    return max(contexts, key=Context.rank_key)


class DefaultGraphEncoder:
    """
    Encodes sentences as a word graph, merging repeated words into shared nodes.

    Content words join the best-matching existing node for their (tag, text)
    whatever the context; stop words only join a node whose neighbourhood
    overlaps their own, otherwise they get a fresh node.
    """

    def __init__(self, preprocessor: Optional[Preprocessor] = None):
        self.preprocessor = preprocessor if preprocessor is not None else NltkPreprocessor()

    def encode(self, graph: WordGraph, sentences: Sequence[str], stop_words: Collection[str]) -> int:
        if graph is None:
            raise ValueError("'graph' is None")
        check_sentences(sentences)
        if stop_words is None:
            raise ValueError("'stop_words' is None")
        stop_words = frozenset(stop_words)

        max_length = 0
        with graph.transaction():
            elapsed = time.perf_counter()
            logger.debug("Starting encoding...")
            sid = 0
            for content in sentences:
                for sentence in self.preprocessor.split_sentences(content):
                    tokens = parse_tokens(sentence, self.preprocessor)
                    logger.debug("Encoding sentence #%d (%d word/s; punctuation is ignored)...",
                                 sid, len(tokens))
                    self.encode_sentence(graph, sid, tokens, stop_words)
                    max_length = max(max_length, len(tokens))
                    sid += 1
            elapsed = time.perf_counter() - elapsed
            logger.info("Word graph generated in %.3f s (%d sentence/s).", elapsed, sid)
        return max_length

    def encode_sentence(self, graph: WordGraph, sid: int, tokens: Sequence[Token],
                        stop_words: Collection[str]) -> int:
        parent = graph.create_node(SENTENCE, id=sid, length=len(tokens))
        previous = terminal(graph, START)
        for pos, token in enumerate(tokens):
            if token.is_stop_word(stop_words):
                current = self.get_stop_word(graph, tokens, pos)
            else:
                current = self.get_word(graph, tokens, pos)
            graph.create_edge(parent, current, CONTAINS, position=pos)
            link(graph, previous, current)
            previous = current
        link(graph, previous, terminal(graph, END))
        return parent

    def get_stop_word(self, graph: WordGraph, tokens: Sequence[Token], pos: int) -> int:
        token = tokens[pos]
        contexts = [context_of(graph, tokens, pos, node) for node in graph.words(token.tag, token.text)]
        contexts = [c for c in contexts if not c.is_empty()]
        if not contexts:
            return create_word(graph, token, True)
        return _merge(graph, _best(contexts).node)

    def get_word(self, graph: WordGraph, tokens: Sequence[Token], pos: int) -> int:
        token = tokens[pos]
        candidates = graph.words(token.tag, token.text)
        if not candidates:
            return create_word(graph, token, False)
        contexts = [context_of(graph, tokens, pos, node) for node in candidates]
        return _merge(graph, _best(contexts).node)


def _merge(graph: WordGraph, node: int) -> int:
    graph.set(node, "frequency", graph.get(node, "frequency", 1) + 1)
    return node


def check_sentences(sentences: Sequence[str]) -> None:
    if not isinstance(sentences, (list, tuple)):
        raise ValueError("'sentences' must be a sequence of strings")
    for i, s in enumerate(sentences):
        if not isinstance(s, str):
            raise ValueError(f"sentence #{i} is not a string: {type(s).__name__}")
        if not s.strip():
            raise ValueError(f"sentence #{i} is empty")
