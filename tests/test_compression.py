import math

import pytest

from text_compressor.compression import DefaultPathCompressor, decode, has_verb, path_cost
from text_compressor.datatypes import END, FOLLOWS, START, WORD
from text_compressor.weighting import NaiveGraphWeigher


def _word(graph, surface, verb=False):
    return graph.create_node(WORD, tag="VBD" if verb else "NN", text=surface.lower(),
                             surface=surface, frequency=1, is_stop_word=False, is_verb=verb)


def _chain(graph, nodes, weight):
    for tail, head in zip(nodes, nodes[1:]):
        edge = graph.follows(tail, head) or graph.create_edge(tail, head, FOLLOWS, frequency=1)
        graph.set_edge(edge, "weight", weight)


@pytest.fixture
def diamond(graph):
    """START -> Dogs -> bark|howl -> loudly -> END, plus a verbless START -> Cats -> END."""
    start = graph.create_node(START, frequency=3)
    end = graph.create_node(END, frequency=3)
    dogs, bark, howl = _word(graph, "Dogs"), _word(graph, "bark", True), _word(graph, "howl", True)
    loudly, cats = _word(graph, "loudly"), _word(graph, "Cats")
    _chain(graph, [start, dogs, bark, loudly, end], 1.0)
    _chain(graph, [dogs, howl, loudly], 2.0)
    _chain(graph, [start, cats, end], 0.1)
    return graph


def test_cheapest_path_wins(diamond):
    assert DefaultPathCompressor(min_depth=1).compress(diamond, 10) == "Dogs bark loudly."


def test_rank_orders_by_cost_and_filters_verbless(diamond):
    ranked = DefaultPathCompressor(min_depth=1).rank(diamond, 10)
    assert [cp.cost for cp in ranked] == [4.0, 6.0]
    assert all(has_verb(diamond, cp.nodes) for cp in ranked)
    assert [cp.length for cp in ranked] == [4, 4]


def test_short_paths_are_discarded(diamond):
    assert DefaultPathCompressor(min_depth=5).compress(diamond, 10) is None


def test_depth_bound_limits_enumeration(diamond):
    assert DefaultPathCompressor(min_depth=1).rank(diamond, 3) == []


def test_default_minimum_depth_rejects_small_graphs(cat_graph):
    graph, _ = cat_graph
    NaiveGraphWeigher().weight(graph)
    assert DefaultPathCompressor().compress(graph, 10) is None
    # paths do exist below the minimum
    assert len(DefaultPathCompressor(min_depth=1).rank(graph, 10)) == 2


def test_word_count_bound_excludes_whole_sentences(cat_graph):
    graph, max_length = cat_graph
    NaiveGraphWeigher().weight(graph)
    assert DefaultPathCompressor(min_depth=1).rank(graph, max_length) == []


def test_infinite_costs_fall_back_to_finite_part(graph):
    start = graph.create_node(START, frequency=1)
    end = graph.create_node(END, frequency=1)
    a, b = _word(graph, "A", True), _word(graph, "B", True)
    _chain(graph, [start, a, end], math.inf)
    _chain(graph, [start, b, end], math.inf)
    graph.set_edge(graph.follows(a, end), "weight", 2.0)
    graph.set_edge(graph.follows(start, b), "weight", 1.0)
    ranked = DefaultPathCompressor(min_depth=1).rank(graph, 5)
    assert all(math.isinf(cp.cost) for cp in ranked)
    assert [cp.finite_cost for cp in ranked] == [1.0, 2.0]
    assert decode(graph, ranked[0].nodes) == "B."


def test_max_paths_caps_enumeration(diamond):
    assert len(DefaultPathCompressor(min_depth=1, max_paths=1).rank(diamond, 10)) <= 1


def test_decode_skips_terminals(diamond):
    start, end = diamond.find_one(START), diamond.find_one(END)
    assert decode(diamond, [start, end]) is None


def test_compress_is_read_only(diamond):
    before = {n: diamond.get(n, "frequency") for n in diamond.nodes()}
    DefaultPathCompressor(min_depth=1).compress(diamond, 10)
    assert {n: diamond.get(n, "frequency") for n in diamond.nodes()} == before


def test_empty_graph_has_no_summary(graph):
    assert DefaultPathCompressor().compress(graph, 10) is None


@pytest.mark.parametrize("kwargs", [{"min_depth": 0}, {"max_paths": 0}])
def test_invalid_options(kwargs):
    with pytest.raises(ValueError):
        DefaultPathCompressor(**kwargs)


def test_path_cost_sums_weights(diamond):
    start, end = diamond.find_one(START), diamond.find_one(END)
    dogs, howl, loudly = (n for n in diamond.nodes(WORD)
                          if diamond.get(n, "text") in ("dogs", "howl", "loudly"))
    cp = path_cost(diamond, [start, dogs, howl, loudly, end])
    assert (cp.cost, cp.finite_cost, cp.length) == (6.0, 6.0, 4)
    assert cp.nodes == [start, dogs, howl, loudly, end]
