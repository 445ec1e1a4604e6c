from __future__ import annotations
import streamlit as st
import re
import logging
import math
import pandas as pd
import numpy as np
from typing import List
import matplotlib.pyplot as plt
import networkx as nx
import io

from text_compressor.datatypes import END, FOLLOWS, SENTENCE, START, WORD
from text_compressor.compression import DefaultPathCompressor, MIN_DEPTH, decode
from text_compressor.encoding import DefaultGraphEncoder
from text_compressor.graphing import WordGraph
from text_compressor.preprocessing import DEFAULT_STOPWORDS, NltkPreprocessor, PreprocessConfig, parse_tokens
from text_compressor.summarize import Summarizer, SummarizerConfig
from text_compressor.weighting import WEIGHERS, get_weigher

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

DEFAULT_SENTENCES = """The wife of a former U.S. president Bill Clinton, Hillary Clinton, visited China last Monday.
Hillary Clinton wanted to visit China last month but postponed her plans till Monday last week.
Hillary Clinton paid a visit to the People Republic of China on Monday.
Last week the Secretary State Ms. Clinton visited Chinese officials."""

def extract_rtf_text(rtf_content):
    """Extract plain text from RTF content."""
    # Remove RTF control words and groups
    text = re.sub(r'\\[a-z]+\d*', '', rtf_content)
    text = re.sub(r'[{}]', '', text)
    text = re.sub(r'\\[^a-z]', '', text)
    return text.strip()

def extract_markdown_text(md_content):
    """Extract plain text from Markdown content."""
    text = re.sub(r'^#{1,6}\s+', '', md_content, flags=re.MULTILINE)
    text = re.sub(r'\*{1,2}(.*?)\*{1,2}', r'\1', text)
    text = re.sub(r'\[([^\]]+)\]\([^)]+\)', r'\1', text)
    text = re.sub(r'`([^`]+)`', r'\1', text)
    return text.strip()

def load_sentences_from_file(uploaded_file) -> str:
    """Load text content from uploaded file based on file type."""
    file_extension = uploaded_file.name.lower().split('.')[-1]
    content = uploaded_file.read().decode("utf-8")

    if file_extension == 'rtf':
        return extract_rtf_text(content)
    elif file_extension == 'md':
        return extract_markdown_text(content)
    else:  # txt and other formats
        return content

def split_blocks(text: str) -> List[str]:
    # one block per non-empty line
    return [line.strip() for line in text.splitlines() if line.strip()]

def draw_word_graph(graph: WordGraph, best_nodes: List[int]):
    """Draw the FOLLOWS graph, highlighting the winning path."""
    G = nx.DiGraph()
    labels = {}
    for node in graph.nodes():
        kind = graph.kind(node)
        if kind == SENTENCE:
            continue
        G.add_node(node)
        labels[node] = kind if kind in (START, END) else graph.get(node, "surface", "")

    for edge in graph.edges(FOLLOWS):
        G.add_edge(edge.tail, edge.head, frequency=graph.get_edge(edge, "frequency", 1))

    fig, ax = plt.subplots(1, 1, figsize=(14, 9))
    ax.set_title("Word Graph (FOLLOWS edges)", fontsize=14, fontweight='bold')

    if len(G.nodes) > 0:
        pos = nx.spring_layout(G, k=1.5, iterations=80, seed=42)

        colors = []
        for n in G.nodes():
            if graph.kind(n) in (START, END):
                colors.append('lightgreen')
            elif graph.get(n, "is_verb", False):
                colors.append('salmon')
            elif graph.get(n, "is_stop_word", False):
                colors.append('lightgray')
            else:
                colors.append('lightblue')
        sizes = [300 + 200 * graph.get(n, "frequency", 1) for n in G.nodes()]
        nx.draw_networkx_nodes(G, pos, ax=ax, node_color=colors, node_size=sizes, alpha=0.8)

        freqs = [d['frequency'] for _, _, d in G.edges(data=True)]
        max_freq = max(freqs) if freqs else 1
        widths = [0.5 + 2.5 * (f / max_freq) for f in freqs]
        nx.draw_networkx_edges(G, pos, ax=ax, width=widths, alpha=0.5, edge_color='gray',
                               arrows=True, arrowsize=12)

        if best_nodes:
            path_edges = list(zip(best_nodes, best_nodes[1:]))
            nx.draw_networkx_edges(G, pos, path_edges, ax=ax, width=3, alpha=0.9,
                                   edge_color='red', arrows=True, arrowsize=15)

        nx.draw_networkx_labels(G, pos, labels, ax=ax, font_size=9)

    ax.axis('off')
    plt.tight_layout()

    # Convert plot to image for Streamlit
    buf = io.BytesIO()
    plt.savefig(buf, format='png', dpi=150, bbox_inches='tight')
    buf.seek(0)
    plt.close()

    return buf

def create_sidebar_controls():
    """Create sidebar controls for parameters."""
    st.sidebar.header("Parameters")
    weigher = st.sidebar.selectbox(
        "Edge weigher",
        options=sorted(WEIGHERS),
        index=0,
        help="advanced: adjacency evidence scaled by word frequency; naive: 1 / edge frequency"
    )
    min_depth = st.sidebar.slider(
        "Minimum path length",
        min_value=1,
        max_value=20,
        value=MIN_DEPTH,
        step=1,
        help="Shorter START-END paths are discarded"
    )
    stop_words_text = st.sidebar.text_area(
        "Stop words",
        ", ".join(sorted(DEFAULT_STOPWORDS)),
        height=150,
        help="Comma-separated list of common words"
    )
    stop_words = {w.strip().lower() for w in stop_words_text.split(",") if w.strip()}

    st.sidebar.header("Debug Options")
    debug_mode = st.sidebar.checkbox("Enable Debug Mode", value=True, help="Show detailed pipeline steps")
    download = st.sidebar.checkbox("Download missing NLTK data", value=True)

    return weigher, min_depth, stop_words, debug_mode, download

def debug_pipeline(blocks: List[str], stop_words, weigher_name: str, min_depth: int, preprocessor):
    """Run the pipeline with detailed debugging information."""
    graph = WordGraph()
    encoder = DefaultGraphEncoder(preprocessor)
    weigher = get_weigher(weigher_name)
    compressor = DefaultPathCompressor(min_depth=min_depth)

    # Step 1: Pre-processing
    st.header("🔧 Step 1: Pre-processing")
    with st.expander("Pre-processing Details", expanded=True):
        st.write("**Running:** Sentence splitting, Tokenization, POS tagging")

        rows = []
        for block in blocks:
            for sentence in preprocessor.split_sentences(block):
                tokens = parse_tokens(sentence, preprocessor)
                rows.append({
                    "Sentence": sentence[:80] + "..." if len(sentence) > 80 else sentence,
                    "Words": len(tokens),
                    "Tagged": " ".join(f"{t.surface}/{t.tag}" for t in tokens),
                    "Stop Words": ", ".join(t.text for t in tokens if t.is_stop_word(stop_words)),
                })
        st.success(f"✅ Split {len(blocks)} block/s into {len(rows)} sentence/s")
        st.dataframe(pd.DataFrame(rows), use_container_width=True)

    # Step 2: Graph Encoding
    st.header("🕸️ Step 2: Word Graph Encoding")
    with st.expander("Encoding Details", expanded=True):
        with st.spinner("Building word graph..."):
            max_length = encoder.encode(graph, blocks, stop_words)

        stats = graph.stats()
        st.success(f"✅ Created {stats['word']} word nodes and {stats['follows']} FOLLOWS edges")

        col1, col2, col3 = st.columns(3)
        with col1:
            st.metric("Sentences", stats['sentence'])
            st.metric("Longest Sentence", max_length)
        with col2:
            st.metric("Word Nodes", stats['word'])
            st.metric("FOLLOWS Edges", stats['follows'])
        with col3:
            st.metric("CONTAINS Edges", stats['contains'])
            merged = sum(1 for n in graph.nodes(WORD) if graph.get(n, "frequency", 1) > 1)
            st.metric("Merged Words", merged)

        words_data = []
        for n in graph.nodes(WORD):
            words_data.append({
                "Node": n,
                "Word": graph.get(n, "surface"),
                "Tag": graph.get(n, "tag"),
                "Frequency": graph.get(n, "frequency"),
                "Stop Word": "✅" if graph.get(n, "is_stop_word") else "",
                "Verb": "✅" if graph.get(n, "is_verb") else "",
            })
        st.dataframe(pd.DataFrame(words_data), use_container_width=True)

    # Step 3: Edge Weighting
    st.header("⚖️ Step 3: Edge Weighting")
    with st.expander("Weighting Details", expanded=True):
        st.write(f"**Running:** {type(weigher).__name__}")
        weigher.weight(graph)

        def _label(node):
            return graph.kind(node) if graph.kind(node) in (START, END) else graph.get(node, "surface")

        edges_data = []
        for edge in graph.edges(FOLLOWS):
            edges_data.append({
                "From": _label(edge.tail),
                "To": _label(edge.head),
                "Frequency": graph.get_edge(edge, "frequency"),
                "Weight": graph.get_edge(edge, "weight"),
            })
        edges_df = pd.DataFrame(edges_data)
        st.dataframe(edges_df, use_container_width=True)

        finite = np.array([w for w in edges_df["Weight"] if math.isfinite(w)]) if len(edges_df) else np.array([])
        col1, col2, col3 = st.columns(3)
        with col1:
            st.metric("Infinite Weights", int(len(edges_df) - len(finite)))
        with col2:
            st.metric("Mean Finite Weight", f"{finite.mean():.3f}" if finite.size else "-")
        with col3:
            st.metric("Std Finite Weight", f"{finite.std():.3f}" if finite.size else "-")

    # Step 4: Path Ranking
    st.header("🛤️ Step 4: Path Ranking")
    with st.expander("Path Ranking Details", expanded=True):
        st.write(f"**Running:** All START-END paths up to {max_length} edges, "
                 f"at least {min_depth} edges long and containing a verb")
        with st.spinner("Enumerating paths..."):
            ranked = compressor.rank(graph, max_length)

        st.success(f"✅ Found {len(ranked)} qualifying path/s")
        paths_data = []
        for i, cp in enumerate(ranked[:20]):
            paths_data.append({
                "Rank": i + 1,
                "Length": cp.length,
                "Cost": cp.cost,
                "Finite Cost": f"{cp.finite_cost:.3f}",
                "Sentence": decode(graph, cp.nodes),
            })
        if paths_data:
            st.dataframe(pd.DataFrame(paths_data), use_container_width=True)
        else:
            st.warning("No path qualifies - no summary available")

        if len(graph) <= 150:
            try:
                with st.spinner("Generating graph visualization..."):
                    image = draw_word_graph(graph, ranked[0].nodes if ranked else [])
                st.image(image, caption="Word graph; the selected path is drawn in red", use_column_width=True)
            except Exception as e:
                st.error(f"Could not generate graph visualization: {str(e)}")
        else:
            st.info(f"📊 Graph too large to visualize ({len(graph)} nodes).")

    return decode(graph, ranked[0].nodes) if ranked else None

def main():
    st.title("Word-graph Sentence Compressor")
    st.write("Enter a few sentences about the same event (one per line) to fuse them into a single sentence")

    weigher, min_depth, stop_words, debug_mode, download = create_sidebar_controls()

    uploaded_file = st.file_uploader(
        "Or choose a text file",
        type=['txt', 'rtf', 'md'],
        help="One sentence per line (supports .txt, .rtf, .md formats)"
    )
    text = load_sentences_from_file(uploaded_file) if uploaded_file is not None else DEFAULT_SENTENCES
    text = st.text_area("Sentences", text, height=200)
    blocks = split_blocks(text)

    if st.button("Compress", type="primary"):
        if not blocks:
            st.warning("Please enter at least one sentence")
            return
        preprocessor = NltkPreprocessor(PreprocessConfig(download_missing=download))
        try:
            if debug_mode:
                st.markdown("---")
                st.title("🔍 Pipeline Debug Mode")
                result = debug_pipeline(blocks, stop_words, weigher, min_depth, preprocessor)
            else:
                with st.spinner("Compressing..."):
                    config = SummarizerConfig(encoder=DefaultGraphEncoder(preprocessor),
                                              weigher=get_weigher(weigher),
                                              compressor=DefaultPathCompressor(min_depth=min_depth))
                    result = Summarizer(config).process(blocks, stop_words)

            st.markdown("---")
            st.header("📋 Compressed Sentence")
            if result is None:
                st.info("No summary available.")
            else:
                st.text_area("Summary", result, height=80, disabled=True)
                col1, col2 = st.columns(2)
                with col1:
                    st.metric("Input Words", sum(len(b.split()) for b in blocks))
                with col2:
                    st.metric("Summary Words", len(result.split()))

        except Exception as e:
            st.error(f"Error compressing sentences: {str(e)}")
            st.exception(e)

if __name__ == "__main__":
    main()
