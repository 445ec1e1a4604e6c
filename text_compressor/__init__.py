from .datatypes import Token, Context, CostPath, EdgeRef, START, END, WORD, SENTENCE, FOLLOWS, CONTAINS
from .errors import CompressionError, GraphStoreError, PreprocessingError
from .preprocessing import PreprocessConfig, NltkPreprocessor, DEFAULT_STOPWORDS, parse_tokens
from .graphing import WordGraph
from .encoding import GraphEncoder, DefaultGraphEncoder
from .weighting import GraphWeigher, AdvancedGraphWeigher, NaiveGraphWeigher, get_weigher
from .compression import PathCompressor, DefaultPathCompressor, MIN_DEPTH
from .summarize import Summarizer, SummarizerConfig, summarize
