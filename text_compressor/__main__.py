from __future__ import annotations
import argparse
import logging

from .preprocessing import DEFAULT_STOPWORDS, NltkPreprocessor, PreprocessConfig
from .summarize import summarize
from .weighting import WEIGHERS

logger = logging.getLogger("text_compressor")

SENTENCES = [
    "The wife of a former U.S. president Bill Clinton, Hillary Clinton, visited China last Monday.",
    "Hillary Clinton wanted to visit China last month but postponed her plans till Monday last week.",
    "Hillary Clinton paid a visit to the People Republic of China on Monday.",
    "Last week the Secretary State Ms. Clinton visited Chinese officials.",
]


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Compress a few related sentences into one.")
    parser.add_argument("sentences", nargs="*", help="sentences to compress (default: a demo set)")
    parser.add_argument("--weigher", choices=sorted(WEIGHERS), default="advanced")
    parser.add_argument("--download", action="store_true", help="download missing NLTK data")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    preprocessor = NltkPreprocessor(PreprocessConfig(download_missing=args.download))
    summary = summarize(args.sentences or SENTENCES, DEFAULT_STOPWORDS,
                        weigher=args.weigher, preprocessor=preprocessor)
    if summary is not None:
        print(" >> " + summary)
    else:
        logger.info("No summary available.")
    logger.info("Done.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
