import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .engine import MackerelSearchEngine
from .report import render_report, render_word
from .sources import SNAPSHOT_NAME, WordListSource, WordSourceError, default_cache_dir, read_word_file
from .states import load_states, read_state_csv


logger = logging.getLogger("mackerels")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="mackerels",
        description="Find words that share no letters with exactly one US state.",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    p.add_argument("--words", type=Path, help="Local word list (one word per line) instead of the cached download.")
    p.add_argument("--url", help="Word list URL (default: $MACKERELS_WORDS_URL or the public list).")
    p.add_argument("--cache-dir", type=Path, help="Snapshot directory (default: $MACKERELS_CACHE_DIR or ./.cache).")
    p.add_argument("--refresh", action="store_true", help="Re-download the word list even if a snapshot exists.")
    p.add_argument("--states-csv", type=Path, help="Read state names from the 'name' column of a CSV file.")

    sub = p.add_subparsers(dest="command")
    rep = sub.add_parser("report", help="Full mackerel report (default).")
    rep.add_argument("--top", type=int, default=0, help="Only show the top N states.")
    rep.add_argument("--json", action="store_true", help="Print the report as JSON.")
    chk = sub.add_parser("check", help="Explain individual words.")
    chk.add_argument("word", nargs="+")
    return p


def load_words(args) -> List[str]:
    if args.words:
        return read_word_file(args.words)
    cache_dir = args.cache_dir or default_cache_dir()
    with WordListSource(args.url, cache_dir / SNAPSHOT_NAME) as source:
        return source.refresh() if args.refresh else source.load()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.states_csv:
            states = load_states(read_state_csv(args.states_csv), normalize=True)
        else:
            states = load_states()

        if args.command == "check":
            engine = MackerelSearchEngine(states)
            for word in args.word:
                print(render_word(engine.explain(word), engine.overlap))
            return 0

        engine = MackerelSearchEngine.from_words(load_words(args), states)
    except (WordSourceError, ValueError, OSError) as e:
        logger.error(str(e))
        return 1

    report = engine.run()
    if getattr(args, "json", False):
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print(render_report(report, top=getattr(args, "top", 0)), end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
