"""CLI entrypoint for the era word-puzzle engine."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

from erapuzzle.core.constants import BASE_LANGUAGE, DEFAULT_GRID_SIZE, DEFAULT_MAX_ATTEMPTS
from erapuzzle.core.exceptions import PuzzleError
from erapuzzle.data.catalog import WordCatalog, load_catalog_document
from erapuzzle.data.loader import CatalogLoader, require_catalog
from erapuzzle.engine.generator import GeneratorConfig
from erapuzzle.engine.save_store import SaveStore
from erapuzzle.engine.session import create_session
from erapuzzle.io.remote import CatalogClient, is_remote
from erapuzzle.utils.logger import configure_logging
from erapuzzle.utils.pretty import pretty_print_puzzle, print_progress


def parse_catalog_args(values: List[str]) -> Dict[str, str]:
    """Turn repeated ``LANG=PATH`` flags into a mapping."""
    paths: Dict[str, str] = {}
    for value in values:
        language, sep, path = value.partition("=")
        if not sep or not language or not path:
            raise ValueError(f"Expected LANG=PATH, got {value!r}")
        paths[language.strip().lower()] = path.strip()
    return paths


def load_catalog(locations: Dict[str, str], client: CatalogClient | None = None) -> WordCatalog:
    """Read each language from a local file or an http(s) URL."""
    documents: Dict[str, Any] = {}
    for language, location in locations.items():
        if is_remote(location):
            client = client or CatalogClient()
            documents[language] = client.fetch_document(location)
        else:
            documents[language] = load_catalog_document(location)
    return WordCatalog.from_documents(documents)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate snake word grids for an era word catalog",
    )
    parser.add_argument(
        "--catalog",
        action="append",
        required=True,
        metavar="LANG=PATH",
        help="Catalog JSON file or URL for one language (repeatable; 'en' is required)",
    )
    parser.add_argument("--language", type=str, default=BASE_LANGUAGE, help="Language to play in")
    parser.add_argument("--theme", type=str, help="Era to generate (default: every unlocked era)")
    parser.add_argument("--size", type=int, default=DEFAULT_GRID_SIZE, help="Grid side length")
    parser.add_argument(
        "--attempts",
        type=int,
        default=DEFAULT_MAX_ATTEMPTS,
        help="Placement attempt budget per word",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument("--save", type=Path, help="Save file to restore from and write back to")
    parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        paths = parse_catalog_args(args.catalog)
    except ValueError as exc:
        parser.error(str(exc))
    if BASE_LANGUAGE not in paths:
        parser.error(f"--catalog {BASE_LANGUAGE}=PATH is required")

    loader = CatalogLoader(lambda: load_catalog(paths))
    loader.start()
    loader.wait()
    loader.shutdown()

    try:
        catalog = require_catalog(loader, attempts=1)
        store = SaveStore(args.save) if args.save else None
        state = store.load() if store is not None else None
        config = GeneratorConfig(size=args.size, max_attempts=args.attempts, seed=args.seed)
        session = create_session(catalog, config=config, state=state, language=args.language)
        if args.language != session.language:
            session.set_language(args.language)
    except (PuzzleError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.theme:
        themes = [args.theme]
    else:
        themes = [t for t in catalog.theme_ids if session.unlocks.is_unlocked(t)]

    payload: Dict[str, Any] = {"language": session.language, "themes": []}
    for theme in themes:
        try:
            session.select_theme(theme)
        except (KeyError, PuzzleError) as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
        entries = []
        for index, surface in enumerate(session.words()):
            puzzle = session.puzzle_for(surface)
            solved = session.is_highlighted(surface)
            entries.append(
                {
                    "index": index,
                    "word": surface,
                    "canonical": session.resolver.canonical_of(surface),
                    "solved": solved,
                    "grid": puzzle.to_jsonable() if puzzle is not None else None,
                }
            )
            if puzzle is not None and args.output is None:
                pretty_print_puzzle(puzzle, label=f"[{theme}] {surface}", highlight=solved, stream=sys.stderr)
        payload["themes"].append({"theme": theme, "words": entries})

    print_progress(catalog, session.tracker, session.language, stream=sys.stderr)

    if store is not None:
        store.save(session.to_save_state())

    output_text = json.dumps(payload, ensure_ascii=False, indent=2)
    if args.output:
        args.output.write_text(output_text, encoding="utf-8")
    else:
        print(output_text)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
