import argparse
import dataclasses
import json
import logging
from pathlib import Path
from typing import List, Optional

import colorlog
import polars as pl
import yaml

from pinyin_search.config import DEFAULT_CONFIG_PATH, load_search_options
from pinyin_search.core.models import SearchOptions
from pinyin_search.highlight import colorize_text_with_ranges, highlight_text_with_ranges
from pinyin_search.mapping import build_boundary_mapping
from pinyin_search.search import filter_labels, search

try:
    # Prefer package-defined version
    from pinyin_search import __version__ as _PACKAGE_VERSION
except ImportError:  # pragma: no cover - defensive fallback
    _PACKAGE_VERSION = None  # type: ignore[assignment]
    try:
        # Fallback to installed package metadata
        from importlib.metadata import version as _pkg_version, PackageNotFoundError

        _PACKAGE_VERSION = _pkg_version("pinyin-search")  # type: ignore[assignment]
    except PackageNotFoundError:
        _PACKAGE_VERSION = "unknown"  # type: ignore[assignment]

TABULAR_SUFFIXES = {".csv", ".parquet"}


def setup_logging(
    verbose: bool = False, warnings_only: bool = False, errors_only: bool = False
) -> None:
    logger = logging.getLogger()
    for h in list(logger.handlers):
        logger.removeHandler(h)
    log_format = (
        "%(asctime)s:%(levelname)s:%(name)s in %(filename)s:%(funcName)s:%(lineno)d: %(message)s"
    )
    log_colors = {
        "DEBUG": "cyan",
        "INFO": "green",
        "WARNING": "yellow",
        "ERROR": "red",
        "CRITICAL": "bold_red",
    }
    stream_handler = colorlog.StreamHandler()
    formatter = colorlog.ColoredFormatter(f"%(log_color)s{log_format}", log_colors=log_colors)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)
    if errors_only:
        logger.setLevel(logging.ERROR)
    elif warnings_only:
        logger.setLevel(logging.WARNING)
    else:
        logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def _resolve_options(args: argparse.Namespace) -> Optional[SearchOptions]:
    """Load options from --config (or the default file) and apply flag overrides.

    Returns None after logging when the config cannot be used.
    """
    config_arg = getattr(args, "config", None)
    config_path = Path(config_arg) if config_arg else DEFAULT_CONFIG_PATH
    options = SearchOptions()
    if config_arg or config_path.exists():
        try:
            options = load_search_options(config_path)
        except (FileNotFoundError, yaml.YAMLError, ValueError) as e:
            logging.error("Failed to load search config %s: %s", config_path, e)
            return None
        logging.debug("Loaded search options from %s: %s", config_path, options)

    overrides = {}
    if getattr(args, "strict_case", False):
        overrides["strict_case"] = True
    if getattr(args, "merge_spaces", False):
        overrides["merge_spaces"] = True
    if getattr(args, "consecutive", False):
        overrides["is_char_consecutive"] = True
    if getattr(args, "strictness", None) is not None:
        overrides["strictness_coefficient"] = args.strictness
    try:
        return dataclasses.replace(options, **overrides)
    except ValueError as e:
        logging.error("Invalid search options: %s", e)
        return None


def _render(source: str, ranges: List, no_color: bool) -> str:
    if no_color:
        return highlight_text_with_ranges(source, ranges)
    return colorize_text_with_ranges(source, ranges)


def cmd_search(args: argparse.Namespace) -> int:
    """Search one query in one source string.

    Exit codes: 0 on a hit, 1 on no-match, 2 on invalid options.
    """
    options = _resolve_options(args)
    if options is None:
        return 2

    ranges = search(args.source, args.query, options=options)
    if getattr(args, "json", False):
        payload = {
            "source": args.source,
            "query": args.query,
            "ranges": [list(r) for r in ranges] if ranges is not None else None,
            "highlighted": highlight_text_with_ranges(args.source, ranges or []),
        }
        print(json.dumps(payload, ensure_ascii=False))
    elif ranges is None:
        logging.info("No match for %r in %r", args.query, args.source)
    else:
        print(" ".join(f"{start}-{end}" for start, end in ranges))
        print(_render(args.source, ranges, bool(getattr(args, "no_color", False))))
    return 0 if ranges is not None else 1


def load_labels(path: Path, column: Optional[str] = None) -> List[str]:
    """Read labels from a CSV/Parquet column or from a text file (one per line).

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        KeyError: If ``column`` is not present in a tabular file.
    """
    if not path.exists():
        raise FileNotFoundError(f"Labels file not found: {path}")
    suffix = path.suffix.lower()
    if suffix in TABULAR_SUFFIXES:
        if suffix == ".csv":
            df = pl.read_csv(path, infer_schema_length=0)
        else:
            df = pl.read_parquet(path)
        if df.width == 0:
            return []
        name = column or df.columns[0]
        if name not in df.columns:
            raise KeyError(f"Column {name!r} not in {path} (columns: {', '.join(df.columns)})")
        return df.get_column(name).cast(pl.Utf8).drop_nulls().to_list()
    with path.open("r", encoding="utf-8") as f:
        return [line.rstrip("\r\n") for line in f if line.strip()]


def cmd_filter(args: argparse.Namespace) -> int:
    """Print the labels matching the query, in file order.

    Exit codes: 0 when at least one label matches, 1 when none do, 2 on
    input errors.
    """
    options = _resolve_options(args)
    if options is None:
        return 2

    labels_path = Path(args.labels)
    try:
        labels = load_labels(labels_path, getattr(args, "column", None))
    except (FileNotFoundError, KeyError, OSError, pl.exceptions.PolarsError) as e:
        logging.error("Failed to read labels: %s", e)
        return 2
    logging.debug("Loaded %d labels from %s", len(labels), labels_path)

    matched = filter_labels(labels, args.query, options=options)
    no_color = bool(getattr(args, "no_color", False))
    for label, ranges in matched:
        print(_render(label, ranges, no_color))
    logging.info("%d of %d labels matched %r", len(matched), len(labels), args.query)
    return 0 if matched else 1


def cmd_mapping(args: argparse.Namespace) -> int:
    """Dump the boundary mapping of a source string as JSON."""
    data = build_boundary_mapping(args.source)
    payload = {
        "original_string": data.original_string,
        "original_length": data.original_length,
        "pinyin_string": data.pinyin_string,
        "boundary": [list(b) for b in data.boundary],
        "original_indices": list(data.original_indices),
    }
    print(json.dumps(payload, ensure_ascii=False))
    return 0


def _add_option_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--config",
        default=None,
        help=f"Path to search options YAML (defaults to {DEFAULT_CONFIG_PATH} when present)",
    )
    p.add_argument(
        "--strict-case",
        action="store_true",
        help="Do not lowercase query words before fuzzy matching",
    )
    p.add_argument(
        "--merge-spaces",
        action="store_true",
        help="Merge hit ranges separated only by whitespace",
    )
    p.add_argument(
        "--consecutive",
        action="store_true",
        help="Only accept hits forming one contiguous run of characters",
    )
    p.add_argument(
        "--strictness",
        type=float,
        default=None,
        help="Reject hits split into more than ceil(STRICTNESS * letters) ranges",
    )
    p.add_argument("--no-color", action="store_true", help="Use [brackets] instead of ANSI colors")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="pinyin-search",
        description=f"Pinyin fuzzy search (v{_PACKAGE_VERSION})",
    )
    p.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    p.add_argument(
        "--warnings-only",
        action="store_true",
        help="Show only warnings and errors (overrides --verbose)",
    )
    p.add_argument(
        "--errors-only",
        action="store_true",
        help="Show only errors (overrides --warnings-only and --verbose)",
    )

    sub = p.add_subparsers(dest="command", required=True)

    p_search = sub.add_parser("search", help="Search a query in a single source string")
    p_search.add_argument("source", help="Text to search in")
    p_search.add_argument("query", help="Pinyin query; whitespace separates words")
    p_search.add_argument("--json", action="store_true", help="Print the result as JSON")
    _add_option_flags(p_search)
    p_search.set_defaults(func=cmd_search)

    p_filter = sub.add_parser("filter", help="Filter labels from a file by a pinyin query")
    p_filter.add_argument("query", help="Pinyin query; whitespace separates words")
    p_filter.add_argument(
        "--labels",
        required=True,
        help="Text file with one label per line, or a .csv/.parquet file",
    )
    p_filter.add_argument(
        "--column",
        default=None,
        help="Column holding labels in a .csv/.parquet file (defaults to the first column)",
    )
    _add_option_flags(p_filter)
    p_filter.set_defaults(func=cmd_filter)

    p_mapping = sub.add_parser("mapping", help="Print the boundary mapping of a string as JSON")
    p_mapping.add_argument("source", help="Text to transliterate")
    p_mapping.set_defaults(func=cmd_mapping)

    return p


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(
        verbose=bool(args.verbose),
        warnings_only=bool(getattr(args, "warnings_only", False)),
        errors_only=bool(getattr(args, "errors_only", False)),
    )
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
