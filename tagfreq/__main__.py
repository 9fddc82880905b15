"""
Command line interface for tagfreq.

    tagfreq build corpus.tnt -o lexicon.tfd --min-count 2
    tagfreq show lexicon.tfd the run
    tagfreq config --set-models-dir ~/models
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from tabulate import tabulate

from . import __version__
from .binary_io import TagCountIOError
from .config import TagFreqConfig
from .dictionary import WordTagDictionary
from .model_storage import default_model_path, get_config_file, get_models_dir, set_models_dir
from .tag_count import TagCount, tag_to_text

TASK_CHOICES = ("build", "show", "config")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tagfreq",
        description="Build and inspect per-word tag frequency models",
    )
    parser.add_argument("-V", "--version", action="version", version=f"tagfreq {__version__}")

    # Common arguments that all subcommands inherit
    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument("--debug", action="store_true", help="Enable verbose debug logging")
    parent_parser.add_argument("--verbose", action="store_true", help="Print high-level progress messages")

    subparsers = parser.add_subparsers(dest="task", required=False)

    # build ---------------------------------------------------------------
    build_parser_ = subparsers.add_parser(
        "build",
        parents=[parent_parser],
        help="Count tags per word in a TnT-style file and write a model",
    )
    build_parser_.add_argument("input", type=Path, help="File with one token<TAB>tag[<TAB>count] per line")
    build_parser_.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Model file to write (default: <models dir>/lexicon.tfd)",
    )
    build_parser_.add_argument("--min-count", type=int, default=1, help="Drop tags seen fewer times than this")
    build_parser_.add_argument("--lowercase", action="store_true", help="Fold word forms to lowercase")

    # show ----------------------------------------------------------------
    show_parser = subparsers.add_parser(
        "show",
        parents=[parent_parser],
        help="Print the tag statistics stored in a model",
    )
    show_parser.add_argument("model", type=Path, help="Model file written by 'build'")
    show_parser.add_argument("words", nargs="*", help="Words to look up (default: list entries)")
    show_parser.add_argument("--limit", type=int, default=20, help="Entries to list when no words are given")

    # config --------------------------------------------------------------
    config_parser = subparsers.add_parser("config", parents=[parent_parser], help="Configure tagfreq settings")
    config_parser.add_argument(
        "--set-models-dir",
        type=Path,
        metavar="PATH",
        help="Set the directory where models are stored by default",
    )
    return parser


def _configure_logging(args: argparse.Namespace) -> None:
    if getattr(args, "debug", False):
        level = logging.DEBUG
    elif getattr(args, "verbose", False):
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="[tagfreq] %(levelname)s %(name)s: %(message)s")


def _format_tags(store: TagCount) -> str:
    return " ".join(f"{tag_to_text(tag)}:{store.count_for(tag)}" for tag in store.tags)


def _row(word: str, store: TagCount) -> list:
    return [word, store.total, tag_to_text(store.majority_tag()), _format_tags(store)]


def run_build(args: argparse.Namespace) -> int:
    config = TagFreqConfig(min_count=args.min_count, lowercase=args.lowercase)
    output = args.output if args.output is not None else default_model_path(config, create=True)
    dictionary = WordTagDictionary.from_tnt(args.input)
    dictionary.build(min_count=config.min_count, lowercase=config.lowercase)
    dictionary.save(output)
    print(f"[tagfreq] Wrote {len(dictionary)} words to {output}", file=sys.stderr)
    return 0


def run_show(args: argparse.Namespace) -> int:
    dictionary = WordTagDictionary.load(args.model)
    headers = ["Word", "Total", "Majority", "Tags"]
    if args.words:
        rows = []
        for word in args.words:
            store = dictionary.get(word)
            if store is None:
                print(f"[tagfreq] Unknown word: {word}", file=sys.stderr)
                continue
            rows.append(_row(word, store))
        if rows:
            print(tabulate(rows, headers=headers))
        return 0

    rows = [_row(word, store) for word, store in list(dictionary.items())[: max(args.limit, 0)]]
    if rows:
        print(tabulate(rows, headers=headers))
    tokens = sum(store.total for _, store in dictionary.items())
    print(f"\n{len(dictionary)} words, {tokens} tokens, {len(dictionary.tag_vocabulary())} distinct tags")
    return 0


def run_config(args: argparse.Namespace) -> int:
    """Show or change the tagfreq configuration."""
    if args.set_models_dir:
        models_dir = Path(args.set_models_dir).expanduser().resolve()
        set_models_dir(models_dir)
        print(f"[tagfreq] Models directory set to: {models_dir}")
        print(f"[tagfreq] Configuration saved to: {get_config_file()}")
        return 0

    print("[tagfreq] Current configuration:")
    print(f"  Config file: {get_config_file(create_dir=False)}")
    print(f"  Models directory: {get_models_dir(create=False)}")
    return 0


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.task:
        parser.error("No task specified. Use one of: " + ", ".join(TASK_CHOICES))

    _configure_logging(args)
    try:
        if args.task == "build":
            return run_build(args)
        if args.task == "show":
            return run_show(args)
        if args.task == "config":
            return run_config(args)
    except (TagCountIOError, OSError, ValueError) as exc:
        if args.debug:
            logging.getLogger(__name__).exception("Task %s failed", args.task)
        print(f"[tagfreq] Error: {exc}", file=sys.stderr)
        return 1

    parser.error(f"Unknown task '{args.task}'. Supported tasks: {', '.join(TASK_CHOICES)}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
