"""passcraft command-line interface.

Usage examples:
    python -m passcraft generate -n 16 --numbers --specials
    python -m passcraft generate --pronounceable -c 3 --copy
    python -m passcraft strength -n 20 --numbers
    python -m passcraft history --clear
"""

import argparse
import logging
import sys
from dataclasses import asdict, replace
from pathlib import Path

import pyperclip

from passcraft import (
    GenerationConfig,
    GenerationError,
    estimate_entropy,
    estimate_strength,
    generate_batch,
)
from passcraft.storage import (
    HISTORY_FILE,
    PREFERENCES_FILE,
    HistoryStore,
    PreferenceStore,
    default_data_dir,
)


logger = logging.getLogger(__name__)

# (flag, GenerationConfig field, help)
_OPTION_FLAGS = [
    ("numbers", "allow_numbers", "Include digits"),
    ("specials", "allow_specials", "Include special characters"),
    ("pronounceable", "pronounceable", "Alternate consonants and vowels"),
    ("exclude-ambiguous", "exclude_ambiguous", "Leave out O, 0, I, l and 1"),
    ("restrict-confusing", "restrict_confusing_chars",
     "Allow at most one of i, l and 1"),
    ("avoid-o-zero", "avoid_o_zero_together", "Never mix o/O with 0"),
]


def _add_config_options(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "-n", "--length", type=int, default=None,
        help="Password length, 6-100 (default: saved preference or 10)",
    )
    for flag, dest, help_text in _OPTION_FLAGS:
        p.add_argument(
            f"--{flag}", dest=dest, default=None,
            action=argparse.BooleanOptionalAction, help=help_text,
        )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="passcraft",
        description="Generate secure passwords with readability constraints.",
    )
    parser.add_argument(
        "--data-dir", type=Path, default=None,
        help="Where preferences and history are kept "
             "(default: $PASSCRAFT_HOME or ~/.passcraft)",
    )
    parser.add_argument(
        "--log-level",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        default="WARNING",
        help="Logging verbosity (default: WARNING)",
    )
    sub = parser.add_subparsers(dest="command")

    # ── generate ───────────────────────────────────────────────────────
    gen_p = sub.add_parser("generate", help="Generate passwords")
    _add_config_options(gen_p)
    gen_p.add_argument(
        "-c", "--count", type=int, default=None,
        help="Number of passwords, 1-3 (default: saved preference or 3)",
    )
    gen_p.add_argument(
        "--copy", action="store_true",
        help="Copy the result to the clipboard",
    )
    gen_p.add_argument(
        "--no-history", action="store_true",
        help="Do not record the result in the history",
    )

    # ── strength ───────────────────────────────────────────────────────
    str_p = sub.add_parser(
        "strength", help="Estimate the strength of a configuration",
    )
    _add_config_options(str_p)

    # ── history ────────────────────────────────────────────────────────
    hist_p = sub.add_parser("history", help="Show recently generated passwords")
    hist_p.add_argument("--clear", action="store_true", help="Clear the history")
    hist_p.add_argument(
        "--copy", type=int, metavar="N",
        help="Copy entry N (1 = newest) to the clipboard",
    )

    # ── prefs ──────────────────────────────────────────────────────────
    prefs_p = sub.add_parser("prefs", help="Show saved preferences")
    prefs_p.add_argument(
        "--reset", action="store_true", help="Reset saved preferences",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    data_dir = args.data_dir or default_data_dir()
    prefs = PreferenceStore(data_dir / PREFERENCES_FILE)
    history = HistoryStore(data_dir / HISTORY_FILE)

    if args.command == "generate":
        return _cmd_generate(args, prefs, history)
    if args.command == "strength":
        return _cmd_strength(args, prefs)
    if args.command == "history":
        return _cmd_history(args, history)
    if args.command == "prefs":
        return _cmd_prefs(args, prefs)

    parser.print_help()
    return 0


def _config_from_args(args: argparse.Namespace, base: GenerationConfig) -> GenerationConfig:
    """Overlay the options given on the command line onto *base*."""
    overrides = {}
    if args.length is not None:
        overrides["length"] = args.length
    if getattr(args, "count", None) is not None:
        overrides["count"] = args.count
    for _, dest, _ in _OPTION_FLAGS:
        value = getattr(args, dest)
        if value is not None:
            overrides[dest] = value
    return replace(base, **overrides)


def _copy_to_clipboard(text: str) -> bool:
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as exc:
        logger.debug("Clipboard unavailable: %s", exc)
        print(
            "Could not copy to clipboard. Please copy manually.",
            file=sys.stderr,
        )
        return False
    return True


def _cmd_generate(
    args: argparse.Namespace, prefs: PreferenceStore, history: HistoryStore,
) -> int:
    config = _config_from_args(args, prefs.load())

    try:
        passwords = generate_batch(config)
    except GenerationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    prefs.save(config)
    if not args.no_history:
        history.add(passwords)

    label = estimate_strength(config)
    bits = round(estimate_entropy(config), 1)
    for pwd in passwords:
        print(f"  {pwd}  ({label}, {bits} bits)")

    if args.copy and _copy_to_clipboard("\n".join(passwords)):
        print("  Copied to clipboard!")

    return 0


STRENGTH_BAR = {"Weak": 1, "Medium": 2, "Strong": 3, "Very Strong": 4}


def _cmd_strength(args: argparse.Namespace, prefs: PreferenceStore) -> int:
    config = _config_from_args(args, prefs.load())
    label = estimate_strength(config)
    if not label:
        print("Error: length must be a positive number", file=sys.stderr)
        return 1

    filled = STRENGTH_BAR.get(label, 0)
    bar = "#" * filled + "-" * (4 - filled)
    bits = round(estimate_entropy(config), 1)
    print(f"  Strength: [{bar}] {label} ({bits} bits)")
    return 0


def _cmd_history(args: argparse.Namespace, history: HistoryStore) -> int:
    if args.clear:
        history.clear()
        print("  History cleared.")
        return 0

    entries = history.entries()

    if args.copy is not None:
        if not 1 <= args.copy <= len(entries):
            print(f"Error: no history entry {args.copy}", file=sys.stderr)
            return 1
        if _copy_to_clipboard(entries[args.copy - 1].value):
            print("  Copied to clipboard!")
        return 0

    if not entries:
        print("  No history yet. Generate a password to see it here.")
        return 0

    for i, entry in enumerate(entries, start=1):
        print(f"  {i:>2}. {entry.value}  [{entry.created_at}]")
    return 0


def _cmd_prefs(args: argparse.Namespace, prefs: PreferenceStore) -> int:
    if args.reset:
        config = prefs.reset()
        print("  Preferences reset.")
    else:
        config = prefs.load()

    for key, value in asdict(config).items():
        print(f"  {key:<26} {value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
