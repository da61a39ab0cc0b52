"""Command-line front door for qfnav.

Loads an entry file into an in-memory host and runs one list command
(sort, tally, keep) or prints and optionally saves the effective
configuration.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from .config import load_engine_config, save_config
from .engine import setup
from .entries import Entry, EntryKind, ListKind
from .memory_host import MemoryHost


def _int_field(raw: dict, *keys: str) -> int:
    """Return the first integer-valued key of ``raw``; ``0`` when none is usable."""
    for key in keys:
        value = raw.get(key)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().isdigit():
            return int(value)
    return 0


def _read_entries(host: MemoryHost, path: Path, check_files: bool) -> tuple[list[Entry], str]:
    """Load entries from a JSON array or a ``path:line:col: text`` listing.

    Returns the entries and a default title. With ``check_files`` the buffers
    of missing files are unloaded so their entries are invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SystemExit(f"Cannot read {path}: {exc}") from exc

    if path.suffix == ".json":
        try:
            data = json.loads(text)
        except ValueError as exc:
            raise SystemExit(f"Malformed JSON in {path}: {exc}") from exc
        if not isinstance(data, list):
            raise SystemExit(f"Expected a JSON array of entries in {path}")
        entries = []
        for raw in data:
            if not isinstance(raw, dict):
                continue
            file_name = str(raw.get("file") or raw.get("filename") or "")
            entries.append(
                Entry(
                    owner_ref=host.buffer_for_name(file_name) if file_name else None,
                    line=_int_field(raw, "line", "lnum"),
                    column=_int_field(raw, "column", "col"),
                    text=str(raw.get("text") or ""),
                    kind=EntryKind.from_code(raw.get("type") or raw.get("kind")),
                    file_name=file_name,
                )
            )
    else:
        entries = host.entries_from_lines(ListKind.PRIMARY, text.splitlines())

    if check_files:
        for ref, buffer in host.buffers.items():
            if not Path(buffer.name).exists():
                host.unload_buffer(ref)
    return entries, path.name


def format_entry(host: MemoryHost, entry: Entry) -> str:
    name = entry.file_name or host.buffer_name(entry.owner_ref)
    if not name:
        return f"|| {entry.text}"
    kind = f" {entry.kind.value}:" if entry.kind is not EntryKind.UNCLASSIFIED else ""
    return f"{name}:{entry.line}:{entry.column}:{kind} {entry.text}"


def _print_list(host: MemoryHost) -> None:
    out: list[str] = []
    title = host.list_title(ListKind.PRIMARY)
    if title:
        out.append(title)
    for entry in host.list_items(ListKind.PRIMARY):
        out.append(format_entry(host, entry))
    sys.stdout.write("\n".join(out) + ("\n" if out else ""))
    for message in host.errors:
        print(message, file=sys.stderr)


def main(argv: Sequence[str] | None = None) -> int:
    """Parse CLI arguments and run one list command.

    Returns the process exit status: ``1`` when the command reported an
    error through the host, ``0`` otherwise.
    """
    parser = argparse.ArgumentParser(description="Sort, filter, and tally result lists.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log engine activity to stderr.")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_file_command(name: str, help_text: str) -> argparse.ArgumentParser:
        command = sub.add_parser(name, help=help_text)
        command.add_argument("path", help="Entry file: JSON array, or path:line:col: text lines.")
        command.add_argument(
            "--check-files",
            action="store_true",
            help="Treat entries whose file does not exist as invalid.",
        )
        return command

    add_file_command("sort", "Sort entries by file, line, and column.")
    tally_cmd = add_file_command("tally", "Append a per-kind summary to the list title.")
    tally_cmd.add_argument("--title", default=None, help="Base title (default: file name).")
    keep_cmd = add_file_command("keep", "Keep only entries matching a kind and/or text.")
    keep_cmd.add_argument("--kind", default=None, help="Entry kind: error, warning, info, note.")
    keep_cmd.add_argument("--text", default=None, help="Substring the entry text must contain.")
    config_cmd = sub.add_parser("config", help="Print the effective configuration as JSON.")
    config_cmd.add_argument(
        "--write",
        action="store_true",
        help="Also save the effective configuration back to the config file.",
    )
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    config = load_engine_config()
    if args.command == "config":
        print(json.dumps(config.to_mapping(), indent=2))
        if args.write:
            save_config(config.to_mapping())
        return 0

    path = Path(args.path)
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")

    host = MemoryHost()
    engine = setup(host, config)
    entries, default_title = _read_entries(host, path, args.check_files)
    engine.set(ListKind.PRIMARY, items=entries, title=default_title, open=False)

    if args.command == "sort":
        engine.sort(ListKind.PRIMARY)
    elif args.command == "tally":
        engine.tally(ListKind.PRIMARY, args.title if args.title is not None else default_title)
    elif args.command == "keep":
        engine.keep(ListKind.PRIMARY, kind=args.kind, text=args.text)

    _print_list(host)
    return 1 if host.errors else 0
