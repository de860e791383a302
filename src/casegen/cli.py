"""Command-line interface for casegen build/filter workflows."""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import traceback
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .errors import CasegenError, ComponentLoadError, DocumentWriteError
from .filtering import filter_tree, layer_predicate, tag_predicate
from .labels import Forbidden, Label, format_label
from .logging_config import setup_logging
from .resources import load_cheatsheet, load_example_scene
from .scene import build_scene, load_scene
from .xmlutil import serialize, write_document

COMMANDS = "build, filter, label, cheatsheet, example"


@dataclass
class CliError(Exception):
    code: str
    message: str
    hint: Optional[str] = None
    exit_code: int = 1
    file: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None


class UsageError(Exception):
    pass


class FriendlyArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # pragma: no cover - argparse callback
        raise UsageError(message)


def _build_parser() -> argparse.ArgumentParser:
    parser = FriendlyArgumentParser(
        prog="casegen",
        description="Compose SVG components and write one filtered document per layer.",
    )
    parser.add_argument("--error-format", choices=["text", "json"], default="text")
    parser.add_argument("--debug", action="store_true")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log loaded components and written files")

    subparsers = parser.add_subparsers(dest="command")

    build_parser = subparsers.add_parser("build", help="Build every layer of a scene file")
    build_parser.add_argument("scene", help="Scene .toml file")
    build_parser.add_argument(
        "--tag",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Select a tag value (overrides the scene's [tags])",
    )
    build_parser.add_argument(
        "--layer",
        action="append",
        type=int,
        default=[],
        metavar="N",
        help="Only write layer N (repeatable)",
    )
    build_parser.add_argument("-o", "--output-dir", help="Directory for output files")

    filter_parser = subparsers.add_parser("filter", help="Filter an existing SVG by tags and layer")
    filter_parser.add_argument("input", nargs="?", help="Input .svg file")
    filter_parser.add_argument("--text", help="Raw SVG source")
    filter_parser.add_argument("--tag", action="append", default=[], metavar="NAME=VALUE")
    filter_parser.add_argument("--layer", type=int, metavar="N", help="Keep only layer N")
    filter_parser.add_argument("--stdout", action="store_true", help="Write SVG to stdout")
    filter_parser.add_argument("-o", "--output", help="Output .svg path")

    label_parser = subparsers.add_parser("label", help="Parse a label and print its canonical form")
    label_parser.add_argument("label", help='Label text, e.g. "layers=0,2;tags=light:gm-p13"')
    label_parser.add_argument("--json", action="store_true", help="Print the parsed label as JSON")

    subparsers.add_parser("cheatsheet", help="Print the label syntax reference")
    subparsers.add_parser("example", help="Print an example scene file")

    return parser


def _parse_tag_args(values: List[str]) -> Dict[str, str]:
    tags: Dict[str, str] = {}
    for value in values:
        name, sep, selected = value.partition("=")
        if not sep or not name or not selected:
            raise CliError(
                "E_ARGS",
                f"invalid --tag value: {value!r}",
                hint="Use NAME=VALUE, e.g. --tag light=gm-p13.",
                exit_code=2,
            )
        tags[name] = selected
    return tags


def _read_input(path: Optional[str], text: Optional[str]) -> tuple[str, Optional[Path]]:
    if path and text is not None:
        raise CliError(
            "E_ARGS",
            "--text cannot be combined with file input",
            hint="Use either FILE or --text.",
            exit_code=2,
        )

    if text is not None:
        return text, None

    if path:
        input_path = Path(path)
        if not input_path.exists():
            raise CliError(
                "E_IO_READ",
                f"input file not found: {input_path}",
                exit_code=2,
                file=str(input_path),
            )
        try:
            return input_path.read_text(encoding="utf-8"), input_path
        except OSError as exc:
            raise CliError(
                "E_IO_READ",
                f"failed to read input file: {input_path}",
                hint=str(exc),
                exit_code=2,
                file=str(input_path),
            )

    if sys.stdin.isatty():
        raise CliError(
            "E_ARGS",
            "no input provided",
            hint="Pass FILE, --text, or pipe SVG into stdin.",
            exit_code=2,
        )

    data = sys.stdin.read()
    if not data.strip():
        raise CliError(
            "E_ARGS",
            "stdin was empty",
            hint="Pipe SVG content into stdin.",
            exit_code=2,
        )
    return data, None


def _label_payload(label: Label) -> dict:
    tags = None
    if label.tags is not None:
        tags = {
            name: ({"forbidden": True} if isinstance(match, Forbidden) else {"required": match.value})
            for name, match in sorted(label.tags.items())
        }
    layers = sorted(label.layers) if label.layers is not None else None
    return {"layers": layers, "tags": tags}


def _error_from_exception(exc: Exception) -> CliError:
    if isinstance(exc, CliError):
        return exc
    if isinstance(exc, DocumentWriteError):
        return CliError(exc.code, exc.message, hint="Check the output directory exists and is writable.", exit_code=4)
    if isinstance(exc, ComponentLoadError):
        return CliError(exc.code, exc.message, hint="Check the component paths in the scene file.", exit_code=2)
    if isinstance(exc, CasegenError):
        return CliError(
            exc.code,
            exc.message,
            hint="Check the scene file and the inkscape:label values (see `casegen cheatsheet`).",
            exit_code=3,
        )
    if isinstance(exc, ET.ParseError):
        line, column = getattr(exc, "position", (None, None))
        return CliError(
            "E_PARSE_XML",
            f"failed to parse XML: {exc}",
            hint="Ensure input is well-formed SVG.",
            exit_code=2,
            line=line,
            column=column,
        )
    return CliError(
        "E_INTERNAL",
        str(exc) or exc.__class__.__name__,
        hint="Re-run with --debug to see traceback.",
        exit_code=1,
    )


def _emit_error(err: CliError, *, error_format: str) -> None:
    if error_format == "json":
        payload = {
            "ok": False,
            "code": err.code,
            "message": err.message,
            "file": err.file,
            "line": err.line,
            "column": err.column,
            "hint": err.hint,
        }
        sys.stderr.write(json.dumps(payload) + "\n")
        return

    sys.stderr.write(f"error[{err.code}]: {err.message}\n")
    if err.hint:
        sys.stderr.write(f"hint: {err.hint}\n")


def _handle_build(args: argparse.Namespace) -> int:
    tags = _parse_tag_args(args.tag)
    scene = load_scene(args.scene)
    layers = args.layer or None
    if layers is not None:
        unknown = [layer for layer in layers if layer not in scene.layers]
        if unknown:
            raise CliError(
                "E_ARGS",
                f"layer {unknown[0]} is outside the scene's layers 0..{scene.layer_count - 1}",
                exit_code=2,
            )

    output_dir = Path(args.output_dir) if args.output_dir else None
    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)
    for path in build_scene(scene, output_dir, tags=tags, layers=layers):
        print(f"Wrote {path}")
    return 0


def _handle_filter(args: argparse.Namespace) -> int:
    if args.stdout and args.output:
        raise CliError(
            "E_ARGS",
            "--stdout and --output are mutually exclusive",
            hint="Choose either --stdout or --output.",
            exit_code=2,
        )

    tags = _parse_tag_args(args.tag)
    source, source_path = _read_input(args.input, args.text)
    root = ET.fromstring(source)
    result = filter_tree(root, tag_predicate(tags))
    if args.layer is not None:
        result = filter_tree(result, layer_predicate(args.layer))

    if args.stdout or (source_path is None and not args.output):
        svg_text = serialize(result)
        sys.stdout.write(svg_text)
        if not svg_text.endswith("\n"):
            sys.stdout.write("\n")
        return 0

    if args.output:
        output_path = Path(args.output)
    else:
        suffix = f".layer{args.layer}.svg" if args.layer is not None else ".filtered.svg"
        output_path = source_path.with_suffix(suffix)
    write_document(result, output_path)
    print(f"Wrote {output_path}")
    return 0


def _handle_label(args: argparse.Namespace) -> int:
    label = Label.parse(args.label)
    if args.json:
        print(json.dumps(_label_payload(label)))
    else:
        print(format_label(label))
    return 0


def main(argv: Optional[Iterable[str]] = None) -> int:
    raw_argv = list(argv) if argv is not None else sys.argv[1:]
    parser = _build_parser()

    if not raw_argv:
        err = CliError(
            "E_ARGS",
            "missing subcommand",
            hint=f"Use one of: {COMMANDS}.",
            exit_code=2,
        )
        _emit_error(err, error_format="text")
        return err.exit_code

    debug_enabled = "--debug" in raw_argv or os.getenv("CASEGEN_DEBUG") == "1"
    error_format = "text"
    if "--error-format" in raw_argv:
        idx = raw_argv.index("--error-format")
        if idx + 1 < len(raw_argv):
            error_format = raw_argv[idx + 1]

    try:
        args = parser.parse_args(raw_argv)
        error_format = args.error_format
        if debug_enabled:
            setup_logging(logging.DEBUG)
        elif args.verbose:
            setup_logging(logging.INFO)
        else:
            setup_logging(logging.WARNING)

        if args.command == "build":
            return _handle_build(args)
        if args.command == "filter":
            return _handle_filter(args)
        if args.command == "label":
            return _handle_label(args)
        if args.command == "cheatsheet":
            print(load_cheatsheet())
            return 0
        if args.command == "example":
            print(load_example_scene())
            return 0

        raise CliError(
            "E_ARGS",
            "missing subcommand",
            hint=f"Use one of: {COMMANDS}.",
            exit_code=2,
        )
    except UsageError as exc:
        err = CliError(
            "E_ARGS",
            str(exc),
            hint=f"Use subcommands: {COMMANDS}.",
            exit_code=2,
        )
        _emit_error(err, error_format=error_format)
        return err.exit_code
    except Exception as exc:  # pragma: no cover - exercised in integration tests
        err = _error_from_exception(exc)
        _emit_error(err, error_format=error_format)
        if debug_enabled:
            traceback.print_exc(file=sys.stderr)
        return err.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
