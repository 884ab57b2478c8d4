# jenkinsweave/cli.py
# CLI: read a Jenkinsfile (path or stdin), print its outline or canonical
# form, optionally insert a stage and export the tree as JSON.

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import JenkinsfileError
from .parser import parse
from .serializer import content_hash, outline, render
from .stages import find_stage_index, insert_stage
from .tree_json import to_dict, validate_tree

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _load_text(path: Optional[str]) -> str:
    if not path or path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _write_json(path: Path, obj: Dict[str, Any]) -> None:
    path.write_text(json.dumps(obj, indent=2), encoding="utf-8")


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="jenkinsweave",
        description="Parse a declarative Jenkinsfile; print its outline or canonical form, or insert a stage.",
    )
    p.add_argument("path", nargs="?", help="Jenkinsfile to read (default: stdin).")
    mode = p.add_mutually_exclusive_group()
    mode.add_argument("--outline", action="store_true", help="Print the element tree (default).")
    mode.add_argument("--render", action="store_true", help="Print the canonically indented Jenkinsfile.")
    p.add_argument("--insert-stage", metavar="NAME", help="Insert stage('NAME'); implies --render.")
    p.add_argument("--step", action="append", default=[], help="Step for the inserted stage (repeatable).")
    where = p.add_mutually_exclusive_group()
    where.add_argument("--index", type=int, help="Position in the stages list for --insert-stage.")
    where.add_argument("--before-step", metavar="TEXT",
                       help="Insert before the first stage with a step containing TEXT.")
    p.add_argument("--strict", action="store_true", help="Fail on unbalanced braces or unterminated sh blocks.")
    p.add_argument("--indent", type=int, default=4, help="Spaces per indentation level (default: 4).")
    p.add_argument("--emit-json", metavar="PATH", help="Write the (validated) tree as JSON to PATH.")
    p.add_argument("--print-hash", action="store_true", help="Print sha256 of the canonical form.")
    p.add_argument("--out", metavar="PATH", help="Write output to PATH instead of stdout.")
    p.add_argument("--log-level", default="WARNING", type=str.upper, choices=LOG_LEVELS,
                   help="Logging level (default: WARNING).")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    p = build_arg_parser()
    args = p.parse_args(argv)

    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    if args.insert_stage is None and (args.step or args.index is not None or args.before_step):
        p.error("--step/--index/--before-step require --insert-stage")
    if args.insert_stage is not None and args.index is None and args.before_step is None:
        p.error("--insert-stage needs --index or --before-step")
    if args.outline and args.insert_stage is not None:
        p.error("--outline cannot be combined with --insert-stage")
    if args.indent < 0:
        p.error("--indent must be >= 0")

    try:
        text = _load_text(args.path)
        pipeline = parse(text, strict=args.strict)

        if args.insert_stage is not None:
            index = args.index
            if args.before_step is not None:
                index = find_stage_index(pipeline, args.before_step)
                if index < 0:
                    raise JenkinsfileError(f"no stage has a step containing {args.before_step!r}")
            insert_stage(pipeline, args.insert_stage, args.step, index)

        if args.emit_json:
            tree = to_dict(pipeline)
            validate_tree(tree)
            _write_json(Path(args.emit_json), tree)

        if args.render or args.insert_stage is not None:
            output = render(pipeline, indent=" " * args.indent)
        else:
            output = outline(pipeline)

        if args.out:
            Path(args.out).write_text(output, encoding="utf-8")
        else:
            sys.stdout.write(output)
        if args.print_hash:
            print(content_hash(render(pipeline)))
        return 0

    except (JenkinsfileError, OSError, UnicodeDecodeError) as e:
        err = {"status": "error", "type": type(e).__name__, "reason": str(e)}
        print(json.dumps(err, indent=2, sort_keys=True))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
