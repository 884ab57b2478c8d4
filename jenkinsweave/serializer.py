# jenkinsweave/serializer.py
# Renders a Pipeline back to Jenkinsfile text.
# Indentation is derived from depth alone:
#   - every child sits one unit deeper than its parent
#   - sh body lines sit two units deeper (one past their 'sh' line)
#   - blocks get " {" after the header and a closing "}" at their own indent

from __future__ import annotations
import hashlib
from typing import List

from .model import Element, Pipeline, SH_LINE
from .parser import parse

INDENT = "    "


def _write(out: List[str], el: Element, indent: str, unit: str) -> None:
    out.append(f"{indent}{el.name}")
    out.append(" {\n" if el.has_braces else "\n")
    for child in el.children:
        step = unit * 2 if child.kind == SH_LINE else unit
        _write(out, child, indent + step, unit)
    if el.has_braces:
        out.append(f"{indent}}}\n")


def render(pipeline: Pipeline, indent: str = INDENT) -> str:
    out: List[str] = []
    for el in pipeline.elements:
        _write(out, el, "", indent)
    return "".join(out)


def outline(pipeline: Pipeline) -> str:
    """Names only, two spaces per level; the quick structural dump."""
    lines: List[str] = []

    def walk(el: Element, depth: int) -> None:
        lines.append("  " * depth + el.name)
        for child in el.children:
            walk(child, depth + 1)

    for el in pipeline.elements:
        walk(el, 0)
    return "\n".join(lines) + ("\n" if lines else "")


def normalize_jenkinsfile(text: str, indent: str = INDENT) -> str:
    return render(parse(text), indent=indent)


def content_hash(text: str) -> str:
    norm = normalize_jenkinsfile(text)
    return "sha256:" + hashlib.sha256(norm.encode("utf-8")).hexdigest()
