# jenkinsweave/model.py
# Tree model for a parsed Jenkinsfile.
#
#   Pipeline
#     elements: [Element, ...]      (normally one 'pipeline' block)
#   Element
#     kind:     "block" | "sh-open" | "sh-close" | "sh-line" | "element"
#     name:     header text (blocks: without the trailing '{')
#     content:  line text kept for substring search ("" for blocks)
#     children: nested elements (blocks only)
#     role:     "pipeline" | "stages" | "stage" | "steps" | ""

from __future__ import annotations
import re
from dataclasses import dataclass, field
from typing import List

BLOCK = "block"
SH_OPEN = "sh-open"
SH_CLOSE = "sh-close"
SH_LINE = "sh-line"
STATEMENT = "element"

KINDS = (BLOCK, SH_OPEN, SH_CLOSE, SH_LINE, STATEMENT)
SH_KINDS = (SH_OPEN, SH_LINE, SH_CLOSE)

ROLE_PIPELINE = "pipeline"
ROLE_STAGES = "stages"
ROLE_STAGE = "stage"
ROLE_STEPS = "steps"

_STAGE_HEADER = re.compile(r"^stage\s*\(")


def role_for_header(name: str) -> str:
    """Semantic tag for a block header; '' for anything without one."""
    if name in (ROLE_PIPELINE, ROLE_STAGES, ROLE_STEPS):
        return name
    if _STAGE_HEADER.match(name):
        return ROLE_STAGE
    return ""


@dataclass
class Element:
    kind: str
    name: str
    content: str = ""
    children: List["Element"] = field(default_factory=list)
    role: str = ""

    def __post_init__(self) -> None:
        if self.kind not in KINDS:
            raise ValueError(f"unknown element kind: {self.kind!r}")
        if self.kind == BLOCK and not self.role:
            self.role = role_for_header(self.name)

    @property
    def has_braces(self) -> bool:
        return self.kind == BLOCK

    @classmethod
    def block(cls, name: str, children: List["Element"] | None = None) -> "Element":
        return cls(BLOCK, name, "", list(children or []), role_for_header(name))

    @classmethod
    def statement(cls, text: str) -> "Element":
        return cls(STATEMENT, text, text)

    @classmethod
    def sh(cls, kind: str, text: str) -> "Element":
        if kind not in SH_KINDS:
            raise ValueError(f"not an sh element kind: {kind!r}")
        return cls(kind, text, text)

    def find_child(self, role: str) -> "Element | None":
        for child in self.children:
            if child.role == role:
                return child
        return None


@dataclass
class Pipeline:
    elements: List[Element] = field(default_factory=list)

    def find(self, role: str) -> "Element | None":
        """First top-level element carrying `role`."""
        for el in self.elements:
            if el.role == role:
                return el
        return None

    def __str__(self) -> str:
        from .serializer import render
        return render(self)
