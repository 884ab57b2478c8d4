# jenkinsweave/parser.py
# Builds a Pipeline tree from tokenizer output.
#
# Blocks are collected on a builder stack; a block is attached to its parent
# (or to the document) only when its closing brace is seen. Leaf lines go to
# whatever block is on top of the stack, or to the document at depth zero.

from __future__ import annotations
import logging
from typing import Dict, List, Optional

from . import tokenizer as tk
from .errors import UnbalancedBracesError, UnterminatedShBlockError
from .model import Element, Pipeline, SH_CLOSE, SH_LINE, SH_OPEN

logger = logging.getLogger(__name__)

_SH_KIND = {tk.SH_OPEN: SH_OPEN, tk.SH_LINE: SH_LINE, tk.SH_CLOSE: SH_CLOSE}


class _Builder:
    def __init__(self, strict: bool):
        self.strict = strict
        self.pipeline = Pipeline()
        self.stack: List[Element] = []
        self.opened_at: List[int] = []

    def _append(self, el: Element) -> None:
        if self.stack:
            self.stack[-1].children.append(el)
        else:
            self.pipeline.elements.append(el)

    def open_block(self, header: str, line: int) -> None:
        self.stack.append(Element.block(header))
        self.opened_at.append(line)

    def close_block(self, line: int) -> None:
        if not self.stack:
            if self.strict:
                raise UnbalancedBracesError("closing brace without a matching block", line)
            logger.warning("line %d: ignoring '}' with no open block", line)
            return
        done = self.stack.pop()
        self.opened_at.pop()
        self._append(done)

    def leaf(self, el: Element) -> None:
        self._append(el)

    def finish(self, sh_opened_at: Optional[int], sh_marker: Optional[str]) -> Pipeline:
        if sh_opened_at is not None:
            if self.strict:
                raise UnterminatedShBlockError(sh_opened_at, sh_marker or "'''")
            logger.warning("line %d: sh block is never closed", sh_opened_at)
        if self.stack:
            if self.strict:
                raise UnbalancedBracesError(
                    f"block '{self.stack[-1].name}' is never closed", self.opened_at[-1]
                )
            # unclosed blocks were never attached anywhere; they are dropped
            logger.warning(
                "dropping %d unclosed block(s), outermost '%s' opened at line %d",
                len(self.stack), self.stack[0].name, self.opened_at[0],
            )
        return self.pipeline


def build_tree(tokens: List[Dict], strict: bool = False) -> Pipeline:
    b = _Builder(strict)
    sh_opened_at: Optional[int] = None
    sh_marker: Optional[str] = None

    for tok in tokens:
        t, value, line = tok["type"], tok["value"], tok["line"]

        if t == tk.BLANK:
            continue

        if t in _SH_KIND:
            b.leaf(Element.sh(_SH_KIND[t], value))
            if t == tk.SH_OPEN:
                sh_opened_at = line
                sh_marker = tk.SH_OPEN_RE.match(value).group("marker")
            elif t == tk.SH_CLOSE:
                sh_opened_at = None
                sh_marker = None
            continue

        if t == tk.BLOCK_OPEN:
            b.open_block(value, line)
        elif t == tk.BLOCK_CLOSE:
            b.close_block(line)
        else:
            b.leaf(Element.statement(value))

    return b.finish(sh_opened_at, sh_marker)


def parse(text: str, strict: bool = False) -> Pipeline:
    """
    Parse Jenkinsfile text into a Pipeline.

    Lenient by default: a stray '}' is ignored, an unterminated sh block runs
    to the end of the input, and blocks still open at the end are dropped.
    With strict=True those cases raise UnbalancedBracesError or
    UnterminatedShBlockError instead.
    """
    return build_tree(tk.tokenize(text), strict=strict)
