# jenkinsweave/tokenizer.py
# Splits Jenkinsfile text into physical lines and classifies each one.
# Tokens:
#   {"type": "SH_OPEN"|"SH_CLOSE"|"SH_LINE"|"BLOCK_OPEN"|"BLOCK_CLOSE"|"STATEMENT"|"BLANK",
#    "value": str, "line": int}
# For BLOCK_OPEN the value is the block header (line minus its trailing '{').

from __future__ import annotations
import re
from typing import Dict, List, Optional, Tuple

# ------------------------------ Patterns -------------------------------------

# Script steps whose body is a multi-line string: sh ''' / bat """ / ...
SH_OPEN_RE = re.compile(r"^(?:sh|bat|powershell|pwsh)\s*\(?\s*(?P<marker>'''|\"\"\")")

SH_OPEN = "SH_OPEN"
SH_CLOSE = "SH_CLOSE"
SH_LINE = "SH_LINE"
BLOCK_OPEN = "BLOCK_OPEN"
BLOCK_CLOSE = "BLOCK_CLOSE"
STATEMENT = "STATEMENT"
BLANK = "BLANK"

# --------------------------- Helpers ------------------------------------------

def split_lines(text: str) -> List[str]:
    """Trim the whole document and split it into physical lines."""
    s = (text or "").strip()
    if not s:
        return []
    return s.replace("\r\n", "\n").split("\n")


def _sh_marker(line: str) -> Optional[str]:
    m = SH_OPEN_RE.match(line)
    if not m:
        return None
    marker = m.group("marker")
    # sh '''echo hi''' closes on the same line: an ordinary statement
    if line[m.end():].rstrip(" )").endswith(marker):
        return None
    return marker


def classify_line(line: str, sh_marker: Optional[str] = None) -> Tuple[str, str, Optional[str]]:
    """
    Classify one trimmed line. `sh_marker` is the quote marker of the sh block
    we are inside, or None outside of one.
    Returns (token_type, value, sh_marker_after_this_line).
    """
    if not line:
        return BLANK, "", sh_marker

    opened = _sh_marker(line)
    if opened is not None:
        return SH_OPEN, line, opened

    if sh_marker is not None:
        if line.rstrip(" )").endswith(sh_marker):
            return SH_CLOSE, line, None
        return SH_LINE, line, sh_marker

    if line.endswith("{"):
        return BLOCK_OPEN, line[:-1].rstrip(), None

    if line == "}":
        return BLOCK_CLOSE, line, None

    return STATEMENT, line, None

# ------------------------------ Main tokenizer -------------------------------

def tokenize(text: str) -> List[Dict]:
    tokens: List[Dict] = []
    marker: Optional[str] = None
    text = text or ""
    # line numbers refer to the untrimmed input
    offset = text[: len(text) - len(text.lstrip())].count("\n")

    for lineno, raw in enumerate(split_lines(text), start=1 + offset):
        kind, value, marker = classify_line(raw.strip(), marker)
        tokens.append({"type": kind, "value": value, "line": lineno})

    return tokens
