# jenkinsweave/errors.py
# Error hierarchy for parsing, querying and editing Jenkinsfiles.

from __future__ import annotations
from typing import Optional


class JenkinsfileError(Exception):
    pass


class UnbalancedBracesError(JenkinsfileError):
    def __init__(self, message: str, line: Optional[int] = None):
        where = f"line {line}: " if line is not None else ""
        super().__init__(f"{where}{message}")
        self.line = line


class UnterminatedShBlockError(JenkinsfileError):
    def __init__(self, opened_at: int, marker: str = "'''"):
        super().__init__(f"line {opened_at}: sh block opened with {marker} is never closed")
        self.line = opened_at
        self.marker = marker


class StageContainerNotFoundError(JenkinsfileError):
    def __init__(self):
        super().__init__("No 'stages' block found under a top-level 'pipeline' block")


class StageIndexError(JenkinsfileError, IndexError):
    def __init__(self, index: int, count: int):
        super().__init__(f"Stage index {index} out of range (valid: 0..{count})")
        self.index = index
        self.count = count


class TreeSchemaError(JenkinsfileError):
    def __init__(self, message: str, path: str = ""):
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path


class InvalidStepError(JenkinsfileError):
    def __init__(self, step: str, reason: str):
        super().__init__(f"Invalid step {step!r}: {reason}")
        self.step = step
        self.reason = reason
