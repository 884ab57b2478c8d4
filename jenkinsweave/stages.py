# jenkinsweave/stages.py
# Query and edit the stage list of a declarative pipeline:
#   pipeline { stages { stage('X') { steps { ... } } ... } }

from __future__ import annotations
import logging
from typing import List, Optional, Sequence

from . import tokenizer as tk
from .errors import InvalidStepError, StageContainerNotFoundError, StageIndexError
from .model import Element, Pipeline, ROLE_PIPELINE, ROLE_STAGES, ROLE_STEPS

logger = logging.getLogger(__name__)


def stages_block(pipeline: Pipeline) -> Optional[Element]:
    """The first 'stages' block under the first top-level 'pipeline' block."""
    root = pipeline.find(ROLE_PIPELINE)
    if root is None:
        return None
    return root.find_child(ROLE_STAGES)


def stage_names(pipeline: Pipeline) -> List[str]:
    container = stages_block(pipeline)
    if container is None:
        return []
    return [st.name for st in container.children]


def find_stage_index(pipeline: Pipeline, needle: str) -> int:
    """
    Index of the first stage whose 'steps' block holds a step containing
    `needle`, or -1 when no stage does.
    """
    for root in pipeline.elements:
        if root.role != ROLE_PIPELINE:
            continue
        for container in root.children:
            if container.role != ROLE_STAGES:
                continue
            for i, stage in enumerate(container.children):
                for steps in stage.children:
                    if steps.role != ROLE_STEPS:
                        continue
                    if any(needle in step.content for step in steps.children):
                        return i
    return -1


def _check_step(step: str) -> str:
    """A step must read back as a single plain statement."""
    if "\n" in step or "\r" in step:
        raise InvalidStepError(step, "steps must be a single line")
    line = step.strip()
    kind, _, _ = tk.classify_line(line)
    if kind != tk.STATEMENT:
        raise InvalidStepError(step, f"parses as {kind}, not a statement")
    return line


def make_stage(name: str, steps: Sequence[str]) -> Element:
    body = Element.block("steps", [Element.statement(_check_step(s)) for s in steps])
    return Element.block(f"stage('{name}')", [body])


def insert_stage(pipeline: Pipeline, name: str, steps: Sequence[str], index: int) -> Element:
    """
    Insert stage('<name>') with a 'steps' block built from `steps` at
    position `index` of the stages list. The stages block gets a new children
    list; the existing stage elements are reused as they are.
    Returns the new stage element.
    """
    container = stages_block(pipeline)
    if container is None:
        raise StageContainerNotFoundError()

    old = container.children
    if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index <= len(old):
        raise StageIndexError(index, len(old))

    stage = make_stage(name, steps)
    container.children = old[:index] + [stage] + old[index:]
    logger.info("inserted %s at index %d (%d steps)", stage.name, index, len(steps))
    return stage
