# jenkinsweave: parse, render and edit declarative Jenkinsfiles.

from .errors import (
    JenkinsfileError,
    StageContainerNotFoundError,
    StageIndexError,
    TreeSchemaError,
    UnbalancedBracesError,
    UnterminatedShBlockError,
    InvalidStepError,
)
from .model import Element, Pipeline
from .parser import parse
from .serializer import content_hash, normalize_jenkinsfile, outline, render
from .stages import find_stage_index, insert_stage, stage_names

__version__ = "0.1.0"
