"""a11ylocate: map accessibility findings to the source files that render them."""

from a11ylocate._version import __version__
from a11ylocate.change.metadata import (
    ChangeDescription,
    branch_name,
    build_change_request,
    change_description,
)
from a11ylocate.core.models import (
    Confidence,
    DetectionState,
    Finding,
    FindingWithFix,
    Fix,
    Match,
    NoMatch,
    NoSignal,
    RepositoryContext,
    WeakMatch,
)
from a11ylocate.detect.batch import BatchDetector
from a11ylocate.detect.resolver import FileResolver
from a11ylocate.detect.state import DetectionStore

__all__ = [
    "__version__",
    "BatchDetector",
    "ChangeDescription",
    "Confidence",
    "DetectionState",
    "DetectionStore",
    "FileResolver",
    "Finding",
    "FindingWithFix",
    "Fix",
    "Match",
    "NoMatch",
    "NoSignal",
    "RepositoryContext",
    "WeakMatch",
    "branch_name",
    "build_change_request",
    "change_description",
]
