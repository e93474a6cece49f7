"""Shared data models used across a11ylocate modules."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Union


class _Ranked(enum.Enum):
    """Enum whose members compare by declaration order."""

    @property
    def rank(self) -> int:
        return list(type(self)).index(self)

    def __lt__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.rank >= other.rank


class Severity(_Ranked):
    MINOR = "minor"
    MODERATE = "moderate"
    SERIOUS = "serious"
    CRITICAL = "critical"


class Confidence(_Ranked):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class Finding:
    """A single issue found on a page by the accessibility scanner."""

    id: str
    rule_id: str
    rule_title: str
    severity: Severity
    selector: str
    html: str
    wcag_tags: tuple[str, ...] = ()
    help_url: str = ""
    page: str = ""


@dataclass(frozen=True)
class OriginalCode:
    code: str
    selector: str
    language: str = "html"


@dataclass(frozen=True)
class Fix:
    """A generated replacement for a finding's markup."""

    finding_id: str
    original: OriginalCode
    fixes: dict[str, str]
    explanation: str = ""
    confidence: str = "medium"
    effort: str = "medium"
    wcag_criteria: tuple[str, ...] = ()

    @property
    def primary_code(self) -> str:
        if "html" in self.fixes:
            return self.fixes["html"]
        return next(iter(self.fixes.values()), "")


@dataclass
class FindingWithFix:
    """A finding selected for remediation, with the path being mapped to it."""

    finding: Finding
    fix: Fix | None = None
    file_path: str = ""
    show_search: bool = False

    @property
    def has_path(self) -> bool:
        return bool(self.file_path.strip())


@dataclass(frozen=True)
class RepositoryContext:
    owner: str
    name: str
    branch: str
    default_branch: str = "main"

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


# Detection outcomes

NO_SIGNAL_REASON = "No searchable content found"
NO_MATCH_REASON = "No matching files found"
WEAK_MATCH_REASON = "File found, but exact code location unclear"


@dataclass(frozen=True)
class NoSignal:
    """No usable query could be built from the finding."""

    reason: str = NO_SIGNAL_REASON
    path: str = ""
    confidence: Confidence = Confidence.LOW
    is_resolved = False


@dataclass(frozen=True)
class NoMatch:
    """Every query ran but none located a candidate file."""

    reason: str = NO_MATCH_REASON
    path: str = ""
    confidence: Confidence = Confidence.LOW
    is_resolved = False


@dataclass(frozen=True)
class WeakMatch:
    """A file was located but the fragment could not be pinned inside it."""

    path: str
    reason: str = WEAK_MATCH_REASON
    confidence: Confidence = Confidence.LOW
    is_resolved = True


@dataclass(frozen=True)
class Match:
    """The verifier confirmed the fragment inside ``path``."""

    path: str
    confidence: Confidence
    reason: str = ""
    line_start: int | None = None
    line_end: int | None = None
    is_resolved = True


DetectionOutcome = Union[NoSignal, NoMatch, WeakMatch, Match]


@dataclass
class DetectionState:
    """Lifecycle of file detection for one finding."""

    in_progress: bool = False
    result: DetectionOutcome | None = None
    show_preview: bool = False

    @property
    def is_idle(self) -> bool:
        return not self.in_progress and self.result is None
