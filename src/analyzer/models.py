"""Records produced by the import scanner.

Every record is immutable and created fresh per scan call. Callers own
what they receive; nothing here is cached or shared between calls.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class Language(str, Enum):
    """Canonical languages understood by the extractors."""
    PYTHON = 'python'
    JAVASCRIPT = 'javascript'
    TYPESCRIPT = 'typescript'


class UsageKind(str, Enum):
    """How an imported identifier is used at one location."""
    FUNCTION_CALL = 'function_call'
    ATTRIBUTE_ACCESS = 'attribute_access'
    CLASS_INSTANTIATION = 'class_instantiation'
    REFERENCE = 'reference'


@dataclass(frozen=True, order=True)
class Position:
    """Zero-based line and column in a text."""
    line: int
    column: int


@dataclass(frozen=True)
class SourceRange:
    """Half-open span between two positions."""
    start: Position
    end: Position

    def contains(self, other: 'SourceRange') -> bool:
        """Return True if ``other`` lies entirely inside this range."""
        return self.start <= other.start and other.end <= self.end

    def overlaps(self, other: 'SourceRange') -> bool:
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True)
class ImportRecord:
    """One parsed import, require, dynamic import or re-export."""
    package_name: str
    raw_statement: str
    language: Language
    source_range: SourceRange
    named_bindings: Optional[Tuple[str, ...]] = None  # local names, aliases win
    is_default_binding: Optional[bool] = None  # JS/TS only
    is_require_form: Optional[bool] = None  # JS/TS only
    alias: Optional[str] = None  # local name of a plain/default binding


@dataclass(frozen=True)
class UsageLocation:
    """A single textual use of an imported identifier."""
    range: SourceRange
    identifier: str
    usage_kind: UsageKind


@dataclass(frozen=True)
class UsageRecord:
    """All surviving usages of one import. Never built with zero locations."""
    import_record: ImportRecord
    locations: Tuple[UsageLocation, ...]

    def __post_init__(self):
        if not self.locations:
            raise ValueError(
                f"UsageRecord for '{self.import_record.package_name}' needs at least one location"
            )


@dataclass(frozen=True)
class ParseResult:
    """Output of one extraction pass over a file."""
    imports: List[ImportRecord] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class UsageTrackingResult:
    """Output of one usage scan over a file."""
    usages: List[UsageRecord] = field(default_factory=list)

    @property
    def total_usage_count(self) -> int:
        return sum(len(usage.locations) for usage in self.usages)
