"""Usage locator: find where imported names are used within the same file.

Text-level heuristics, not a tokenizer:
- an identifier only counts when a usage-context character follows it
  (``np.`` / ``Flask(`` / ``x, `` ...); a bare word at the end of a line does
  not count
- comment and string detection only looks at the line holding the match, so
  text inside a triple-quoted string opened on an earlier line is still
  reported
"""
import re
from typing import List, Optional

from .models import (
    ImportRecord,
    Language,
    UsageKind,
    UsageLocation,
    UsageRecord,
    UsageTrackingResult,
)
from .text_index import TextIndex


# Characters that may follow an identifier for it to count as a usage
FOLLOW_CHARACTERS = r'.()\[\]{},:=+\-*/<>!&|^%@ \t'

COMMENT_MARKERS = {
    Language.PYTHON: '#',
    Language.JAVASCRIPT: '//',
    Language.TYPESCRIPT: '//',
}


class UsageLocator:
    """Locate textual usages of each import's bound identifiers."""

    def __init__(self, text: str):
        """Initialize locator for one file.

        Args:
            text: Complete text the import records were extracted from
        """
        self.text = text
        self.index = TextIndex(text)

    def track_usages(self, imports: List[ImportRecord]) -> UsageTrackingResult:
        """Build one UsageRecord per import that has at least one usage.

        Args:
            imports: Records extracted from the same text, in caller order

        Returns:
            UsageTrackingResult with records in the order imports were given
        """
        usages: List[UsageRecord] = []

        for record in imports:
            locations = self.find_usages(record)
            if locations:
                usages.append(UsageRecord(import_record=record, locations=tuple(locations)))

        return UsageTrackingResult(usages=usages)

    def find_usages(self, record: ImportRecord) -> List[UsageLocation]:
        locations: List[UsageLocation] = []
        for identifier in bound_identifiers(record):
            locations.extend(self._find_identifier_usages(identifier, record))
        return locations

    def _find_identifier_usages(self, identifier: str, record: ImportRecord) -> List[UsageLocation]:
        locations: List[UsageLocation] = []
        if not identifier:
            return locations

        comment_marker = COMMENT_MARKERS.get(record.language, '#')
        pattern = re.compile(
            rf'(?<!\w){re.escape(identifier)}(?=[ \t]*[{FOLLOW_CHARACTERS}])'
        )

        for match in pattern.finditer(self.text):
            start, end = match.start(), match.end()
            usage_range = self.index.range_of(start, end)

            # Mentions inside the import statement itself are not usages
            if record.source_range.contains(usage_range):
                continue

            if self._is_within_comment_or_string(start, comment_marker):
                continue

            locations.append(UsageLocation(
                range=usage_range,
                identifier=identifier,
                usage_kind=classify_usage(self.text, identifier, end),
            ))

        return locations

    def _is_within_comment_or_string(self, offset: int, comment_marker: str) -> bool:
        """Line-local check for a comment or string around ``offset``."""
        position = self.index.position_at(offset)
        line = self.index.line_text(position.line)
        before = line[:position.column]

        comment_start = find_comment_start(line, comment_marker)
        if comment_start is not None and position.column > comment_start:
            return True

        single_quotes = before.count("'") - before.count("'''") * 3
        double_quotes = before.count('"') - before.count('"""') * 3

        # Odd quote count before the match means we're inside a string
        return single_quotes % 2 != 0 or double_quotes % 2 != 0


def bound_identifiers(record: ImportRecord) -> List[str]:
    """Local names an import introduces into the file.

    ``import numpy as np`` -> ['np']
    ``from flask import Flask, request as req`` -> ['Flask', 'req']
    ``import google.generativeai`` -> ['generativeai']
    ``import React, { useState } from 'react'`` -> ['React', 'useState']
    """
    identifiers: List[str] = []
    if record.alias:
        identifiers.append(record.alias)
    for name in record.named_bindings or ():
        if name not in identifiers:
            identifiers.append(name)

    if not identifiers:
        identifiers.append(record.package_name.split('.')[-1])

    return identifiers


def find_comment_start(line: str, marker: str = '#') -> Optional[int]:
    """Column of the first unescaped comment marker outside a string, if any."""
    quote: Optional[str] = None
    column = 0
    while column < len(line):
        char = line[column]
        if char == '\\':
            column += 2
            continue
        if quote:
            if char == quote:
                quote = None
        elif char in ('"', "'") or (char == '`' and marker == '//'):
            quote = char
        elif line.startswith(marker, column):
            return column
        column += 1
    return None


def classify_usage(text: str, identifier: str, end_offset: int) -> UsageKind:
    """Decide the usage kind from the characters right after the identifier."""
    following = text[end_offset:end_offset + 10].strip()

    if following.startswith('('):
        first = identifier[0]
        # Capitalised names being called are treated as classes
        if first.isupper() and first != first.lower():
            return UsageKind.CLASS_INSTANTIATION
        return UsageKind.FUNCTION_CALL

    if following.startswith('.'):
        return UsageKind.ATTRIBUTE_ACCESS

    return UsageKind.REFERENCE


def track_usages(text: str, imports: List[ImportRecord]) -> UsageTrackingResult:
    """Track usages of ``imports`` in ``text``."""
    return UsageLocator(text).track_usages(imports)

