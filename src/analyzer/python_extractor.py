"""Line-oriented import extractor for Python sources."""
import re
from typing import List, Optional, Tuple

from .models import ImportRecord, Language, ParseResult, Position, SourceRange
from .package_identity import is_relative_import


class PythonImportExtractor:
    """Extract ``import`` and ``from ... import`` statements from Python text.

    Works line by line on the trimmed text. A ``from`` import may pull in
    following lines while its parentheses are open or its line ends with a
    backslash, so one iteration can consume several lines.
    """

    language = Language.PYTHON

    # from package import ...  (dotted names like google.generativeai)
    FROM_IMPORT_REGEX = re.compile(r'^from\s+([\w.]+)\s+import\s+(.+)')

    # import a, b as x, c  (at least one comma)
    MULTI_IMPORT_REGEX = re.compile(
        r'^import\s+([\w.]+(?:\s+as\s+\w+)?(?:\s*,\s*[\w.]+(?:\s+as\s+\w+)?)+)'
    )

    # import package / import package as alias
    IMPORT_REGEX = re.compile(r'^import\s+([\w.]+)(?:\s+as\s+(\w+))?')

    ALIAS_SPLIT = re.compile(r'\s+as\s+')

    def parse(self, text: str) -> ParseResult:
        """Scan the whole text and return records plus non-fatal errors.

        Args:
            text: Complete source of one Python file

        Returns:
            ParseResult with records in source order
        """
        imports: List[ImportRecord] = []
        errors: List[str] = []
        lines = text.split('\n')

        line_index = 0
        while line_index < len(lines):
            line = lines[line_index].strip()

            # Skip empty lines and comments
            if not line or line.startswith('#'):
                line_index += 1
                continue

            try:
                from_match = self.FROM_IMPORT_REGEX.match(line)
                if from_match:
                    record, next_index = self._parse_from_import(from_match, line_index, lines)
                    if record:
                        imports.append(record)
                    line_index = next_index
                    continue

                multi_match = self.MULTI_IMPORT_REGEX.match(line)
                if multi_match:
                    imports.extend(self._parse_multi_import(multi_match, line_index, lines))
                    line_index += 1
                    continue

                import_match = self.IMPORT_REGEX.match(line)
                if import_match:
                    package_name, alias = import_match.group(1), import_match.group(2)
                    if not is_relative_import(package_name):
                        imports.append(ImportRecord(
                            package_name=package_name,
                            raw_statement=lines[line_index],
                            language=self.language,
                            source_range=self._line_range(line_index, line_index, lines),
                            alias=alias,
                        ))
            except Exception as e:
                errors.append(f"Error parsing line {line_index + 1}: {e}")

            line_index += 1

        return ParseResult(imports=imports, errors=errors)

    def _parse_from_import(self, match: re.Match, start_line: int,
                           lines: List[str]) -> Tuple[Optional[ImportRecord], int]:
        """Build the record for a ``from`` import, consuming continuation lines.

        Returns:
            (record or None for relative imports, index of the next unread line)
        """
        package_path = match.group(1)

        if is_relative_import(package_path):
            return None, start_line + 1

        content = _strip_comment(match.group(2))
        depth = content.count('(') - content.count(')')
        end_line = start_line

        while end_line < len(lines) - 1 and (depth > 0 or lines[end_line].rstrip().endswith('\\')):
            end_line += 1
            continuation = _strip_comment(lines[end_line].strip())
            depth += continuation.count('(') - continuation.count(')')
            content += ' ' + continuation

        named_bindings = self._parse_named_bindings(content)

        record = ImportRecord(
            package_name=package_path,
            raw_statement='\n'.join(lines[start_line:end_line + 1]),
            language=self.language,
            source_range=self._line_range(start_line, end_line, lines),
            named_bindings=named_bindings or None,
        )
        return record, end_line + 1

    def _parse_multi_import(self, match: re.Match, line_index: int,
                            lines: List[str]) -> List[ImportRecord]:
        records = []
        for part in match.group(1).split(','):
            pieces = self.ALIAS_SPLIT.split(part.strip())
            package_name = pieces[0].strip()
            alias = pieces[1].strip() if len(pieces) > 1 else None

            if package_name and not is_relative_import(package_name):
                records.append(ImportRecord(
                    package_name=package_name,
                    raw_statement=lines[line_index],
                    language=self.language,
                    source_range=self._line_range(line_index, line_index, lines),
                    alias=alias,
                ))
        return records

    def _parse_named_bindings(self, content: str) -> Tuple[str, ...]:
        """Split ``a, b as c`` into local names ('a', 'c').

        Raises:
            ValueError: If a bound name is not a valid identifier
        """
        # Only the first statement of 'a; b' lines belongs to the import
        content = content.split(';', 1)[0]
        content = re.sub(r'[()\\]', ' ', content)

        names: List[str] = []
        for item in content.split(','):
            item = item.strip()
            if not item or item == '*':
                continue

            pieces = self.ALIAS_SPLIT.split(item)
            local_name = pieces[-1].strip()
            if len(pieces) > 2 or not local_name.isidentifier():
                raise ValueError(f"malformed import name '{item}'")

            if local_name not in names:
                names.append(local_name)

        return tuple(names)

    @staticmethod
    def _line_range(start_line: int, end_line: int, lines: List[str]) -> SourceRange:
        return SourceRange(
            Position(start_line, 0),
            Position(end_line, len(lines[end_line])),
        )


def _strip_comment(text: str) -> str:
    """Drop a trailing '#' comment from an import fragment."""
    hash_index = text.find('#')
    if hash_index != -1:
        return text[:hash_index].rstrip()
    return text
