"""Regex-based import extractor for JavaScript and TypeScript sources.

Four independent passes over the whole text:
1. ES module imports   import x, { a as b } from 'pkg' / import * as ns from 'pkg'
2. CommonJS requires   const { a } = require('pkg')
3. Dynamic imports     import('pkg')
4. Re-exports          export * from 'pkg' / export { a } from 'pkg'

Relative specifiers ('./x', '../x', '/x') are dropped. Results are
deduplicated by package name, first pass match wins.
"""
import re
from typing import Callable, List, Tuple

from .models import ImportRecord, Language, ParseResult
from .package_identity import deduplicate_imports, get_top_level_package, is_relative_import
from .text_index import TextIndex


class JsTsImportExtractor:
    """Extract module imports from JavaScript/TypeScript text."""

    ES_IMPORT_REGEX = re.compile(
        r"""(?<![\w$.])import\s+(?:type\s+)?"""
        r"""(?:(?:(?P<default>[\w$]+)(?:\s*,\s*)?)?"""
        r"""(?:\{(?P<named>[^}]*)\}|\*\s*as\s+(?P<namespace>[\w$]+))?"""
        r"""\s*from\s*)?"""
        r"""['"](?P<path>[^'"\n]+)['"]"""
    )

    REQUIRE_REGEX = re.compile(
        r"""(?<![\w$.])(?:const|let|var)\s+(?:(?P<default>[\w$]+)|\{(?P<named>[^}]*)\})"""
        r"""\s*=\s*require\s*\(\s*['"](?P<path>[^'"\n]+)['"]\s*\)"""
    )

    DYNAMIC_IMPORT_REGEX = re.compile(r"""(?<![\w$.])import\s*\(\s*['"](?P<path>[^'"\n]+)['"]\s*\)""")

    REEXPORT_REGEX = re.compile(
        r"""(?<![\w$.])export\s+(?:type\s+)?(?:\*(?:\s+as\s+[\w$]+)?|\{[^}]*\})\s*from\s*['"](?P<path>[^'"\n]+)['"]"""
    )

    IDENTIFIER_REGEX = re.compile(r'^[A-Za-z_$][\w$]*$')

    def __init__(self, language: Language = Language.JAVASCRIPT):
        """Initialize extractor.

        Args:
            language: Language tag stamped on every record (javascript or typescript)
        """
        self.language = language

    def parse(self, text: str) -> ParseResult:
        """Run all four passes over ``text``.

        A failing pass is reported in ``errors``; the remaining passes still run.
        """
        imports: List[ImportRecord] = []
        errors: List[str] = []
        index = TextIndex(text)

        passes = [
            (self.ES_IMPORT_REGEX, self._es_import_shape),
            (self.REQUIRE_REGEX, self._require_shape),
            (self.DYNAMIC_IMPORT_REGEX, self._dynamic_import_shape),
            (self.REEXPORT_REGEX, self._reexport_shape),
        ]

        for regex, shape in passes:
            try:
                imports.extend(self._run_pass(regex, shape, text, index))
            except Exception as e:
                errors.append(f"Error parsing imports: {e}")

        return ParseResult(imports=deduplicate_imports(imports), errors=errors)

    def _run_pass(self, regex: re.Pattern, shape: Callable, text: str, index: TextIndex) -> List[ImportRecord]:
        records = []
        for match in regex.finditer(text):
            module_path = match.group('path').strip()
            if not module_path or is_relative_import(module_path):
                continue

            named_bindings, is_default, is_require, alias = shape(match)

            records.append(ImportRecord(
                package_name=get_top_level_package(module_path),
                raw_statement=match.group(0),
                language=self.language,
                source_range=index.range_of(match.start(), match.end()),
                named_bindings=named_bindings,
                is_default_binding=is_default,
                is_require_form=is_require,
                alias=alias,
            ))
        return records

    # ------------------------------------------------------------------
    # Shape interpreters: (named_bindings, is_default, is_require, alias)
    # ------------------------------------------------------------------

    def _es_import_shape(self, match: re.Match):
        default_name = match.group('default')
        namespace_name = match.group('namespace')
        named = match.group('named')
        named_bindings = self._parse_named_bindings(named, separator=r'\s+as\s+') if named is not None else None
        alias = default_name or namespace_name
        # import x, * as ns: the default keeps the alias, ns is still bound
        if default_name and namespace_name:
            named_bindings = (namespace_name,)
        return named_bindings or None, bool(alias), False, alias

    def _require_shape(self, match: re.Match):
        default_name = match.group('default')
        named = match.group('named')
        named_bindings = self._parse_named_bindings(named, separator=r'\s*:\s*') if named is not None else None
        return named_bindings or None, bool(default_name), True, default_name

    def _dynamic_import_shape(self, match: re.Match):
        return None, None, False, None

    def _reexport_shape(self, match: re.Match):
        return None, None, False, None

    def _parse_named_bindings(self, block: str, separator: str) -> Tuple[str, ...]:
        """Resolve ``{ a, b as c }`` (or ``{ a, b: c }``) to local names.

        Names that are not plain identifiers (nested destructuring, rest
        elements) are skipped.
        """
        names: List[str] = []
        for item in block.split(','):
            item = item.strip()
            if not item:
                continue

            item = re.sub(r'^type\s+', '', item)      # import { type Foo }
            item = item.split('=', 1)[0].strip()       # const { a = 1 } = require(...)
            local_name = re.split(separator, item)[-1].strip()

            if self.IDENTIFIER_REGEX.match(local_name) and local_name not in names:
                names.append(local_name)

        return tuple(names)
