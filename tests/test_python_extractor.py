"""Tests for the Python import extractor.

Covers the three statement shapes (from-import, multi-import, simple import),
continuation lines, relative imports, comments and per-line error recovery.
"""

import pytest
from src.analyzer.models import Language, Position
from src.analyzer.python_extractor import PythonImportExtractor
from src.analyzer.text_index import TextIndex


@pytest.fixture
def extractor():
    return PythonImportExtractor()


def _source_slice(text, record):
    index = TextIndex(text)
    start = index.offset_at(record.source_range.start)
    end = index.offset_at(record.source_range.end)
    return text[start:end]


class TestFromImport:
    """Test 'from X import a, b as c' parsing."""

    def test_dotted_package_is_not_truncated(self, extractor):
        result = extractor.parse("from google.generativeai import GenerativeModel\n")

        assert len(result.imports) == 1
        record = result.imports[0]
        assert record.package_name == 'google.generativeai'
        assert record.named_bindings == ('GenerativeModel',)
        assert record.language == Language.PYTHON
        assert record.is_default_binding is None
        assert record.is_require_form is None

    def test_aliases_win_over_original_names(self, extractor):
        result = extractor.parse("from flask import request as req, Flask\n")

        assert result.imports[0].named_bindings == ('req', 'Flask')

    def test_star_import_has_no_named_bindings(self, extractor):
        result = extractor.parse("from os.path import *\n")

        assert result.imports[0].package_name == 'os.path'
        assert result.imports[0].named_bindings is None

    @pytest.mark.parametrize("line", [
        "from . import x",
        "from .models import User",
        "from ..utils import helper",
    ])
    def test_relative_imports_are_skipped(self, extractor, line):
        result = extractor.parse(line + "\n")

        assert result.imports == []
        assert result.errors == []

    def test_parenthesized_import_spans_all_lines(self, extractor):
        text = (
            "from typing import (\n"
            "    List,\n"
            "    Optional,  # used below\n"
            ")\n"
            "x = 1\n"
        )
        result = extractor.parse(text)

        assert len(result.imports) == 1
        record = result.imports[0]
        assert record.named_bindings == ('List', 'Optional')
        assert record.source_range.start == Position(0, 0)
        assert record.source_range.end == Position(3, 1)
        assert record.raw_statement == "from typing import (\n    List,\n    Optional,  # used below\n)"
        assert _source_slice(text, record) == record.raw_statement

    def test_backslash_continuation(self, extractor):
        text = "from os.path import join, \\\n    exists\nimport sys\n"
        result = extractor.parse(text)

        assert [r.package_name for r in result.imports] == ['os.path', 'sys']
        record = result.imports[0]
        assert record.named_bindings == ('join', 'exists')
        assert record.source_range.end == Position(1, 10)
        assert _source_slice(text, record) == record.raw_statement

    def test_unclosed_parenthesis_consumes_to_end(self, extractor):
        text = "from typing import (\n    List,\n    Dict"
        result = extractor.parse(text)

        assert len(result.imports) == 1
        assert result.imports[0].source_range.end == Position(2, 8)
        assert result.imports[0].named_bindings == ('List', 'Dict')


class TestPlainImports:
    """Test 'import a, b as x' and 'import a.b.c as alias' parsing."""

    def test_multi_import_yields_one_record_per_package(self, extractor):
        result = extractor.parse("import os, sys as system, json\n")

        assert [r.package_name for r in result.imports] == ['os', 'sys', 'json']
        assert [r.alias for r in result.imports] == [None, 'system', None]
        assert all(r.named_bindings is None for r in result.imports)
        assert all(r.raw_statement == "import os, sys as system, json" for r in result.imports)

    def test_simple_import_keeps_full_dotted_path(self, extractor):
        result = extractor.parse("import a.b.c\n")

        assert result.imports[0].package_name == 'a.b.c'
        assert result.imports[0].alias is None

    def test_simple_import_with_alias(self, extractor):
        result = extractor.parse("import numpy as np\n")

        record = result.imports[0]
        assert record.package_name == 'numpy'
        assert record.alias == 'np'
        assert record.source_range.start == Position(0, 0)
        assert record.source_range.end == Position(0, 18)

    def test_indented_import_range_covers_whole_line(self, extractor):
        text = "def f():\n    import json\n"
        result = extractor.parse(text)

        record = result.imports[0]
        assert record.raw_statement == "    import json"
        assert record.source_range.start == Position(1, 0)
        assert record.source_range.end == Position(1, 15)


class TestSkippingAndErrors:
    """Test comments, unrecognized lines and error recovery."""

    def test_commented_import_is_ignored(self, extractor):
        result = extractor.parse("# import requests\n")

        assert result.imports == []

    def test_unrecognized_lines_are_not_errors(self, extractor):
        result = extractor.parse("x = 1\nprint('import os')\n\n")

        assert result.imports == []
        assert result.errors == []

    def test_malformed_statement_does_not_stop_scan(self, extractor):
        text = "from pkg import a b\nimport os\n"
        result = extractor.parse(text)

        assert [r.package_name for r in result.imports] == ['os']
        assert len(result.errors) == 1
        assert result.errors[0].startswith("Error parsing line 1:"), result.errors

    def test_duplicates_are_left_to_the_deduplicator(self, extractor):
        result = extractor.parse("import os\nimport os\n")

        assert len(result.imports) == 2

    def test_records_do_not_overlap(self, extractor):
        text = (
            "import os\n"
            "from typing import (\n"
            "    Any,\n"
            ")\n"
            "import requests as rq\n"
        )
        records = extractor.parse(text).imports

        assert len(records) == 3
        for first, second in zip(records, records[1:]):
            assert not first.source_range.overlaps(second.source_range)
