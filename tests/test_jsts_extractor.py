"""Tests for the JavaScript/TypeScript import extractor."""

import pytest
from src.analyzer.jsts_extractor import JsTsImportExtractor
from src.analyzer.models import Language, Position


@pytest.fixture
def extractor():
    return JsTsImportExtractor(Language.JAVASCRIPT)


class TestESModuleImports:
    """Test 'import ... from' statements."""

    def test_scoped_default_import(self, extractor):
        result = extractor.parse("import x from '@angular/core';\n")

        assert len(result.imports) == 1
        record = result.imports[0]
        assert record.package_name == '@angular/core'
        assert record.is_default_binding is True
        assert record.is_require_form is False
        assert record.alias == 'x'
        assert record.raw_statement == "import x from '@angular/core'"

    def test_named_imports_resolve_aliases(self, extractor):
        result = extractor.parse("import { useState, useEffect as effect } from 'react';\n")

        record = result.imports[0]
        assert record.named_bindings == ('useState', 'effect')
        assert record.is_default_binding is False
        assert record.alias is None

    def test_default_and_named(self, extractor):
        result = extractor.parse('import React, { Component } from "react";\n')

        record = result.imports[0]
        assert record.alias == 'React'
        assert record.named_bindings == ('Component',)
        assert record.is_default_binding is True

    def test_namespace_import(self, extractor):
        result = extractor.parse("import * as fs from 'fs-extra';\n")

        record = result.imports[0]
        assert record.package_name == 'fs-extra'
        assert record.alias == 'fs'
        assert record.is_default_binding is True

    def test_default_and_namespace_keeps_both_names(self, extractor):
        result = extractor.parse("import x, * as ns from 'pkg';\n")

        record = result.imports[0]
        assert record.alias == 'x'
        assert record.named_bindings == ('ns',)
        assert record.is_default_binding is True

    def test_side_effect_import(self, extractor):
        result = extractor.parse("import 'core-js/stable';\n")

        record = result.imports[0]
        assert record.package_name == 'core-js'
        assert record.is_default_binding is False

    def test_type_only_import(self):
        extractor = JsTsImportExtractor(Language.TYPESCRIPT)
        result = extractor.parse("import type { Foo } from 'types-pkg';\n")

        record = result.imports[0]
        assert record.named_bindings == ('Foo',)
        assert record.language == Language.TYPESCRIPT

    def test_multiline_import_range_from_offsets(self, extractor):
        text = "import {\n  a,\n  b\n} from 'pkg';\n"
        result = extractor.parse(text)

        record = result.imports[0]
        assert record.named_bindings == ('a', 'b')
        assert record.source_range.start == Position(0, 0)
        assert record.source_range.end == Position(3, 12)
        assert record.raw_statement == "import {\n  a,\n  b\n} from 'pkg'"


class TestRequireAndDynamic:
    """Test CommonJS require and dynamic import()."""

    def test_require_resolves_subpath(self, extractor):
        result = extractor.parse("const map = require('lodash/map');\n")

        record = result.imports[0]
        assert record.package_name == 'lodash'
        assert record.is_require_form is True
        assert record.is_default_binding is True
        assert record.alias == 'map'

    def test_destructured_require(self, extractor):
        result = extractor.parse("const { join, resolve: res } = require('upath');\n")

        record = result.imports[0]
        assert record.named_bindings == ('join', 'res')
        assert record.is_default_binding is False
        assert record.is_require_form is True

    def test_dynamic_import(self, extractor):
        result = extractor.parse("const chart = await import('chart.js');\n")

        record = result.imports[0]
        assert record.package_name == 'chart.js'
        assert record.is_require_form is False
        assert record.raw_statement == "import('chart.js')"

    @pytest.mark.parametrize("text", [
        "import('./local');\n",
        "import helper from '../helper';\n",
        "const cfg = require('/etc/config');\n",
        "export * from './components';\n",
    ])
    def test_relative_paths_produce_nothing(self, extractor, text):
        result = extractor.parse(text)

        assert result.imports == []
        assert result.errors == []


class TestReexportsAndDedup:
    """Test re-exports and package-level deduplication."""

    def test_reexport_resolves_scope(self, extractor):
        result = extractor.parse("export * from '@scope/pkg/sub';\nexport { a } from 'other';\n")

        assert [r.package_name for r in result.imports] == ['@scope/pkg', 'other']
        assert all(r.is_require_form is False for r in result.imports)

    def test_first_occurrence_wins(self, extractor):
        text = "import a from 'lodash';\nconst b = require('lodash/fp');\n"
        result = extractor.parse(text)

        assert len(result.imports) == 1
        assert result.imports[0].is_require_form is False
        assert result.imports[0].source_range.start.line == 0

    def test_identifier_ending_in_import_is_not_matched(self, extractor):
        result = extractor.parse("reimport('thing');\nobj.import('other');\n")

        assert result.imports == []
