"""Language dispatch for the import extractors."""
from pathlib import Path
from typing import Optional, Union

from .jsts_extractor import JsTsImportExtractor
from .models import Language, ParseResult
from .package_identity import deduplicate_imports
from .python_extractor import PythonImportExtractor


# Editor language ids and common short tags -> canonical language
LANGUAGE_TAGS = {
    'python': Language.PYTHON,
    'py': Language.PYTHON,
    'javascript': Language.JAVASCRIPT,
    'javascriptreact': Language.JAVASCRIPT,
    'js': Language.JAVASCRIPT,
    'jsx': Language.JAVASCRIPT,
    'mjs': Language.JAVASCRIPT,
    'cjs': Language.JAVASCRIPT,
    'typescript': Language.TYPESCRIPT,
    'typescriptreact': Language.TYPESCRIPT,
    'ts': Language.TYPESCRIPT,
    'tsx': Language.TYPESCRIPT,
}

SUPPORTED_EXTENSIONS = {
    '.py': 'python',
    '.js': 'javascript',
    '.mjs': 'javascript',
    '.cjs': 'javascript',
    '.jsx': 'javascriptreact',
    '.ts': 'typescript',
    '.tsx': 'typescriptreact',
}

ImportExtractor = Union[PythonImportExtractor, JsTsImportExtractor]


def canonical_language(language_tag: str) -> Optional[Language]:
    """Map a language tag (case-insensitive) to its canonical language."""
    if not language_tag:
        return None
    return LANGUAGE_TAGS.get(language_tag.strip().lower())


def editor_tag(language_tag: str) -> Optional[str]:
    """Map a short tag ('py', 'tsx', 'mjs') to its editor language id.

    Editor ids ('python', 'typescriptreact', ...) map to themselves.
    """
    if not language_tag:
        return None
    tag = language_tag.strip().lower()
    if tag in SUPPORTED_EXTENSIONS.values():
        return tag
    return SUPPORTED_EXTENSIONS.get(f".{tag}")


def get_extractor(language_tag: str) -> Optional[ImportExtractor]:
    """Pick the extractor for a language tag.

    Returns:
        A fresh extractor, or None if the tag is not supported
    """
    language = canonical_language(language_tag)
    if language is None:
        return None
    if language == Language.PYTHON:
        return PythonImportExtractor()
    return JsTsImportExtractor(language)


def is_supported_language(language_tag: str) -> bool:
    return canonical_language(language_tag) is not None


def language_for_path(file_path: Union[str, Path]) -> Optional[str]:
    """Language tag for a file based on its extension, or None."""
    return SUPPORTED_EXTENSIONS.get(Path(file_path).suffix.lower())


def parse_imports(text: str, language_tag: str) -> ParseResult:
    """Extract deduplicated import records from one file's text.

    Never raises: an unsupported tag yields no records and a single error.

    Args:
        text: Complete file text
        language_tag: 'python', 'typescriptreact', 'js', ...

    Returns:
        ParseResult with one record per package (first occurrence kept)
    """
    extractor = get_extractor(language_tag)

    if extractor is None:
        return ParseResult(imports=[], errors=[f"Unsupported language: {language_tag}"])

    result = extractor.parse(text)
    return ParseResult(imports=deduplicate_imports(result.imports), errors=list(result.errors))
