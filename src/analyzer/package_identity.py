"""Package identity helpers shared by both import extractors.

Resolves a module path to the top-level distributable package and
collapses repeated imports of the same package within one file.
"""
from typing import Dict, Iterable, List

from .models import ImportRecord


def is_relative_import(module_path: str) -> bool:
    """True for local paths ('./utils', '../x', '/abs', '.pkg', '.')."""
    return module_path.startswith('.') or module_path.startswith('/')


def get_top_level_package(module_path: str) -> str:
    """Resolve a module path to its canonical package name.

    Examples:
        '@angular/core/testing' -> '@angular/core'
        '@scope'                -> '@scope'
        'lodash/map'            -> 'lodash'
        'google.generativeai'   -> 'google.generativeai'

    Dotted paths are left alone; only '/' separates sub-paths.
    """
    if module_path.startswith('@'):
        parts = module_path.split('/')
        if len(parts) >= 2:
            return f"{parts[0]}/{parts[1]}"
        return module_path

    slash_index = module_path.find('/')
    if slash_index > 0:
        return module_path[:slash_index]

    return module_path


def deduplicate_imports(imports: Iterable[ImportRecord]) -> List[ImportRecord]:
    """Keep the first record per package name, preserving order."""
    seen: Dict[str, ImportRecord] = {}
    for record in imports:
        if record.package_name not in seen:
            seen[record.package_name] = record
    return list(seen.values())
