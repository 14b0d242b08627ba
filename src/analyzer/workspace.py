"""Workspace scanner: run the import scanner over every source file in a tree.

Builds a bipartite NetworkX graph where edge (file, package) means "file
imports package", so package fan-in is the number of importing files.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple
import networkx as nx

from src.config import Config, get_config
from src.utils.logger import log_debug, log_info, log_warning
from .models import ImportRecord, UsageRecord
from .package_identity import deduplicate_imports
from .parser import SUPPORTED_EXTENSIONS, language_for_path, parse_imports
from .usage_locator import track_usages


EXCLUDED_DIRS = {
    'node_modules', '.venv', 'venv', 'env', '.virtualenv',
    '__pycache__', 'dist', 'build', '.git', '.tox',
    'site-packages', '.mypy_cache', '.pytest_cache',
}


@dataclass
class FileScanResult:
    """Scan output for one file."""
    file_path: str
    language: str
    imports: List[ImportRecord] = field(default_factory=list)
    usages: List[UsageRecord] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


@dataclass
class WorkspaceScanResult:
    """Aggregate scan output for a directory tree."""
    root: str
    files: List[FileScanResult] = field(default_factory=list)
    graph: nx.DiGraph = field(default_factory=nx.DiGraph)
    truncated: bool = False

    @property
    def unique_packages(self) -> List[ImportRecord]:
        """First record seen for each package across all files."""
        return deduplicate_imports(
            record for file_result in self.files for record in file_result.imports
        )

    @property
    def errors(self) -> List[Tuple[str, str]]:
        return [(f.file_path, error) for f in self.files for error in f.errors]

    def package_fan_in(self) -> List[Tuple[str, int]]:
        """Packages ranked by number of importing files (ties by name)."""
        packages = [
            (node, self.graph.in_degree(node))
            for node, data in self.graph.nodes(data=True)
            if data.get('kind') == 'package'
        ]
        return sorted(packages, key=lambda item: (-item[1], item[0]))

    def files_importing(self, package_name: str) -> List[str]:
        if package_name not in self.graph:
            return []
        return sorted(self.graph.predecessors(package_name))


class WorkspaceScanner:
    """Discover source files under a root and scan each one independently."""

    def __init__(self, project_root: str | Path = ".", config: Optional[Config] = None):
        """Initialize scanner.

        Args:
            project_root: Directory to scan
            config: Config to honour (defaults to the global one)
        """
        self.project_root = Path(project_root).resolve()
        self.config = config or get_config()
        self.excluded_dirs: Set[str] = EXCLUDED_DIRS | set(self.config.excluded_dirs)

    def discover_files(self) -> List[Path]:
        """Supported source files under the root, sorted, excluding vendored dirs."""
        files = set()
        for extension in SUPPORTED_EXTENSIONS:
            files.update(self.project_root.rglob(f"*{extension}"))

        return sorted(
            path for path in files
            if path.is_file() and not self._is_excluded(path)
        )

    def _is_excluded(self, path: Path) -> bool:
        relative_parts = path.relative_to(self.project_root).parts[:-1]
        return any(part in self.excluded_dirs for part in relative_parts)

    def scan(self, files: Optional[Iterable[Path]] = None) -> WorkspaceScanResult:
        """Scan every discovered file (or the given files).

        Returns:
            WorkspaceScanResult; per-file failures are recorded, never raised
        """
        candidates = list(files) if files is not None else self.discover_files()
        result = WorkspaceScanResult(root=str(self.project_root))

        max_files = self.config.max_files
        if len(candidates) > max_files:
            log_warning(f"Found {len(candidates)} files, scanning the first {max_files}")
            candidates = candidates[:max_files]
            result.truncated = True

        log_info(f"Scanning {len(candidates)} files under {self.project_root}")

        for file_path in candidates:
            file_result = self.scan_file(file_path)
            if file_result is None:
                continue
            result.files.append(file_result)
            self._add_to_graph(result.graph, file_result)

        log_info(
            f"Found {len(result.unique_packages)} unique packages in {len(result.files)} files"
        )
        return result

    def scan_file(self, file_path: Path) -> Optional[FileScanResult]:
        """Scan a single file, or return None when its language is disabled."""
        file_path = Path(file_path)
        language = language_for_path(file_path) or file_path.suffix.lstrip('.')

        if not self.config.is_language_enabled(language):
            log_debug(f"Skipping {file_path}: language '{language}' disabled")
            return None

        file_result = FileScanResult(file_path=str(file_path), language=language)

        try:
            text = file_path.read_text(encoding='utf-8', errors='replace')
        except (IOError, OSError) as e:
            file_result.errors.append(f"Could not read file: {e}")
            return file_result

        parsed = parse_imports(text, language)
        file_result.errors.extend(parsed.errors)
        file_result.imports = [
            record for record in parsed.imports
            if not self.config.is_package_ignored(record.package_name)
        ]
        file_result.usages = track_usages(text, file_result.imports).usages

        log_debug(
            f"{file_path}: {len(file_result.imports)} imports, "
            f"{len(file_result.usages)} used, {len(file_result.errors)} errors"
        )
        return file_result

    @staticmethod
    def _add_to_graph(graph: nx.DiGraph, file_result: FileScanResult) -> None:
        graph.add_node(file_result.file_path, kind='file', language=file_result.language)
        for record in file_result.imports:
            if record.package_name not in graph:
                graph.add_node(record.package_name, kind='package')
            graph.add_edge(file_result.file_path, record.package_name)
