"""Configuration management for Darwin.

Loads environment variables (optionally from a .env file) and provides
centralized config access.
"""
import os
from pathlib import Path
from typing import List, Optional
from dotenv import load_dotenv

from src.analyzer.parser import editor_tag

__version__ = "1.2.0"

DEFAULT_ENABLED_LANGUAGES = [
    'python',
    'javascript',
    'typescript',
    'javascriptreact',
    'typescriptreact',
]


def _split_list(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(',') if item.strip()]


class Config:
    """Configuration loader with environment variable support."""

    def __init__(self, env_path: Optional[Path] = None):
        """Initialize config by loading .env file.

        Args:
            env_path: Explicit .env location (defaults to the project root)
        """
        if env_path is None:
            env_path = Path(__file__).parent.parent / ".env"
        load_dotenv(env_path)

    @property
    def enabled_languages(self) -> List[str]:
        """Language tags that scans may process.

        Returns:
            Tags from DARWIN_ENABLED_LANGUAGES, or all supported editor tags
        """
        languages = _split_list(os.getenv("DARWIN_ENABLED_LANGUAGES"))
        return [lang.lower() for lang in languages] or list(DEFAULT_ENABLED_LANGUAGES)

    @property
    def ignored_packages(self) -> List[str]:
        """Package names dropped from scan output."""
        return _split_list(os.getenv("DARWIN_IGNORED_PACKAGES"))

    @property
    def excluded_dirs(self) -> List[str]:
        """Extra directory names skipped by workspace scans."""
        return _split_list(os.getenv("DARWIN_EXCLUDED_DIRS"))

    @property
    def max_files(self) -> int:
        """Upper bound on files per workspace scan.

        Raises:
            ValueError: If DARWIN_MAX_FILES is not a positive integer
        """
        raw = os.getenv("DARWIN_MAX_FILES", "1000")
        try:
            value = int(raw)
        except ValueError:
            raise ValueError(f"DARWIN_MAX_FILES must be an integer, got '{raw}'")
        if value <= 0:
            raise ValueError(f"DARWIN_MAX_FILES must be positive, got {value}")
        return value

    @property
    def debug(self) -> bool:
        return os.getenv("DARWIN_DEBUG", "").lower() in {"1", "true", "yes", "on"}

    def is_language_enabled(self, language_tag: str) -> bool:
        """Check a tag against DARWIN_ENABLED_LANGUAGES.

        Short tags are compared by editor language id, so 'py' follows
        'python' and 'tsx' follows 'typescriptreact'.
        """
        tag = editor_tag(language_tag)
        if tag is None:
            return False
        return tag in {editor_tag(enabled) for enabled in self.enabled_languages}

    def is_package_ignored(self, package_name: str) -> bool:
        return package_name in self.ignored_packages


# Singleton instance
_config = None


def get_config() -> Config:
    """Get or create singleton Config instance.

    Returns:
        Config instance
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Drop the cached Config so the next get_config() re-reads the environment."""
    global _config
    _config = None
