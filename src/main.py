"""Darwin CLI - find third-party imports and where each one is used."""
from pathlib import Path
from typing import List, Optional
import typer
from rich.table import Table
from rich.markup import escape

from src.utils.safe_console import SafeConsole
from src.utils.logger import log_debug, log_error
from src.config import __version__, get_config
from src.analyzer.models import ImportRecord, ParseResult
from src.analyzer.parser import (
    LANGUAGE_TAGS,
    SUPPORTED_EXTENSIONS,
    is_supported_language,
    language_for_path,
    parse_imports,
)
from src.analyzer.usage_locator import bound_identifiers, track_usages
from src.analyzer.workspace import WorkspaceScanner

app = typer.Typer(
    name="darwin",
    help="Scan source files for third-party imports and their usages",
    add_completion=False
)
console = SafeConsole()


def _format_range(record_range) -> str:
    start, end = record_range.start, record_range.end
    if start.line == end.line:
        return f"{start.line + 1}:{start.column + 1}-{end.column + 1}"
    return f"{start.line + 1}:{start.column + 1}-{end.line + 1}:{end.column + 1}"


def _load_file(file_path: str, language: Optional[str]) -> tuple[Path, str, str]:
    """Resolve path and language for a single-file command, exiting on failure."""
    path = Path(file_path).resolve()

    if not path.is_file():
        console.print_error(f"File does not exist: {path}")
        raise typer.Exit(1)

    language = language or language_for_path(path)
    if not language:
        console.print_error(f"Cannot infer language for '{path.name}'. Pass --language.")
        raise typer.Exit(1)

    if not is_supported_language(language):
        console.print_error(f"Unsupported language: {language}")
        raise typer.Exit(1)

    if not get_config().is_language_enabled(language):
        console.print_warning(f"Scanning for {language} is disabled in settings")
        raise typer.Exit(1)

    try:
        text = path.read_text(encoding='utf-8', errors='replace')
    except (IOError, OSError) as e:
        log_error(f"Failed to read {path}", e)
        console.print_error(f"Could not read {path}: {e}")
        raise typer.Exit(1)

    return path, language, text


def _scan_file(text: str, language: str) -> ParseResult:
    config = get_config()
    result = parse_imports(text, language)
    imports = [r for r in result.imports if not config.is_package_ignored(r.package_name)]
    return ParseResult(imports=imports, errors=result.errors)


def _print_errors(errors: List[str]) -> None:
    for error in errors:
        console.print_warning(error)


def _binding_summary(record: ImportRecord) -> str:
    parts = []
    if record.alias:
        parts.append(f"as {record.alias}")
    if record.named_bindings:
        parts.append("{" + ", ".join(record.named_bindings) + "}")
    return " ".join(parts)


@app.command()
def imports(
    file_path: str = typer.Argument(..., help="Source file to scan"),
    language: Optional[str] = typer.Option(None, "--language", "-l", help="Language tag (python, javascript, typescript, ...)"),
):
    """List the third-party imports declared in a file."""
    path, language, text = _load_file(file_path, language)
    result = _scan_file(text, language)
    log_debug(f"{path}: {len(result.imports)} imports")

    if not result.imports:
        console.print(f"[bold green]No external imports found in {escape(path.name)}[/bold green]")
    else:
        table = Table(title=f"Imports: {escape(path.name)}")
        table.add_column("Package", style="cyan")
        table.add_column("Location", style="green")
        table.add_column("Bindings", style="yellow")
        table.add_column("Form", style="magenta")

        for record in result.imports:
            form = "require" if record.is_require_form else "import"
            table.add_row(
                escape(record.package_name),
                _format_range(record.source_range),
                escape(_binding_summary(record)),
                form,
            )
        console.print(table)

    _print_errors(result.errors)


@app.command()
def usages(
    file_path: str = typer.Argument(..., help="Source file to scan"),
    language: Optional[str] = typer.Option(None, "--language", "-l", help="Language tag (python, javascript, typescript, ...)"),
):
    """Show where each imported name is used in a file."""
    path, language, text = _load_file(file_path, language)
    result = _scan_file(text, language)
    tracking = track_usages(text, result.imports)

    if not tracking.usages:
        console.print(f"[bold green]No usages of imported names found in {escape(path.name)}[/bold green]")
    else:
        table = Table(title=f"Usages: {escape(path.name)}")
        table.add_column("Package", style="cyan")
        table.add_column("Identifier", style="yellow")
        table.add_column("Location", style="green")
        table.add_column("Kind", style="magenta")

        for usage in tracking.usages:
            for location in usage.locations:
                table.add_row(
                    escape(usage.import_record.package_name),
                    escape(location.identifier),
                    _format_range(location.range),
                    location.usage_kind.value,
                )
        console.print(table)

    used_records = {usage.import_record for usage in tracking.usages}
    unused = [record for record in result.imports if record not in used_records]
    console.print(f"\n[bold yellow]Summary:[/bold yellow]")
    console.print(f"  Imports: {len(result.imports)}")
    console.print(f"  Usages: {tracking.total_usage_count}")
    if unused:
        names = ", ".join(
            f"{r.package_name} ({'/'.join(bound_identifiers(r))})" for r in unused
        )
        console.print(f"  Unused: {escape(names)}")

    _print_errors(result.errors)


@app.command()
def workspace(
    project_path: str = typer.Argument(".", help="Directory to scan"),
    top: int = typer.Option(20, "--top", "-n", help="Number of packages to list"),
):
    """Scan every supported file under a directory and rank packages by use."""
    project_path = Path(project_path).resolve()

    if not project_path.is_dir():
        console.print_error(f"Project path does not exist: {project_path}")
        raise typer.Exit(1)

    console.print(f"[bold blue]Scanning workspace:[/bold blue] {escape(str(project_path))}\n")

    with console.status("Scanning files..."):
        result = WorkspaceScanner(project_path).scan()

    if not result.files:
        console.print("[bold yellow]No supported files found.[/bold yellow]")
        return

    ranking = result.package_fan_in()
    if ranking:
        table = Table(title="Packages by Importing Files")
        table.add_column("Package", style="cyan")
        table.add_column("Files", justify="right", style="green")
        for package_name, count in ranking[:top]:
            table.add_row(escape(package_name), str(count))
        console.print(table)
    else:
        console.print("[bold green]No external imports found.[/bold green]")

    console.print(f"\n[bold yellow]Workspace Summary:[/bold yellow]")
    console.print(f"  Files scanned: {len(result.files)}")
    console.print(f"  Unique packages: {len(result.unique_packages)}")
    used = sum(len(f.usages) for f in result.files)
    console.print(f"  Imports with usages: {used}")
    if result.truncated:
        console.print(f"  [dim]File limit reached ({get_config().max_files}); some files were skipped[/dim]")

    for file_path, error in result.errors:
        console.print_warning(f"{file_path}: {error}")


@app.command()
def languages():
    """List supported language tags and file extensions."""
    table = Table(title="Supported Languages")
    table.add_column("Tag", style="cyan")
    table.add_column("Language", style="yellow")
    table.add_column("Enabled", style="green")

    config = get_config()
    for tag, language in LANGUAGE_TAGS.items():
        enabled = "yes" if config.is_language_enabled(tag) else "no"
        table.add_row(tag, language.value, enabled)

    console.print(table)
    console.print(f"[dim]Extensions: {', '.join(sorted(SUPPORTED_EXTENSIONS))}[/dim]")


def _version_callback(value: bool):
    if value:
        console.print(f"darwin {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(False, "--version", callback=_version_callback, is_eager=True,
                                 help="Show version and exit"),
):
    """Darwin - third-party import and usage scanner."""
    pass


if __name__ == "__main__":
    app()
