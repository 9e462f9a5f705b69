import argparse
import logging
import sys
from pathlib import Path


def main():
    parser = argparse.ArgumentParser(
        description="jython-complete - scope and type inference for Jython completion",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  jython-complete scope script.py                  Show the scope tree of a script
  jython-complete names script.py im               Names visible at the end starting with 'im'
  jython-complete members script.py imp --seed get Members of 'imp' starting with 'get'
  jython-complete settings                         Show current configuration
""",
    )
    parser.add_argument("--catalog", "-c", type=Path, help="Host reflection catalog (JSON)")
    parser.add_argument(
        "--module-path", "-m", type=Path, action="append", default=[],
        help="Module search root (repeatable)"
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    scope_parser = subparsers.add_parser("scope", help="Print the scope tree of a script")
    scope_parser.add_argument("file", type=Path, help="Script file")

    names_parser = subparsers.add_parser("names", help="Complete a name at the end of a script")
    names_parser.add_argument("file", type=Path, help="Script file")
    names_parser.add_argument("prefix", nargs="?", default="", help="Name prefix")

    members_parser = subparsers.add_parser(
        "members", help="Complete members of an expression at the end of a script"
    )
    members_parser.add_argument("file", type=Path, help="Script file")
    members_parser.add_argument("expression", help="Expression left of the dot")
    members_parser.add_argument("--seed", "-s", default="", help="Partial member name")
    members_parser.add_argument("--indent", "-i", default="", help="Indentation of the line")

    subparsers.add_parser("settings", help="Show current configuration")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)
    elif args.command == "settings":
        run_settings()
        return

    service = _build_service(args.catalog, args.module_path)
    try:
        if args.command == "scope":
            run_scope(service, args.file)
        elif args.command == "names":
            run_names(service, args.file, args.prefix)
        elif args.command == "members":
            run_members(service, args.file, args.expression, args.seed, args.indent)
        else:
            parser.print_help()
    finally:
        service.engine.context.modules.close()


def _build_service(catalog: Path | None, module_paths: list[Path]):
    from rich.console import Console

    from jython_complete.completion import CompletionService
    from jython_complete.config import get_settings
    from jython_complete.core.errors import ConfigurationError
    from jython_complete.parsing.type_inference import TypeInferenceContext, TypeInferenceEngine
    from jython_complete.providers import CatalogReflectionProvider

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        context = TypeInferenceContext.from_settings(settings)
        if catalog is not None:
            context.reflection = CatalogReflectionProvider.from_file(catalog)
    except ConfigurationError as e:
        Console(stderr=True).print(f"[red]Configuration error: {e}[/red]")
        sys.exit(1)

    for path in module_paths:
        context.modules.add_path(path)

    engine = TypeInferenceEngine(
        context=context,
        tolerate_syntax_errors=settings.tolerate_syntax_errors,
    )
    return CompletionService(engine)


def _read_script(path: Path) -> str:
    from rich.console import Console

    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        Console(stderr=True).print(f"[red]Cannot read {path}: {e}[/red]")
        sys.exit(1)


def run_scope(service, path: Path):
    from rich.console import Console

    console = Console()
    scope = service.engine.build_scope_from_source(_read_script(path))
    if scope.is_empty():
        console.print("[yellow]No bindings (empty script or syntax error)[/yellow]")
        return
    console.print(scope.dump(), highlight=False, markup=False)


def run_names(service, path: Path, prefix: str):
    from rich.console import Console
    from rich.table import Table

    console = Console()
    completions = service.complete_names(_read_script(path), prefix)

    table = Table(title=f"Names starting with '{prefix}'")
    table.add_column("Name", style="cyan")
    table.add_column("Type", style="green")
    table.add_column("Constructor", style="dim")

    for completion in completions:
        constructor = ""
        if completion.constructor_params is not None:
            constructor = f"({', '.join(completion.constructor_params)})"
        table.add_row(completion.name, completion.type_name or "", constructor)

    console.print(table)


def run_members(service, path: Path, expression: str, seed: str, indent: str):
    from rich.console import Console
    from rich.table import Table

    console = Console()
    entries = service.complete_members(_read_script(path), expression, seed, indent)

    if not entries:
        console.print(f"[yellow]No members known for {expression}[/yellow]")
        return

    table = Table(title=f"Members of {expression}")
    table.add_column("Member", style="cyan")
    table.add_column("Type", style="green")
    table.add_column("Declared in", style="dim")

    for entry in entries:
        name = entry.name
        if entry.is_callable:
            name = f"{name}({', '.join(entry.parameters)})"
        if entry.is_static:
            name = f"{name} [static]"
        table.add_row(name, entry.type_name or "", entry.declaring_type or "")

    console.print(table)


def run_settings():
    from rich.console import Console
    from rich.panel import Panel
    from rich.table import Table

    from jython_complete.config import get_settings

    console = Console()
    settings = get_settings()

    inference_table = Table(title="Inference Configuration", show_header=False)
    inference_table.add_column("Setting", style="cyan")
    inference_table.add_column("Value", style="green")

    inference_table.add_row("Capture Prefix", settings.capture_prefix)
    inference_table.add_row("Builtin Module", settings.builtin_module)
    inference_table.add_row("Tolerate Syntax Errors", str(settings.tolerate_syntax_errors))
    inference_table.add_row("Log Level", settings.log_level)

    console.print(inference_table)
    console.print()

    module_table = Table(title="Module Index Configuration", show_header=False)
    module_table.add_column("Setting", style="cyan")
    module_table.add_column("Value", style="green")

    module_table.add_row("Watch Modules", str(settings.watch_modules))
    module_table.add_row("Cache Entries", str(settings.modules.module_cache_entries))
    module_table.add_row(
        "Include Interpreter Paths", str(settings.modules.include_interpreter_paths)
    )

    console.print(module_table)
    console.print()

    paths = ", ".join(str(p) for p in settings.module_paths) or "(none)"
    catalog = settings.reflection_catalog or "(empty)"
    builtins_file = settings.providers.builtin_entries_file or "(interpreter builtins)"
    console.print(
        Panel(
            f"[cyan]Module Paths:[/cyan] {paths}\n"
            f"[cyan]Reflection Catalog:[/cyan] {catalog}\n"
            f"[cyan]Builtin Entries:[/cyan] {builtins_file}",
            title="Providers",
            border_style="dim",
        )
    )


if __name__ == "__main__":
    main()
