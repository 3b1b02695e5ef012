from __future__ import annotations

"""NeuralFlow Command Line Interface."""

import importlib
import importlib.util
import json
from pathlib import Path
from types import ModuleType
from typing import Any, Dict, List, Optional

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from neuralflow import Flow, NeuralFlowError
from neuralflow.utils.dag import to_mermaid
from neuralflow.utils.logging import get as get_logger, show_flow_tree
from neuralflow.utils.trace import FlowTrace
from neuralflow.utils.validate import validate_flow
from neuralflow.yaml_loader import load_flow as _load_flow_yaml

app = typer.Typer(
    name="neuralflow",
    help="CLI for NeuralFlow: run, inspect and draw node flows.",
    add_completion=False,
)

console = Console()


# --------------------------------------------------------------------------- #
# Loading helpers
# --------------------------------------------------------------------------- #

def _load_module(file_path: Path) -> ModuleType:
    """Execute a Python file and return it as a module."""
    if not file_path.exists():
        console.print(f"[bold red]Error: File not found: {file_path}[/]")
        raise typer.Exit(code=1)

    spec = importlib.util.spec_from_file_location(file_path.stem, file_path)
    if spec is None or spec.loader is None:
        console.print(f"[bold red]Error: Could not load module from {file_path}[/]")
        raise typer.Exit(code=1)

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:  # noqa: BLE001
        console.print(f"[bold red]Error executing Python file {file_path}: {escape(str(e))}[/]")
        raise typer.Exit(code=1)
    return module


def _load_flow_from_file(file_path: Path, flow_name: str) -> Flow:
    """Dynamically load a Flow object from a Python file."""
    module = _load_module(file_path)
    if not hasattr(module, flow_name):
        console.print(f"[bold red]Error: Flow '{flow_name}' not found in {file_path}[/]")
        raise typer.Exit(code=1)

    flow_obj = getattr(module, flow_name)
    if not isinstance(flow_obj, Flow):
        console.print(f"[bold red]Error: Object '{flow_name}' in {file_path} is not a NeuralFlow Flow.[/]")
        raise typer.Exit(code=1)
    return flow_obj


def _load_symbols(symbols: Optional[str]) -> Dict[str, Any]:
    if not symbols:
        return {}
    if symbols.endswith(".py") or Path(symbols).is_file():
        return vars(_load_module(Path(symbols)))
    try:
        return vars(importlib.import_module(symbols))
    except ImportError as e:
        console.print(f"[bold red]Error: cannot import symbols module '{symbols}': {e}[/]")
        raise typer.Exit(code=1)


def _parse_context(raw: Optional[str]) -> Dict[str, Any]:
    """Parse ``--context`` (inline JSON or ``@path/to/file.json``)."""
    if not raw:
        return {}
    try:
        text = Path(raw[1:]).read_text(encoding="utf-8") if raw.startswith("@") else raw
        data = json.loads(text)
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[bold red]Error: invalid --context: {e}[/]")
        raise typer.Exit(code=1)
    if not isinstance(data, dict):
        console.print("[bold red]Error: --context must be a JSON object.[/]")
        raise typer.Exit(code=1)
    return data


def _parse_params(items: Optional[List[str]]) -> Dict[str, Any]:
    """Parse repeated ``--param key=value``; values are read as YAML scalars."""
    params: Dict[str, Any] = {}
    for item in items or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            console.print(f"[bold red]Error: --param expects key=value, got '{item}'[/]")
            raise typer.Exit(code=1)
        params[key.strip()] = yaml.safe_load(value) if value else ""
    return params


def _execute(flow_obj: Flow, context: Dict[str, Any], params: Dict[str, Any], trace: bool, quiet: bool) -> None:
    tracer = FlowTrace().attach() if trace else None
    try:
        action = flow_obj.run(context, params=params)
    except Exception as e:  # noqa: BLE001
        kind = "engine error" if isinstance(e, NeuralFlowError) else "node error"
        console.print(f"[bold red]Flow '{escape(flow_obj.name)}' failed ({kind}): {type(e).__name__}: {escape(str(e))}[/]")
        raise typer.Exit(code=1)
    finally:
        if tracer is not None:
            tracer.detach()
            console.print(tracer.render(title=f"Trace of {flow_obj.name}"))

    if not quiet:
        console.print(f"[bold green]Flow '{flow_obj.name}' finished[/] with action: {action!r}")
        console.print_json(json.dumps(context, default=str))


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #

@app.command()
def run(
    flow_file: Path = typer.Argument(..., help="Path to the Python file containing the flow definition.", exists=True, file_okay=True, dir_okay=False, readable=True),
    flow_name: str = typer.Argument(..., help="Name of the flow variable in the file."),
    context: Optional[str] = typer.Option(None, "--context", "-c", help="Initial context as JSON, or @file.json."),
    param: Optional[List[str]] = typer.Option(None, "--param", "-p", help="Param override key=value (repeatable)."),
    trace: bool = typer.Option(False, "--trace", help="Print a per-node trace table after the run."),
    quiet: bool = typer.Option(False, "--quiet", help="Do not print the final context."),
    log_level: str = typer.Option("warning", "--log-level", help="debug, info, warning or error."),
):
    """Run a flow defined in a Python file and print the final context."""
    get_logger(log_level)
    flow_obj = _load_flow_from_file(flow_file, flow_name)
    _execute(flow_obj, _parse_context(context), _parse_params(param), trace, quiet)


@app.command("run-yaml")
def run_yaml(
    yaml_file: Path = typer.Argument(..., help="YAML flow file", exists=True, file_okay=True, dir_okay=False),
    symbols: Optional[str] = typer.Option(None, "--symbols", "-s", help="Python file or module providing the node symbols."),
    context: Optional[str] = typer.Option(None, "--context", "-c", help="Initial context as JSON, or @file.json."),
    param: Optional[List[str]] = typer.Option(None, "--param", "-p", help="Param override key=value (repeatable)."),
    trace: bool = typer.Option(False, "--trace"),
    quiet: bool = typer.Option(False, "--quiet"),
    log_level: str = typer.Option("warning", "--log-level"),
):
    """Run a flow defined in YAML."""
    get_logger(log_level)
    syms = _load_symbols(symbols)
    try:
        flow_obj = _load_flow_yaml(yaml_file, symbols=syms)
    except Exception as e:  # noqa: BLE001 – schema, YAML and wiring errors all end here
        console.print(f"[bold red]Error loading {yaml_file}: {escape(str(e))}[/]")
        raise typer.Exit(code=1)
    _execute(flow_obj, _parse_context(context), _parse_params(param), trace, quiet)


@app.command()
def inspect(
    flow_file: Path = typer.Argument(..., help="Path to the Python file containing the flow definition.", exists=True, file_okay=True, dir_okay=False, readable=True),
    flow_name: str = typer.Argument(..., help="Name of the flow variable in the file."),
):
    """Print the flow's graph and report wiring problems."""
    flow_obj = _load_flow_from_file(flow_file, flow_name)
    show_flow_tree(flow_obj)

    issues = validate_flow(flow_obj)
    if not issues:
        console.print("[bold green]Flow inspection passed. No issues found.[/]")
        return

    table = Table(title="Issues")
    table.add_column("Level", no_wrap=True)
    table.add_column("Node", style="cyan")
    table.add_column("Message")
    for issue in issues:
        style = "bold red" if issue.level == "error" else "yellow"
        table.add_row(f"[{style}]{issue.level}[/]", issue.node, issue.message)
    console.print(table)

    errors = sum(1 for i in issues if i.level == "error")
    if errors:
        console.print(f"[bold red]Flow inspection failed with {errors} error(s).[/]")
        raise typer.Exit(code=1)


@app.command()
def mermaid(
    flow_file: Path = typer.Argument(..., help="Path to the Python file containing the flow definition.", exists=True, file_okay=True, dir_okay=False, readable=True),
    flow_name: str = typer.Argument(..., help="Name of the flow variable in the file."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the diagram to this file."),
):
    """Emit a Mermaid diagram of the flow."""
    flow_obj = _load_flow_from_file(flow_file, flow_name)
    diagram = to_mermaid(flow_obj)
    if output is not None:
        output.write_text(diagram + "\n", encoding="utf-8")
        console.print(f"Diagram written to {output}")
    else:
        typer.echo(diagram)


def main() -> None:  # console-script entry point
    app()


if __name__ == "__main__":
    main()
