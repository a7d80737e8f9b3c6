from __future__ import annotations

import json
import logging
import sys
from typing import Any

import click
import questionary
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

import chattokens.config as config_mod
from chattokens.counter import Counter, new_counter
from chattokens.models import ChatRequest, ChatResponse, Tool
from chattokens.schema import render_tools
from chattokens.tokenizers import UnknownModelError

console = Console()

_TOOLS = TypeAdapter(list[Tool])


@click.group()
@click.option("--model", "-m", default=None, help="Model name (default from config)")
@click.option("--verbose", "-v", is_flag=True, help="Log degraded inputs to stderr.")
@click.pass_context
def main(ctx: click.Context, model: str | None, verbose: bool) -> None:
    """chattokens: offline token counts for chat-completion payloads."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )
    cfg = config_mod.load()
    ctx.obj = {"cfg": cfg, "model": model or config_mod.model_name(cfg)}


@main.command("text")
@click.argument("text")
@click.pass_obj
def cmd_text(obj: dict[str, Any], text: str) -> None:
    """Count the tokens in TEXT."""
    counter = _counter(obj)
    console.print(counter.count_text(text))


@main.command("request")
@click.argument("source", type=click.File("r"))
@click.pass_obj
def cmd_request(obj: dict[str, Any], source) -> None:
    """Count prompt tokens for a chat-completions request JSON file."""
    request = _parse(source, ChatRequest.model_validate)
    counter = _counter(obj)

    table = Table(title=f"Prompt tokens: {counter.model}", show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Role", style="cyan")
    table.add_column("Tokens", justify="right")
    total = counter.count_request(request)
    per_message = counter.overheads.per_message
    # Rows include the per-message framing and, for system, the tool block
    listed = counter.overheads.reply_priming
    table.add_row("", "[dim]reply priming[/dim]", str(listed))
    for i, message in enumerate(counter.prompt_messages(request)):
        tokens = per_message + counter.count_message(message)
        listed += tokens
        table.add_row(str(i), message.role, str(tokens))
    if total != listed:
        table.add_row("", "[dim]tool choice / corrections[/dim]", str(total - listed))
    console.print(table)
    console.print(f"[bold green]Total:[/bold green] {total}")


@main.command("response")
@click.argument("source", type=click.File("r"))
@click.pass_obj
def cmd_response(obj: dict[str, Any], source) -> None:
    """Count completion tokens for a chat-completions response JSON file."""
    response = _parse(source, ChatResponse.model_validate)
    counter = _counter(obj)
    console.print(counter.count_response(response))


@main.command("tools")
@click.argument("source", type=click.File("r"))
@click.pass_obj
def cmd_tools(obj: dict[str, Any], source) -> None:
    """Estimate the tokens a JSON list of tools adds to a request."""
    tools = _parse(source, _TOOLS.validate_python)
    counter = _counter(obj)
    console.print(counter.count_tools(tools))


@main.command("render")
@click.argument("source", type=click.File("r"))
def cmd_render(source) -> None:
    """Print the tool block the platform injects for a JSON list of tools."""
    tools = _parse(source, _TOOLS.validate_python)
    console.print(Syntax(render_tools(tools), "typescript", theme="ansi_dark"))


@main.command("config")
@click.pass_obj
def cmd_config(obj: dict[str, Any]) -> None:
    """Interactive configuration wizard."""
    cfg = obj["cfg"]

    console.print("[bold cyan]chattokens configuration[/bold cyan]\n")

    model = questionary.text(
        "Default model:",
        default=config_mod.model_name(cfg),
    ).ask()

    if model is None:
        console.print("[yellow]Configuration cancelled.[/yellow]")
        return

    try:
        new_counter(model)
    except UnknownModelError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)

    cfg["model"]["name"] = model
    config_mod.save(cfg)

    console.print(f"\n[green]Config saved to {config_mod.CONFIG_FILE}[/green]")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _counter(obj: dict[str, Any]) -> Counter:
    try:
        return new_counter(obj["model"], config_mod.overheads(obj["cfg"]))
    except (UnknownModelError, ValidationError) as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)


def _parse(source, validate):
    try:
        return validate(json.load(source))
    except json.JSONDecodeError as e:
        console.print(f"[red]Invalid JSON in {escape(source.name)}: {escape(str(e))}[/red]")
        sys.exit(1)
    except ValidationError as e:
        console.print(f"[red]Invalid payload in {escape(source.name)}:[/red]\n{escape(str(e))}")
        sys.exit(1)
