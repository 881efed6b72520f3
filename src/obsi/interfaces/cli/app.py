"""CLI application for obsi using Rich and Typer."""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from obsi.core import claude, obs
from obsi.core.config import (
    DEBUG_ENV,
    ObsiConfig,
    get_env_bool,
    load_config,
    resolve_vault_path,
    setup_logging,
)
from obsi.core.prompt import get_prompt
from obsi.core.types import VAULT_READ_TOOLS
from obsi.vault import daily as daily_notes
from obsi.vault import notes
from obsi.vault.frontmatter import strip_frontmatter
from obsi.vault.search import find_note, search_content, search_vault

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="obsi",
    help="obsi - Obsidian CLI with AI powers",
    no_args_is_help=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)

console = Console()

PASSTHROUGH = {"allow_extra_args": True, "ignore_unknown_options": True}


@dataclass(frozen=True)
class CliState:
    """Settings resolved once per invocation and shared with commands."""

    vault_path: Path
    config: ObsiConfig


def _state(ctx: typer.Context) -> CliState:
    return ctx.obj


def _join(words: Optional[List[str]]) -> str:
    return " ".join(words or []).strip()


def _usage(message: str) -> None:
    console.print(f"[yellow]Usage: {escape(message)}[/yellow]")
    raise typer.Exit(1)


def _require_obs() -> None:
    if not obs.is_installed():
        console.print("[red]Error:[/red] obsidian-cli not found.\n")
        console.print(escape(obs.install_instructions()), highlight=False)
        raise typer.Exit(1)


def _require_claude() -> None:
    if not claude.is_installed():
        console.print(f"[yellow]{escape(claude.install_instructions())}[/yellow]")
        raise typer.Exit(1)


def _run_ai(name: str, vault_path: Path, user_prompt: str) -> None:
    _require_claude()
    system_prompt = get_prompt(name, vault_path)
    code = claude.run_claude(system_prompt, user_prompt, VAULT_READ_TOOLS)
    raise typer.Exit(code)


# --- Vault commands ---


@app.command()
def daily(
    ctx: typer.Context,
    no_open: bool = typer.Option(
        False, "--no-open", help="Create the note without opening it"
    ),
):
    """Open or create today's daily note."""
    vault_path = _state(ctx).vault_path
    result, created = daily_notes.ensure_daily(vault_path)
    if not result.success:
        console.print(f"[red]Error:[/red] {escape(result.error)}")
        raise typer.Exit(1)

    if created:
        console.print(f"[green]Created:[/green] {escape(result.path)}")

    if no_open:
        if not created:
            console.print(escape(result.path), highlight=False)
        return

    opened = notes.open_file(Path(result.path))
    if not opened.success:
        console.print(f"[yellow]Could not open note:[/yellow] {escape(opened.error)}")


@app.command()
def task(
    ctx: typer.Context,
    content: Optional[List[str]] = typer.Argument(None, help="Task text"),
    on: Optional[str] = typer.Option(
        None, "--date", help="Daily note date (YYYY-MM-DD), defaults to today"
    ),
):
    """Add a task to the daily note's Tasks section."""
    text = _join(content)
    if not text:
        _usage('obsi task "task text"')

    target_date = None
    if on:
        try:
            target_date = date.fromisoformat(on)
        except ValueError:
            console.print(f"[red]Invalid date:[/red] {escape(on)}")
            raise typer.Exit(1)

    # Task lines are single-line checklist items
    text = " ".join(text.splitlines())
    result = daily_notes.append_to_daily(_state(ctx).vault_path, text, target_date)
    if not result.success:
        console.print(f"[red]Error:[/red] {escape(result.error)}")
        raise typer.Exit(1)
    console.print(f"[green]Added task:[/green] {escape(text)}")


@app.command("print")
def print_note(
    ctx: typer.Context,
    name: Optional[List[str]] = typer.Argument(None, help="Note name or path"),
    body: bool = typer.Option(False, "--body", help="Leave out the frontmatter"),
):
    """Print note contents to the terminal."""
    note_name = _join(name)
    if not note_name:
        _usage("obsi print <note>")

    path = find_note(_state(ctx).vault_path, note_name)
    if path is None:
        console.print(f"[red]Note not found:[/red] {escape(note_name)}")
        raise typer.Exit(1)

    content = notes.read_note(path)
    if body:
        content = strip_frontmatter(content)
    console.print(content, markup=False, highlight=False, soft_wrap=True)


@app.command()
def search(
    ctx: typer.Context,
    query: Optional[List[str]] = typer.Argument(None, help="Search query"),
    limit: Optional[int] = typer.Option(
        None, "--limit", "-n", min=1, help="Maximum results to show"
    ),
):
    """Fuzzy search note and folder names."""
    state = _state(ctx)
    cap = limit or state.config.search_limit
    # The fuzzy branch is never truncated by rank(); cap is applied here
    results = search_vault(
        state.vault_path,
        _join(query),
        limit=cap,
        threshold=state.config.fuzzy_threshold,
        extensions=state.config.note_extensions,
    )

    if not results:
        console.print("[dim]No matching notes.[/dim]")
        return

    for result in results[:cap]:
        if result.is_folder:
            console.print(f"[yellow]{escape(result.path)}/[/yellow]", highlight=False)
        else:
            console.print(escape(result.path), highlight=False)
    if len(results) > cap:
        console.print(f"[dim]... {len(results) - cap} more[/dim]")


@app.command("search-content")
def search_content_command(
    ctx: typer.Context,
    query: Optional[List[str]] = typer.Argument(None, help="Text to look for"),
):
    """Search inside note contents."""
    text = _join(query)
    if not text:
        _usage("obsi search-content <query>")

    results = search_content(_state(ctx).vault_path, text)
    if not results:
        console.print("[dim]No notes found containing that text.[/dim]")
        return

    console.print(f"[green]Found[/green] {len(results)} note(s):\n")
    for path in results:
        console.print(f"  {escape(path)}", highlight=False)


@app.command()
def recent(
    ctx: typer.Context,
    query: Optional[str] = typer.Argument(None, help="Filter by name or path"),
    limit: Optional[int] = typer.Option(
        None, "--limit", "-n", min=1, help="Maximum results"
    ),
):
    """List recently modified notes."""
    state = _state(ctx)
    found = notes.recent_notes(
        state.vault_path, query or "", limit=limit or state.config.search_limit
    )
    if not found:
        console.print("[dim]No notes found.[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Note")
    table.add_column("Path", style="dim")
    table.add_column("Age", justify="right")
    for note in found:
        table.add_row(
            escape(note.name),
            escape(note.relative_path),
            notes.relative_time(datetime.fromtimestamp(note.modified)),
        )
    console.print(table)


@app.command()
def capture(
    ctx: typer.Context,
    text: Optional[List[str]] = typer.Argument(None, help="Text to capture"),
):
    """Save a quick note to the Inbox."""
    value = _join(text)
    if not value:
        _usage('obsi capture "what\'s on your mind"')

    result = notes.capture(_state(ctx).vault_path, value)
    if not result.success:
        console.print(f"[red]Failed to save:[/red] {escape(result.error)}")
        raise typer.Exit(1)
    console.print(f"[green]Saved to Inbox:[/green] {escape(Path(result.path).stem)}")


@app.command("open")
def open_command(
    ctx: typer.Context,
    name: Optional[List[str]] = typer.Argument(None, help="Note or folder"),
):
    """Open a note in Obsidian (folders open in the file manager)."""
    note_name = _join(name)
    if not note_name:
        _usage("obsi open <note>")

    result = notes.open_note(_state(ctx).vault_path, note_name)
    if not result.success:
        console.print(f"[red]Error:[/red] {escape(result.error)}")
        raise typer.Exit(1)


@app.command("copy-path")
def copy_path_command(
    ctx: typer.Context,
    name: Optional[List[str]] = typer.Argument(None, help="Note or folder"),
):
    """Copy a note's path to the clipboard, escaped for the shell."""
    note_name = _join(name)
    if not note_name:
        _usage("obsi copy-path <note>")

    result = notes.copy_path(_state(ctx).vault_path, note_name)
    if not result.success:
        console.print(f"[red]Error:[/red] {escape(result.error)}")
        raise typer.Exit(1)
    console.print(f"[green]Copied:[/green] {escape(result.path)}", highlight=False)


# --- Obsidian CLI commands (via obs) ---


@app.command()
def move(
    source: Optional[str] = typer.Argument(None, help="Note to move"),
    destination: Optional[str] = typer.Argument(None, help="New location"),
):
    """Move or rename a note (updates links)."""
    if not source or not destination:
        _usage("obsi move <from> <to>")
    _require_obs()

    result = obs.move(source, destination)
    if not result.success:
        console.print(f"[red]Move failed:[/red] {escape(result.error)}")
        raise typer.Exit(1)
    console.print(f"[green]Moved:[/green] {escape(source)} -> {escape(destination)}")


@app.command()
def delete(
    name: Optional[List[str]] = typer.Argument(None, help="Note to delete"),
):
    """Delete a note."""
    note_name = _join(name)
    if not note_name:
        _usage("obsi delete <note>")
    _require_obs()

    result = obs.delete(note_name)
    if not result.success:
        console.print(f"[red]Delete failed:[/red] {escape(result.error)}")
        raise typer.Exit(1)
    console.print(f"[green]Deleted:[/green] {escape(note_name)}")


def _proxy(command: str, ctx: typer.Context) -> None:
    _require_obs()
    raise typer.Exit(obs.proxy([command, *ctx.args]))


@app.command(context_settings=PASSTHROUGH, add_help_option=False)
def create(ctx: typer.Context):
    """Create a new note (obs create)."""
    _proxy("create", ctx)


@app.command("set-default", context_settings=PASSTHROUGH, add_help_option=False)
def set_default(ctx: typer.Context):
    """Set the default vault (obs set-default)."""
    _proxy("set-default", ctx)


@app.command("print-default", context_settings=PASSTHROUGH, add_help_option=False)
def print_default(ctx: typer.Context):
    """Print the default vault (obs print-default)."""
    _proxy("print-default", ctx)


# --- AI-powered commands ---


@app.command()
def review(ctx: typer.Context):
    """Process the inbox with AI filing suggestions."""
    _run_ai(
        "review",
        _state(ctx).vault_path,
        "Review my inbox and suggest where to file each note",
    )


@app.command()
def link(
    ctx: typer.Context,
    topic: Optional[List[str]] = typer.Argument(None, help="Note name or topic"),
):
    """Find related notes with AI."""
    text = _join(topic)
    if not text:
        _usage('obsi link "note name or topic"')
    _run_ai("link", _state(ctx).vault_path, f"Find notes related to: {text}")


@app.command()
def summarize(
    ctx: typer.Context,
    target: Optional[List[str]] = typer.Argument(None, help="Note name"),
):
    """AI-powered note summary."""
    text = _join(target)
    if not text:
        _usage('obsi summarize "note name"')
    _run_ai("summarize", _state(ctx).vault_path, f"Summarize the note: {text}")


@app.command()
def health(ctx: typer.Context):
    """Check vault and external tools."""
    vault_path = _state(ctx).vault_path

    table = Table(title="Health Check", show_header=True)
    table.add_column("Component", style="cyan")
    table.add_column("Status")
    table.add_column("Message")

    vault_ok = vault_path.is_dir()
    if vault_ok:
        stats = notes.vault_stats(vault_path)
        vault_msg = f"{vault_path} ({stats.total} notes, {stats.inbox} in Inbox)"
    else:
        vault_msg = f"{vault_path} not found"
    table.add_row(
        "Vault",
        "[green]OK[/green]" if vault_ok else "[red]FAILED[/red]",
        escape(vault_msg),
    )

    obs_ok = obs.is_installed()
    table.add_row(
        "obsidian-cli",
        "[green]OK[/green]" if obs_ok else "[red]FAILED[/red]",
        "found" if obs_ok else "brew install yakitrak/yakitrak/obsidian-cli",
    )

    claude_ok = claude.is_installed()
    table.add_row(
        "Claude Code",
        "[green]OK[/green]" if claude_ok else "[yellow]WARN[/yellow]",
        "AI features enabled" if claude_ok else "review, link, summarize unavailable",
    )

    console.print(table)
    raise typer.Exit(0 if vault_ok and obs_ok else 1)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    vault: Optional[str] = typer.Option(
        None,
        "--vault",
        "-v",
        help="Path to vault directory (default: $OBSIDIAN_VAULT, config file, ~/Obsi)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug logging (or set OBSI_DEBUG=1)",
    ),
):
    """obsi - Obsidian CLI with AI powers. Run without a command for the TUI."""
    if debug or get_env_bool(DEBUG_ENV):
        setup_logging(debug=True)
        console.print("[dim]Debug logging enabled[/dim]")

    config = load_config()
    ctx.obj = CliState(vault_path=resolve_vault_path(vault, config), config=config)
    logger.debug(f"Using vault {ctx.obj.vault_path}")

    if ctx.invoked_subcommand is None:
        from obsi.interfaces.tui.app import launch_tui

        raise typer.Exit(launch_tui(ctx.obj.vault_path, config))


def run_cli():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run_cli()
