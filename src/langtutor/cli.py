"""CLI commands for langtutor."""

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import Config, TRACKER_BACKENDS, format_config_display, load_config, save_config
from .errors import TutorError
from .grammar import add_grammar, load_grammar, mark_grammar_used
from .languages import require_language_dir
from .log import setup_logging
from .models import CEFR_LEVELS, DIFFICULTY_DIRECTIONS, RecallQuality
from .modes import DEFAULT_MODE, LEARNING_MODES, available_modes
from .overrides import adjust_difficulty
from .service import TutorService
from .vocabulary import (
    add_word,
    due_words,
    load_vocabulary,
    mark_word_recalled,
    record_word_used,
    update_word_note,
)

console = Console()

MODE_CHOICE = click.Choice([m.id for m in available_modes()])


def fail(e: Exception) -> None:
    """Print an error and exit non-zero."""
    console.print(f"[red]✗ Error: {e}[/red]")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging on stderr")
def cli(verbose: bool) -> None:
    """Language tutor - immersive practice through the Claude CLI.

    Each language lives in its own folder with vocabulary, grammar and
    learner preferences stored as JSON.
    """
    setup_logging(verbose)


# ---------------------------------------------------------------------------
# Languages
# ---------------------------------------------------------------------------

@cli.command()
def languages() -> None:
    """List bootstrapped languages."""
    names = TutorService(Config()).list_languages()
    if not names:
        console.print("[yellow]No languages yet. Run 'langtutor bootstrap <language>'.[/yellow]")
        return
    for name in names:
        console.print(f"  {name}")


@cli.command()
@click.argument("language")
def bootstrap(language: str) -> None:
    """Set up a new language."""
    try:
        result = TutorService(Config()).bootstrap_language(language)
    except TutorError as e:
        fail(e)
    console.print(f"[green]✓ {result}[/green]")


@cli.command()
@click.argument("language")
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation")
def delete(language: str, yes: bool) -> None:
    """Delete a language and all of its progress."""
    if not yes:
        click.confirm(f"Delete all {language} progress?", abort=True)
    try:
        result = TutorService(Config()).delete_language(language)
    except TutorError as e:
        fail(e)
    console.print(f"[green]✓ {result}[/green]")


@cli.command()
def modes() -> None:
    """List learning modes."""
    table = Table()
    table.add_column("", justify="center")
    table.add_column("Mode", style="cyan")
    table.add_column("Description", style="dim")
    for m in LEARNING_MODES:
        description = m.description + (" [yellow](disabled)[/yellow]" if m.disabled else "")
        table.add_row(m.icon, m.id, description)
    console.print(table)


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------

@cli.command()
@click.argument("language")
@click.option("-m", "--mode", type=MODE_CHOICE, default=DEFAULT_MODE, help="Learning mode")
def chat(language: str, mode: str) -> None:
    """Start an interactive tutoring session."""
    from .chat import run_chat
    run_chat(language, mode)


@cli.command()
@click.argument("language")
@click.argument("message")
@click.option("-m", "--mode", type=MODE_CHOICE, default=DEFAULT_MODE, help="Learning mode")
def send(language: str, message: str, mode: str) -> None:
    """Send a single message and print the reply."""
    try:
        reply = TutorService().send_message(message, language, mode)
    except TutorError as e:
        fail(e)
    click.echo(reply)


@cli.command()
@click.argument("language")
@click.option("-m", "--mode", type=MODE_CHOICE, default=DEFAULT_MODE, help="Learning mode")
def history(language: str, mode: str) -> None:
    """Show chat history for a mode."""
    try:
        messages = TutorService(Config()).get_chat_history(language, mode)
    except TutorError as e:
        fail(e)
    if not messages:
        console.print(f"[yellow]No {mode} history yet[/yellow]")
        return
    for msg in messages:
        style = "cyan" if msg.role == "user" else "green"
        label = "You" if msg.role == "user" else "Tutor"
        console.print(f"[{style}]{label}:[/{style}] {msg.content}")


@cli.command()
@click.argument("language")
@click.option("--due", is_flag=True, help="Only words due for review")
def vocab(language: str, due: bool) -> None:
    """Show a language's vocabulary."""
    from .chat import create_vocab_table

    try:
        entries = load_vocabulary(require_language_dir(language))
    except TutorError as e:
        fail(e)
    if due:
        entries = due_words(entries)
    if not entries:
        console.print("[yellow]No words found[/yellow]")
        return
    console.print(create_vocab_table(entries))
    console.print(f"\n[dim]{len(entries)} word(s)[/dim]")


@cli.command()
@click.argument("language")
def grammar(language: str) -> None:
    """Show a language's grammar ratings."""
    from .chat import create_grammar_table

    try:
        rules = load_grammar(require_language_dir(language))
    except TutorError as e:
        fail(e)
    if not rules:
        console.print("[yellow]No grammar rules found[/yellow]")
        return
    console.print(create_grammar_table(rules))


@cli.command("config")
@click.argument("key", required=False)
@click.argument("value", required=False)
def config_cmd(key: str | None, value: str | None) -> None:
    """Show or change a configuration value."""
    config = load_config()
    if key is None:
        console.print(format_config_display(config))
        return
    if key not in Config.__dataclass_fields__:
        console.print(f"[red]Unknown setting '{key}'.[/red]")
        sys.exit(1)
    if value is None:
        console.print(f"{key}: {getattr(config, key)}")
        return

    current = getattr(config, key)
    try:
        new_value = type(current)(value)
    except ValueError:
        console.print(f"[red]Invalid value for {key}: {value}[/red]")
        sys.exit(1)
    if key == "tracker_backend" and new_value not in TRACKER_BACKENDS:
        console.print(f"[red]tracker_backend must be one of: {', '.join(TRACKER_BACKENDS)}[/red]")
        sys.exit(1)
    setattr(config, key, new_value)
    save_config(config)
    console.print(f"[green]✓ {key} = {new_value}[/green]")


# ---------------------------------------------------------------------------
# State commands used by the tracker agent
# ---------------------------------------------------------------------------

@cli.group()
@click.option(
    "-d", "--dir", "lang_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    help="Language folder holding the JSON files (default: current directory)",
)
@click.pass_context
def track(ctx: click.Context, lang_dir: Path) -> None:
    """Update vocabulary, grammar and difficulty state."""
    ctx.obj = lang_dir


@track.command("add-word")
@click.argument("word")
@click.argument("meaning")
@click.pass_obj
def track_add_word(lang_dir: Path, word: str, meaning: str) -> None:
    """Add a new word."""
    try:
        _, added = add_word(lang_dir, word, meaning)
    except TutorError as e:
        click.echo(str(e))
        sys.exit(1)
    click.echo(f"Added word: {word}" if added else f"Word '{word}' already exists")


@track.command("mark-word-recalled")
@click.argument("word")
@click.argument("quality", type=click.Choice([q.value for q in RecallQuality]))
@click.pass_obj
def track_mark_word_recalled(lang_dir: Path, word: str, quality: str) -> None:
    """Record recall quality for a word."""
    try:
        mark_word_recalled(lang_dir, word, quality)
    except TutorError as e:
        click.echo(str(e))
        sys.exit(1)
    click.echo(f"Marked '{word}' as {quality}")


@track.command("record-word-used")
@click.argument("word")
@click.argument("meaning", required=False, default="")
@click.pass_obj
def track_record_word_used(lang_dir: Path, word: str, meaning: str) -> None:
    """Credit a correct use of a word, adding it if new."""
    try:
        entry, added = record_word_used(lang_dir, word, meaning)
    except TutorError as e:
        click.echo(str(e))
        sys.exit(1)
    if added:
        click.echo(f"Added word: {word}")
    else:
        click.echo(f"Recorded use of '{word}', next review {entry.next_review}")


@track.command("update-word-note")
@click.argument("word")
@click.argument("note")
@click.pass_obj
def track_update_word_note(lang_dir: Path, word: str, note: str) -> None:
    """Replace the note for a word."""
    try:
        update_word_note(lang_dir, word, note)
    except TutorError as e:
        click.echo(str(e))
        sys.exit(1)
    click.echo(f"Updated note for '{word}'")


@track.command("add-grammar")
@click.argument("rule")
@click.argument("description")
@click.argument("level", type=click.Choice(CEFR_LEVELS))
@click.pass_obj
def track_add_grammar(lang_dir: Path, rule: str, description: str, level: str) -> None:
    """Add a new grammar rule."""
    try:
        _, added = add_grammar(lang_dir, rule, description, level)
    except TutorError as e:
        click.echo(str(e))
        sys.exit(1)
    click.echo(f"Added grammar rule: {rule}" if added else f"Rule '{rule}' already exists")


@track.command("mark-grammar-used")
@click.argument("rule")
@click.argument("correct", type=click.Choice(["true", "false"]))
@click.pass_obj
def track_mark_grammar_used(lang_dir: Path, rule: str, correct: str) -> None:
    """Record a correct or incorrect use of a grammar rule."""
    try:
        mark_grammar_used(lang_dir, rule, correct)
    except TutorError as e:
        click.echo(str(e))
        sys.exit(1)
    click.echo(f"Marked '{rule}' as correct={correct}")


@track.command("adjust-difficulty")
@click.argument("direction", type=click.Choice(DIFFICULTY_DIRECTIONS))
@click.argument("reason", required=False, default="")
@click.pass_obj
def track_adjust_difficulty(lang_dir: Path, direction: str, reason: str) -> None:
    """Set the difficulty level."""
    try:
        adjust_difficulty(lang_dir, direction, reason)
    except TutorError as e:
        click.echo(str(e))
        sys.exit(1)
    click.echo(f"Adjusted difficulty to: {direction}")


def main() -> None:
    """Entry point for the CLI."""
    cli()
