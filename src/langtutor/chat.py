"""Terminal chat UI for the language tutor."""

import sys

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory
from prompt_toolkit.styles import Style
from rich import box
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .errors import TutorError
from .grammar import load_grammar, ready_for_new_grammar
from .languages import require_language_dir
from .models import ChatMessage, GrammarRule, VocabularyEntry
from .modes import LEARNING_MODES, get_mode
from .overrides import load_overrides
from .paths import HISTORY_FILE, ensure_state_dir
from .service import TutorService
from .vocabulary import due_words, load_vocabulary

# Style for prompt_toolkit
PROMPT_STYLE = Style.from_dict({
    "prompt": "cyan bold",
})

_NO_ARG_COMMANDS = ("help", "modes", "vocab", "due", "grammar", "history")

COMMANDS = {
    "mode <name>": "Switch learning mode",
    "modes": "List learning modes",
    "vocab": "Show vocabulary",
    "due": "Show words due for review",
    "grammar": "Show grammar ratings",
    "history": "Reload this mode's chat history",
    "help": "Show commands",
    "exit": "Quit",
}


def create_modes_table(current: str) -> Table:
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(min_width=2)
    table.add_column(style="cyan", min_width=16)
    table.add_column(style="dim")
    table.add_column(style="green")
    for m in LEARNING_MODES:
        marker = "current" if m.id == current else ("disabled" if m.disabled else "")
        table.add_row(m.icon, m.id, m.description, marker)
    return table


def create_vocab_table(entries: list[VocabularyEntry], title: str = "Vocabulary") -> Table:
    table = Table(title=title)
    table.add_column("Word", style="cyan")
    table.add_column("Meaning", style="green", max_width=30)
    table.add_column("Ease", justify="right")
    table.add_column("Interval", justify="right")
    table.add_column("Reps", justify="right")
    table.add_column("Next review", style="bold")
    table.add_column("Notes", style="dim", max_width=30)
    for e in entries:
        table.add_row(
            e.word,
            e.meaning,
            f"{e.ease:.2f}",
            f"{e.interval}d",
            str(e.repetitions),
            e.next_review,
            e.notes,
        )
    return table


def create_grammar_table(rules: list[GrammarRule]) -> Table:
    table = Table(title="Grammar")
    table.add_column("Rule", style="cyan")
    table.add_column("Level", justify="center")
    table.add_column("Stars", style="yellow")
    table.add_column("Streak", justify="right")
    table.add_column("Last used")
    table.add_column("Description", style="dim", max_width=40)
    for r in sorted(rules, key=lambda x: (x.level, -x.stars)):
        stars = r.star_bar + (" ∞" if r.permanent else "")
        table.add_row(r.rule, r.level, stars, str(r.correct_streak), r.last_used, r.description)
    return table


def print_message(console: Console, message: ChatMessage) -> None:
    if message.role == "user":
        console.print(Text(f"You: {message.content}", style="cyan"))
    else:
        console.print(Panel(Markdown(message.content), border_style="green", box=box.ROUNDED))


def _print_help(console: Console) -> None:
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="cyan", min_width=12)
    table.add_column(style="dim")
    for name, desc in COMMANDS.items():
        table.add_row(name, desc)
    console.print(Panel(table, title="[bold dim]Commands[/bold dim]", border_style="dim", box=box.ROUNDED))


def _show_history(console: Console, service: TutorService, language: str, mode: str) -> None:
    try:
        history = service.get_chat_history(language, mode)
    except TutorError as e:
        console.print(f"[red]Error loading history: {e}[/red]")
        return
    if not history:
        console.print(f"[dim]No {mode} history yet.[/dim]")
        return
    for message in history:
        print_message(console, message)


def handle_command(console: Console, service: TutorService, language: str, mode: str, text: str) -> str | None:
    """Run a chat command.

    Returns:
        The (possibly new) mode when text was a command, None when it
        should be sent to the tutor.
    """
    parts = text.lstrip("/").split()
    if not parts:
        return None
    name, args = parts[0].lower(), parts[1:]
    lang_dir = require_language_dir(language)

    if name in _NO_ARG_COMMANDS and args:
        return None

    if name == "help":
        _print_help(console)
    elif name == "modes":
        console.print(create_modes_table(mode))
    elif name == "mode" and len(args) == 1:
        info = get_mode(args[0])
        if info is None:
            console.print(f"[red]Unknown mode '{args[0]}'.[/red]")
        elif info.disabled:
            console.print(f"[yellow]{info.name} mode is not available yet.[/yellow]")
        else:
            console.print(f"[green]Switched to {info.icon} {info.name}[/green]")
            _show_history(console, service, language, info.id)
            return info.id
    elif name == "vocab":
        console.print(create_vocab_table(load_vocabulary(lang_dir)))
    elif name == "due":
        due = due_words(load_vocabulary(lang_dir))
        if due:
            console.print(create_vocab_table(due, title=f"Due for review ({len(due)})"))
        else:
            console.print("[green]Nothing due today.[/green]")
    elif name == "grammar":
        rules = load_grammar(lang_dir)
        console.print(create_grammar_table(rules))
        threshold = load_overrides(lang_dir).preferences.new_grammar_threshold
        if rules and ready_for_new_grammar(rules, threshold):
            console.print(f"[dim]All rules at {threshold}+ stars: ready for new grammar.[/dim]")
    elif name == "history":
        _show_history(console, service, language, mode)
    else:
        return None
    return mode


def run_chat(language: str, mode: str = "chat") -> None:
    """Run the interactive chat interface."""
    console = Console()
    service = TutorService()

    try:
        require_language_dir(language)
    except TutorError as e:
        console.print(f"[red]✗ {e}[/red]")
        sys.exit(1)

    info = get_mode(mode)
    welcome_text = Text()
    welcome_text.append(f"LEARNING {language.upper()}\n", style="bold cyan")
    welcome_text.append(f"Mode: {info.icon} {info.name}" if info else f"Mode: {mode}", style="green")
    welcome_text.justify = "center"
    console.print(Panel(welcome_text, border_style="cyan", box=box.DOUBLE))
    _print_help(console)
    _show_history(console, service, language, mode)

    try:
        ensure_state_dir()
        session: PromptSession = PromptSession(
            history=FileHistory(str(HISTORY_FILE)),
            style=PROMPT_STYLE,
        )
    except OSError:
        session = PromptSession(style=PROMPT_STYLE)

    while True:
        try:
            user_input = session.prompt([("class:prompt", "You: ")]).strip()
            if not user_input:
                continue
            if user_input.lower().lstrip("/") in ("exit", "quit", "q"):
                console.print("[dim]Goodbye![/dim]")
                break

            try:
                new_mode = handle_command(console, service, language, mode, user_input)
            except TutorError as e:
                console.print(f"[red]Error: {e}[/red]")
                continue
            if new_mode is not None:
                mode = new_mode
                continue

            with console.status("[dim]Tutor is thinking...[/dim]"):
                try:
                    reply = service.send_message(user_input, language, mode)
                except TutorError as e:
                    console.print(f"[red]Error: {e}[/red]")
                    continue
            print_message(console, ChatMessage("assistant", reply))

        except KeyboardInterrupt:
            console.print("\n[dim]Use 'exit' to quit.[/dim]")
        except EOFError:
            console.print("[dim]Goodbye![/dim]")
            break
