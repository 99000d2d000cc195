"""
Rich rendering helpers for the acetrainer CLI.

Read-only: everything here takes snapshots or engine state and prints it.
"""

from __future__ import annotations

from collections.abc import Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from acetrainer.core.mastery import MasteryLevel
from acetrainer.core.models import Item, MissedItem, ProgressRecord, Question
from acetrainer.study.matching import MatchingGameEngine, Side
from acetrainer.study.race import RaceOutcome, RaceQuestion, TimedRaceEngine

console = Console()

STYLES = {
    "correct": "bold green",
    "incorrect": "bold red",
    "info": "bold cyan",
    "warning": "bold yellow",
    "dim": "dim",
}


def option_label(index: int) -> str:
    return chr(65 + index)


def format_progress_bar(score: float, width: int = 20) -> str:
    filled = int(score / 100 * width)
    return "#" * filled + "-" * (width - filled)


def mastery_badge(score: int) -> str:
    level = MasteryLevel.from_score(score)
    return f"[{level.color}]{level.emoji} {level.display_name} {score}%[/{level.color}]"


# =============================================================================
# Progress
# =============================================================================


def show_stats(record: ProgressRecord) -> None:
    content = Text()
    content.append("XP: ", style="cyan")
    content.append(f"{record.xp}\n", style="bold")
    content.append("Sessions completed: ", style="cyan")
    content.append(f"{record.completed_sessions}\n", style="bold")
    content.append("Questions answered: ", style="cyan")
    content.append(f"{record.questions_answered} ({record.total_correct} correct, {record.accuracy}%)\n")
    content.append("Average score: ", style="cyan")
    content.append(f"{format_progress_bar(record.average_score)} {record.average_score}%\n")
    content.append("Mistakes to review: ", style="cyan")
    content.append(f"{len(record.mistake_registry)}", style="bold yellow" if record.mistake_registry else "green")

    console.print(Panel(content, title="[bold]Progress[/bold]", border_style="blue"))

    table = Table(title="Category Scores", box=box.SIMPLE)
    table.add_column("Category")
    table.add_column("Score", justify="right")
    table.add_column("")
    for category, score in record.category_scores.items():
        shown = f"{score}%" if score else "[dim]not attempted[/dim]"
        table.add_row(category.value, shown, format_progress_bar(score, width=10))
    console.print(table)


def show_mistakes(mistakes: Sequence[MissedItem]) -> None:
    if not mistakes:
        console.print("[green]Registry clear. No mistakes to review.[/green]")
        return
    table = Table(title=f"Mistake Registry ({len(mistakes)})", box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("ID", style="dim")
    table.add_column("Category", style="red")
    table.add_column("Question")
    for i, entry in enumerate(mistakes, 1):
        table.add_row(str(i), entry.id, entry.category.value, entry.prompt_text)
    console.print(table)


def show_question(question: Question | MissedItem, number: int | None = None, total: int | None = None) -> None:
    content = ""
    if question.passage_text:
        content += f"[italic]{question.passage_text}[/italic]\n\n"
    content += f"[bold]{question.prompt_text}[/bold]\n"
    for i, option in enumerate(question.options):
        content += f"\n  {option_label(i)}. {option}"
    title = question.category.value
    if number is not None and total is not None:
        title = f"{number}/{total}  |  {title}"
    console.print(Panel(content, title=title, title_align="left", border_style="cyan", padding=(1, 2)))


def show_explanation(question: Question | MissedItem, correct: bool) -> None:
    icon = "[green]✓[/green]" if correct else "[red]✗[/red]"
    body = f"{icon} Answer: {option_label(question.correct_option_index)}. {question.correct_option}"
    if question.explanation_text:
        body += f"\n\n[italic]{question.explanation_text}[/italic]"
    console.print(Panel(body, border_style=STYLES["correct"] if correct else STYLES["incorrect"]))


# =============================================================================
# Games
# =============================================================================


def show_batch(items: Sequence[Item], record: ProgressRecord) -> None:
    if not items:
        console.print("[yellow]No study items available. Point ACETRAINER_CONTENT_PATH at a content pack.[/yellow]")
        return
    table = Table(title=f"Session Batch ({len(items)})", box=box.SIMPLE)
    table.add_column("Item", style="bold")
    table.add_column("Answer")
    table.add_column("Mastery", justify="right")
    for item in items:
        table.add_row(item.prompt_text, item.answer_text, mastery_badge(record.mastery(item.key)))
    console.print(table)


def show_words(items: Sequence[Item], record: ProgressRecord, query: str = "") -> None:
    if not items:
        message = f"No words match {query!r}." if query else "The word bank is empty."
        console.print(f"[yellow]{message}[/yellow]")
        return
    title = f"Word Bank ({len(items)})" + (f" matching {query!r}" if query else "")
    table = Table(title=title, box=box.SIMPLE)
    table.add_column("Word", style="bold")
    table.add_column("Definition")
    table.add_column("Mastery", justify="right")
    for item in items:
        table.add_row(item.prompt_text, item.answer_text, mastery_badge(record.mastery(item.key)))
    console.print(table)


def show_flashcard(item: Item, flipped: bool, index: int, total: int, mastery: int) -> None:
    if flipped:
        body = f"[bold]{item.answer_text}[/bold]"
        if item.auxiliary_text:
            body += f'\n\n[dim]"{item.auxiliary_text}"[/dim]'
    else:
        body = f"[bold cyan]{item.prompt_text}[/bold cyan]"
    console.print(
        Panel(
            body,
            title=f"Card {index + 1}/{total}  |  {mastery_badge(mastery)}",
            title_align="left",
            border_style="magenta" if flipped else "cyan",
            padding=(1, 4),
        )
    )


def show_matching_board(engine: MatchingGameEngine) -> None:
    table = Table(box=box.SIMPLE, show_header=True)
    table.add_column("Prompts")
    table.add_column("Answers")
    selection = engine.selection
    for i, (prompt, answer) in enumerate(zip(engine.prompts, engine.answers)):
        table.add_row(
            _board_cell(f"{i + 1}. {prompt.prompt_text}", prompt.key, Side.PROMPT, engine, selection),
            _board_cell(f"{option_label(i)}. {answer.answer_text}", answer.key, Side.ANSWER, engine, selection),
        )
    console.print(table)
    console.print(f"[dim]Matched {len(engine.revealed)}/{len(engine.pairs)}[/dim]")


def _board_cell(text: str, key: str, side: Side, engine: MatchingGameEngine, selection) -> str:
    if key in engine.revealed:
        return f"[green strike]{text}[/green strike]"
    if selection is not None and selection.key == key and selection.side is side:
        return f"[reverse]{text}[/reverse]"
    return text


def show_race_question(engine: TimedRaceEngine, question: RaceQuestion) -> None:
    lines = [f"[bold]{question.prompt_text}[/bold]", ""]
    lines += [f"  {i + 1}. {option}" for i, option in enumerate(question.options)]
    console.print(
        Panel(
            "\n".join(lines),
            title=f"Lap {engine.index + 1}/{len(engine.items)}  |  {engine.time_remaining}s",
            subtitle=f"[dim]{format_progress_bar(engine.progress)} {engine.progress:.0f}%[/dim]",
            title_align="left",
            border_style="cyan",
        )
    )


def show_race_outcome(outcome: RaceOutcome, answer_text: str) -> None:
    if outcome is RaceOutcome.CORRECT:
        console.print("[bold green]Correct![/bold green]")
    elif outcome is RaceOutcome.TIMEOUT:
        console.print(f"[bold yellow]Time's up.[/bold yellow] Answer: {answer_text}")
    else:
        console.print(f"[bold red]Wrong.[/bold red] Answer: {answer_text}")
