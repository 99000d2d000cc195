"""
acetrainer: exam preparation trainer CLI.

A Rich terminal interface over the progress store and the study engines.

Commands:
- acetrainer stats       - Show progress, XP and category scores
- acetrainer mistakes    - List the mistake registry
- acetrainer review      - Re-answer logged mistakes
- acetrainer batch       - Show (or redraw) the current training batch
- acetrainer words       - Browse and search the word bank
- acetrainer flashcards  - Flip through the batch
- acetrainer match       - Pair prompts with answers
- acetrainer race        - Timed speed quiz over the batch
- acetrainer practice    - Category practice exam
- acetrainer drill       - Spelling lab or grammar quick-check
"""
from __future__ import annotations

import asyncio
import sys
import threading
from typing import Optional, TextIO

import typer
from loguru import logger
from rich.panel import Panel
from rich.prompt import Confirm, Prompt

from acetrainer.cli import visuals
from acetrainer.cli.visuals import console, option_label
from acetrainer.config import Settings, get_settings
from acetrainer.content import (
    ContentSource,
    JsonContentSource,
    StaticContentSource,
    default_question_count,
    search_items,
)
from acetrainer.core.models import Category
from acetrainer.storage import ProgressStore
from acetrainer.study import (
    Answered,
    AsyncioScheduler,
    Matched,
    PracticeExam,
    ProgressRecorder,
    QuestionDrill,
    RacePhase,
    Side,
    TrainingSession,
)
from acetrainer.study.events import Outcome


# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="acetrainer",
    help="acetrainer: exam preparation trainer",
    no_args_is_help=True,
)

POLL_SECONDS = 0.1


def _store(settings: Settings) -> ProgressStore:
    return ProgressStore.from_path(settings.state_path, mistake_limit=settings.mistake_registry_limit)


def _content(settings: Settings) -> ContentSource:
    if settings.content_path is None:
        logger.info("No content pack configured")
        return StaticContentSource()
    return JsonContentSource(settings.content_path)


def _session(settings: Settings, store: ProgressStore, feed: list[Outcome] | None = None) -> TrainingSession:
    """Training session whose outcomes are recorded, and optionally echoed into ``feed``."""
    recorder = ProgressRecorder(store, settings)

    def sink(outcome: Outcome) -> None:
        recorder(outcome)
        if feed is not None:
            feed.append(outcome)

    pool = _content(settings).load_items()
    return TrainingSession(pool, store, AsyncioScheduler(), settings, sink=sink)


def _require_batch(session: TrainingSession) -> None:
    if session.is_empty:
        visuals.show_batch((), session.store.snapshot)
        raise typer.Exit(1)


class StdinLines:
    """
    Stdin lines delivered to the event loop by a daemon reader thread.

    The thread never joins the loop's executor, so ``asyncio.run`` can shut
    down while a read is still blocked. EOF reads as quit, on every call after
    it too.
    """

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream if stream is not None else sys.stdin
        self._loop = asyncio.get_running_loop()
        self._queue: asyncio.Queue[str] = asyncio.Queue()
        self._eof = False
        threading.Thread(target=self._pump, name="acetrainer-stdin", daemon=True).start()

    def _pump(self) -> None:
        while True:
            try:
                line = self._stream.readline()
            except (OSError, ValueError) as e:
                logger.debug(f"Stdin closed: {e}")
                line = ""
            try:
                self._loop.call_soon_threadsafe(self._queue.put_nowait, line)
            except RuntimeError:
                # loop already closed
                return
            if not line:
                return

    async def readline(self) -> str:
        if self._eof:
            return "q"
        line = await self._queue.get()
        if not line:
            self._eof = True
            return "q"
        return line.strip()


# =============================================================================
# Progress Commands
# =============================================================================


@app.command()
def stats() -> None:
    """Show XP, accuracy and category scores."""
    settings = get_settings()
    visuals.show_stats(_store(settings).snapshot)


@app.command()
def mistakes() -> None:
    """List the mistake registry, newest first."""
    settings = get_settings()
    visuals.show_mistakes(_store(settings).snapshot.mistake_registry)


@app.command()
def review(
    limit: int = typer.Option(10, "--limit", "-l", help="Maximum mistakes to review"),
) -> None:
    """Re-answer logged mistakes. Correct answers clear the entry and earn XP."""
    settings = get_settings()
    store = _store(settings)
    pending = store.snapshot.mistake_registry[:limit]
    if not pending:
        visuals.show_mistakes(pending)
        return

    fixed = 0
    try:
        for n, entry in enumerate(pending, 1):
            visuals.show_question(entry, n, len(pending))
            letters = [option_label(i) for i in range(len(entry.options))]
            choice = Prompt.ask("Your answer", choices=letters + [c.lower() for c in letters])
            index = ord(choice.upper()) - ord("A")
            correct = store.attempt_correction(entry.id, index, settings.correction_xp)
            fixed += correct
            visuals.show_explanation(entry, correct)
    except KeyboardInterrupt:
        console.print("\n[yellow]Review interrupted.[/yellow]")

    console.print(
        f"\n[bold]Corrected {fixed} of {len(pending)}[/bold]  "
        f"[dim](+{fixed * settings.correction_xp} XP)[/dim]"
    )


# =============================================================================
# Training Commands
# =============================================================================


@app.command()
def batch(
    new: bool = typer.Option(False, "--new", "-n", help="Draw a fresh batch"),
) -> None:
    """Show the current training batch."""
    settings = get_settings()
    store = _store(settings)
    session = _session(settings, store)
    if new:
        session.new_batch()
    visuals.show_batch(session.batch, store.snapshot)


@app.command()
def words(
    search: str = typer.Option("", "--search", "-s", help="Only words whose text or definition contains this"),
) -> None:
    """Browse the word bank alphabetically."""
    settings = get_settings()
    store = _store(settings)
    found = search_items(_content(settings).load_items(), search)
    visuals.show_words(found, store.snapshot, search)


@app.command()
def flashcards() -> None:
    """Flip through the current batch."""
    settings = get_settings()
    store = _store(settings)
    session = _session(settings, store)
    _require_batch(session)

    cards = session.flashcards
    console.print("[dim]f = flip, v = verified (I knew it), k = reviewed, n/p = next/previous, s = shuffle, q = quit[/dim]")
    while True:
        item = cards.current
        visuals.show_flashcard(item, cards.flipped, cards.index, len(cards), store.snapshot.mastery(item.key))
        action = Prompt.ask("Action", choices=["f", "v", "k", "n", "p", "s", "q"], default="f")
        if action == "q":
            break
        elif action == "f":
            cards.flip()
        elif action == "v":
            session.verify_flashcard()
        elif action == "k":
            session.acknowledge_flashcard()
        elif action == "n":
            cards.next()
        elif action == "s":
            session.shuffle_flashcards()
            console.print("[dim]Deck shuffled.[/dim]")
        else:
            cards.prev()

    console.print(f"[dim]XP: {store.snapshot.xp}[/dim]")


@app.command()
def match() -> None:
    """Pair each prompt with its answer. Clearing the board earns a bonus."""
    settings = get_settings()
    store = _store(settings)
    feed: list[Outcome] = []
    session = _session(settings, store, feed)
    _require_batch(session)

    try:
        asyncio.run(_play_match(session, feed))
    except KeyboardInterrupt:
        console.print("\n[yellow]Matching interrupted.[/yellow]")
    finally:
        session.close()


async def _play_match(session: TrainingSession, feed: list[Outcome]) -> None:
    engine = session.matching
    reader = StdinLines()
    console.print("[dim]Pick a prompt by number and an answer by letter (e.g. 3 then C). q = quit[/dim]")
    while not engine.is_complete:
        visuals.show_matching_board(engine)
        line = await reader.readline()
        if line.lower() == "q":
            return

        if line.isdigit() and 1 <= int(line) <= len(engine.prompts):
            engine.select(engine.prompts[int(line) - 1].key, Side.PROMPT)
        elif len(line) == 1 and line.isalpha() and 0 <= ord(line.upper()) - 65 < len(engine.answers):
            engine.select(engine.answers[ord(line.upper()) - 65].key, Side.ANSWER)
        else:
            console.print(f"[yellow]Unknown pick: {line!r}[/yellow]")
            continue

        while feed:
            outcome = feed.pop(0)
            if isinstance(outcome, Matched):
                console.print(f"[bold green]Matched {engine.items[outcome.item_key].prompt_text}![/bold green]")
            elif isinstance(outcome, Answered) and not outcome.correct:
                console.print("[bold red]Not a pair.[/bold red]")
        if engine.error_highlight is not None:
            await asyncio.sleep(engine.mismatch_delay)

    session.claim_matching_bonus()
    console.print(
        Panel(
            f"[bold]Board cleared![/bold]\n\n+{session.settings.batch_bonus_xp} XP bonus. A new batch is ready.",
            border_style="green",
        )
    )


@app.command()
def race() -> None:
    """Timed quiz: answer before the clock runs out. Faster answers score more."""
    settings = get_settings()
    store = _store(settings)
    feed: list[Outcome] = []
    session = _session(settings, store, feed)
    _require_batch(session)

    xp_before = store.snapshot.xp
    try:
        finished = asyncio.run(_play_race(session, feed))
        distance = session.race.progress
    except KeyboardInterrupt:
        console.print("\n[yellow]Race interrupted.[/yellow]")
        finished = False
    finally:
        session.close()

    if finished:
        console.print(
            Panel(
                f"[bold]Finish line![/bold]\n\n"
                f"Distance: {visuals.format_progress_bar(distance)} {distance:.0f}%\n"
                f"XP earned: {store.snapshot.xp - xp_before}",
                title="Race Summary",
                border_style="green",
            )
        )


async def _play_race(session: TrainingSession, feed: list[Outcome]) -> bool:
    """
    Drive the race from stdin while the countdown runs on the event loop.

    One stdin read is kept in flight; each line answers whichever question is
    live when it arrives. Lines that land during feedback are ignored.
    """
    engine = session.race
    reader = StdinLines()
    answers = {item.key: item.answer_text for item in engine.items}
    console.print("[dim]Type the option number and press Enter. q = quit[/dim]")
    engine.start()

    shown = -1
    pending: asyncio.Future[str] | None = None
    while engine.phase is not RacePhase.FINISHED:
        while feed:
            outcome = feed.pop(0)
            if isinstance(outcome, Answered) and engine.last_outcome is not None:
                visuals.show_race_outcome(engine.last_outcome, answers[outcome.item_key])
        if engine.phase is RacePhase.RUNNING and engine.question is not None and shown != engine.index:
            visuals.show_race_question(engine, engine.question)
            shown = engine.index

        if pending is None:
            pending = asyncio.ensure_future(reader.readline())
        done, _ = await asyncio.wait({pending}, timeout=POLL_SECONDS)
        if pending not in done:
            continue

        line = pending.result()
        pending = None
        if line.lower() == "q":
            engine.cancel()
            return False
        question = engine.question
        if engine.phase is not RacePhase.RUNNING or question is None:
            continue
        if not line.isdigit() or not 1 <= int(line) <= len(question.options):
            console.print(f"[yellow]Pick 1-{len(question.options)}[/yellow]")
            continue
        engine.answer(question.options[int(line) - 1])

    while feed:
        outcome = feed.pop(0)
        if isinstance(outcome, Answered) and engine.last_outcome is not None:
            visuals.show_race_outcome(engine.last_outcome, answers[outcome.item_key])
    if pending is not None:
        console.print("[dim]Press Enter for results.[/dim]")
        await pending
    return True


@app.command()
def practice(
    category: str = typer.Option(
        Category.VOCABULARY.value,
        "--category", "-c",
        help="Category name or prefix, e.g. 'vocab', 'grammar', 'mock'",
    ),
    count: Optional[int] = typer.Option(None, "--count", "-n", help="Number of questions"),
) -> None:
    """Take a practice exam in one category."""
    settings = get_settings()
    try:
        chosen = Category.parse(category)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(2)

    store = _store(settings)
    questions = _content(settings).load_questions(chosen, count or default_question_count(chosen))
    exam = PracticeExam(chosen, questions, sink=ProgressRecorder(store, settings))
    if exam.is_empty:
        console.print(f"[yellow]No {chosen.value} questions available.[/yellow]")
        raise typer.Exit(1)

    try:
        for n, question in enumerate(exam.questions, 1):
            visuals.show_question(question, n, len(exam.questions))
            letters = [option_label(i) for i in range(len(question.options))]
            choice = Prompt.ask("Your answer", choices=letters + [c.lower() for c in letters])
            exam.select(question.id, ord(choice.upper()) - ord("A"))
    except KeyboardInterrupt:
        console.print("\n[yellow]Exam abandoned. Nothing was recorded.[/yellow]")
        raise typer.Exit(1)

    exam.finish(store)
    result = exam.result
    console.print(
        Panel(
            f"[bold]{result.score}/{result.total}[/bold] ({result.percent}%)\n"
            f"{len(result.mistakes)} question(s) added to the mistake registry",
            title=f"{chosen.value} Result",
            border_style="green" if not result.mistakes else "yellow",
        )
    )
    if result.mistakes and Confirm.ask("Show explanations?", default=True):
        for question in result.mistakes:
            visuals.show_question(question)
            visuals.show_explanation(question, False)


@app.command()
def drill(
    category: str = typer.Option(
        Category.SPELLING.value,
        "--category", "-c",
        help="'spelling' for the spelling lab, 'grammar' for the grammar quick-check",
    ),
    count: Optional[int] = typer.Option(None, "--count", "-n", help="Number of questions to cycle through"),
) -> None:
    """Check each answer as you go. Cycles through the questions until you quit."""
    settings = get_settings()
    rewards = {
        Category.SPELLING: settings.spelling_check_xp,
        Category.GRAMMAR: settings.grammar_check_xp,
    }
    try:
        chosen = Category.parse(category)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(2)
    if chosen not in rewards:
        console.print(f"[red]No drill for {chosen.value}. Use 'spelling' or 'grammar'.[/red]")
        raise typer.Exit(2)

    store = _store(settings)
    questions = _content(settings).load_questions(chosen, count or default_question_count(chosen))
    lab = QuestionDrill(questions, ProgressRecorder(store, settings), reward_xp=rewards[chosen])
    if not len(lab):
        console.print(f"[yellow]No {chosen.value} questions available.[/yellow]")
        raise typer.Exit(1)

    xp_before = store.snapshot.xp
    checked = right = 0
    console.print("[dim]Answer by letter. q = quit[/dim]")
    try:
        while True:
            question = lab.current
            visuals.show_question(question, lab.cursor.index + 1, len(lab))
            letters = [option_label(i) for i in range(len(question.options))]
            choice = Prompt.ask("Your answer", choices=letters + [c.lower() for c in letters] + ["q"])
            if choice == "q":
                break
            lab.select(ord(choice.upper()) - ord("A"))
            correct = bool(lab.check())
            checked += 1
            right += correct
            visuals.show_explanation(question, correct)
            lab.advance()
    except KeyboardInterrupt:
        console.print("\n[yellow]Drill stopped.[/yellow]")

    console.print(
        f"\n[bold]{right}/{checked} correct[/bold]  "
        f"[dim](+{store.snapshot.xp - xp_before} XP)[/dim]"
    )


# =============================================================================
# Entry Point
# =============================================================================


def run() -> None:
    """CLI entry point."""
    settings = get_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<level>{message}</level>",
    )

    app()


if __name__ == "__main__":
    run()
