"""Interactive CLI application."""
import sys
from datetime import datetime

from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from katakana_srs.config import get_settings
from katakana_srs.dashboard import get_dashboard_stats, get_hourly_reviews, get_upcoming_reviews
from katakana_srs.db import Database
from katakana_srs.due_queue import DueQueue
from katakana_srs.errors import KatakanaSRSError, SessionComplete
from katakana_srs.lessons import complete_lesson, get_lesson_items, get_next_lesson
from katakana_srs.migrations import apply_migrations
from katakana_srs.notes import delete_note, save_note
from katakana_srs.reviews import get_all_symbols_with_reviews, get_due_reviews, submit_answer
from katakana_srs.seed import is_seeded, seed_all
from katakana_srs.stages import TIERS, stage_name

console = Console()

EXIT_WORDS = ("q", "menu")

TIER_COLORS = {
    "Apprentice": "magenta",
    "Guru": "blue",
    "Master": "cyan",
    "Enlightened": "green",
}


class SessionExitRequested(Exception):
    """User asked to leave a lesson or review session."""


def session_prompt(prompt: str, **kwargs) -> str:
    answer = Prompt.ask(prompt, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def check_answer(romaji: str, answer: str) -> bool:
    return answer.strip().lower() == romaji.strip().lower()


def show_welcome():
    console.print(Panel(
        "[bold]カタカナ[/bold]\n[dim]Katakana spaced-repetition trainer[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("lesson", "Learn the next lesson batch"),
        ("review", "Review due items"),
        ("dashboard", "Progress and stats"),
        ("forecast", "Upcoming reviews"),
        ("list", "All katakana and their stage"),
        ("note", "Add or remove a note"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def ask_symbol(item, position: str) -> bool:
    """Quiz one symbol; returns whether the romaji typed was right."""
    console.print(Panel(f"[bold]{item.symbol.character}[/bold]", title=position, border_style="cyan"))
    answer = session_prompt("Romaji")
    correct = check_answer(item.symbol.romaji, answer)
    if correct:
        console.print("[green]Correct![/green]")
    else:
        console.print(f"[red]Incorrect.[/red] Answer: [green]{item.symbol.romaji}[/green]")
        if item.note:
            console.print(f"[dim]Note: {item.note}[/dim]")
    return correct


def run_lesson(db: Database, batch) -> int:
    """Teach a batch, quiz it and complete it. Returns reviews created."""
    items = get_lesson_items(db, batch.batch_number)
    console.print(Panel(
        f"[bold]Lesson {batch.batch_number}: {batch.name}[/bold]\n[dim]{batch.description}[/dim]",
        border_style="blue",
    ))
    for i, item in enumerate(items, 1):
        body = f"[bold]{item.symbol.character}[/bold]  →  [green]{item.symbol.romaji}[/green]"
        if item.note:
            body += f"\n[dim]Note: {item.note}[/dim]"
        console.print(Panel(body, title=f"{i}/{len(items)}", border_style="cyan"))
        session_prompt("[dim]Press Enter for the next symbol[/dim]", default="", show_default=False)

    console.print("\n[bold]Lesson quiz[/bold]\n")
    queue = DueQueue(items)
    while True:
        try:
            item = queue.next_item()
        except SessionComplete:
            break
        correct = ask_symbol(item, f"{queue.completed + 1}/{queue.total}")
        queue.record_answer(item, correct)

    created = complete_lesson(db, batch.batch_number, queue.first_attempts)
    console.print(
        f"[bold]First try: {queue.first_attempt_correct()}/{queue.total} "
        f"({queue.first_attempt_accuracy()}%)[/bold] - {created} item(s) added to reviews\n"
    )
    return created


def run_review_session(db: Database, reviews: list) -> tuple[int, int]:
    """Quiz due reviews until each is answered correctly once.

    Only the first answer for each item is submitted to the scheduler.
    """
    if not reviews:
        console.print("[yellow]No reviews due right now![/yellow]")
        return 0, 0
    console.print(f"\n[bold]Reviews[/bold] - {len(reviews)} due\n")
    queue = DueQueue(reviews)
    while True:
        try:
            item = queue.next_item()
        except SessionComplete:
            break
        correct = ask_symbol(item, f"{queue.completed + 1}/{queue.total}")
        if queue.record_answer(item, correct):
            updated = submit_answer(db, item.id, correct)
            console.print(f"[dim]→ {stage_name(updated.stage)}[/dim]")
        console.print()
    score = queue.first_attempt_correct()
    console.print(f"[bold]Score: {score}/{queue.total} ({queue.first_attempt_accuracy()}%)[/bold]\n")
    return score, queue.total


def cmd_lesson(db: Database):
    batch = get_next_lesson(db)
    if batch is None:
        console.print("[green]All lessons completed! Keep up with your reviews.[/green]")
        return
    run_lesson(db, batch)


def cmd_review(db: Database):
    run_review_session(db, get_due_reviews(db))


def cmd_dashboard(db: Database):
    stats = get_dashboard_stats(db)
    console.print(Panel(
        f"Reviews due now: [bold]{stats['reviews_due_now']}[/bold]  |  "
        f"Next 24h: [bold]{stats['reviews_due_today']}[/bold]  |  "
        f"Lessons left: [bold]{stats['lessons_available']}[/bold]",
        title="Katakana Dashboard", border_style="blue",
    ))
    console.print(f"\n  Accuracy: [bold]{stats['accuracy_rate']}%[/bold]  "
                  f"({stats['total_items']} katakana in total)\n")
    table = Table(title="Stage Distribution")
    table.add_column("Tier", style="cyan")
    table.add_column("Items", justify="right")
    for tier in TIERS:
        color = TIER_COLORS[tier]
        table.add_row(f"[{color}]{tier}[/{color}]", str(stats["stage_distribution"][tier]))
    console.print(table)


def cmd_forecast(db: Database):
    table = Table(title="Upcoming Reviews")
    table.add_column("Date")
    table.add_column("New", justify="right")
    table.add_column("Total", justify="right")
    for day in get_upcoming_reviews(db):
        table.add_row(day["date"], f"+{day['new_count']}", str(day["cumulative_count"]))
    console.print(table)

    day = Prompt.ask("Hourly view for date (blank to skip)", default="", show_default=False).strip()
    if not day:
        return
    table = Table(title=f"Reviews on {day}")
    table.add_column("Hour", justify="right")
    table.add_column("New", justify="right")
    table.add_column("Total", justify="right")
    for hour in get_hourly_reviews(db, day):
        if hour["new_count"]:
            table.add_row(f"{hour['hour']:02d}:00", f"+{hour['new_count']}", str(hour["cumulative_count"]))
    console.print(table)


def cmd_list(db: Database):
    table = Table(title="Katakana")
    table.add_column("Kana")
    table.add_column("Romaji")
    table.add_column("Type")
    table.add_column("Stage")
    table.add_column("Next review")
    now = datetime.now()
    for status in get_all_symbols_with_reviews(db):
        review = status.review
        if review is None:
            stage, due = "[dim]locked[/dim]", ""
        else:
            stage = stage_name(review.stage)
            due = "now" if review.next_due <= now else review.next_due.strftime("%Y-%m-%d %H:%M")
        table.add_row(status.symbol.character, status.symbol.romaji, status.symbol.category, stage, due)
    console.print(table)


def cmd_note(db: Database):
    character = Prompt.ask("Katakana").strip()
    row = db.query_one("SELECT id FROM symbols WHERE character = ?", (character,))
    if row is None:
        console.print(f"[red]Unknown katakana: {character}[/red]")
        return
    text = Prompt.ask("Note (blank to delete)", default="", show_default=False)
    if text.strip():
        save_note(db, row["id"], text.strip())
        console.print("[green]Note saved.[/green]")
    else:
        delete_note(db, row["id"])
        console.print("[dim]Note deleted.[/dim]")


COMMANDS = {
    "lesson": cmd_lesson,
    "review": cmd_review,
    "dashboard": cmd_dashboard,
    "forecast": cmd_forecast,
    "list": cmd_list,
    "note": cmd_note,
}


def main():
    settings = get_settings()
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level, format="<level>{message}</level>")

    with Database(settings.db_path) as db:
        first_run = not is_seeded(db)
        if first_run:
            console.print("[dim]Setting up for first use...[/dim]")
        seed_all(db)
        apply_migrations(db)
        if first_run:
            console.print("[green]Ready![/green]\n")

        show_welcome()

        while True:
            show_menu()
            choice = Prompt.ask("\n[bold]>[/bold]", default="review").strip().lower()
            if choice in ("quit", "exit", "q"):
                console.print("[dim]またね![/dim]")
                break
            command = COMMANDS.get(choice)
            if command is None:
                console.print("[red]Unknown command. Try again.[/red]")
                continue
            try:
                command(db)
            except SessionExitRequested:
                console.print("[dim]Session ended. Answers so far are saved.[/dim]")
            except KeyboardInterrupt:
                console.print("\n[dim]Use 'quit' to exit.[/dim]")
            except KatakanaSRSError as e:
                console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
