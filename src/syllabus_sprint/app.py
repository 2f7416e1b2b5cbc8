"""Interactive CLI application."""
import logging
import os
import random
import time
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from syllabus_sprint.db import DEFAULT_DB_PATH, init_db
from syllabus_sprint.importer import draft_from_file, draft_from_text, import_csv, is_readable
from syllabus_sprint.models import Difficulty, Settings, User
from syllabus_sprint.seed import is_seeded, seed_all
from syllabus_sprint.session import (
    ALL_TOPICS, SessionState, correct_count, current_question, difficulty_changed,
    is_complete, new_session, record_answer, topic_counts,
)
from syllabus_sprint.stats import accuracy, recent, record, today_progress
from syllabus_sprint.store import (
    add_manual_question, current_user, delete_question, load_history, load_questions,
    load_settings, load_users, save_history, save_settings, save_user, search_questions,
    sign_in, sign_out, update_question,
)
from syllabus_sprint.streaks import needs_reconcile, reconcile
from syllabus_sprint.timer import Countdown
from syllabus_sprint.users import COINS_PER_CORRECT, award_coins, leaderboard

console = Console()
logger = logging.getLogger(__name__)

LETTERS = ["a", "b", "c", "d"]
EXIT_WORDS = ("q", "menu")


class SessionExitRequested(Exception):
    """Raised when the learner leaves a practice run early."""


@dataclass
class Preferences:
    topic_filter: str = ALL_TOPICS
    difficulty: Difficulty = Difficulty.EASY
    adaptive: bool = True
    timer_on: bool = False


def configure_logging() -> None:
    level = os.environ.get("SYLLABUS_SPRINT_LOG", "WARNING").upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def session_prompt(prompt: str, choices: Optional[list[str]] = None, **kwargs) -> str:
    """Prompt inside a session; "q" or "menu" leaves it."""
    if choices:
        prompt = f"{prompt} ({'/'.join(choices)}, q to stop)"
        kwargs.update(choices=list(choices) + list(EXIT_WORDS), show_choices=False)
    answer = Prompt.ask(prompt, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def accent(settings: Settings) -> str:
    return "magenta" if settings.dark else "blue"


def show_welcome(user: User, settings: Settings):
    console.print(Panel(
        f"[bold]Syllabus Sprint[/bold]\n[dim]Adaptive MCQ practice[/dim]\n\n"
        f"Hi {user.name}  |  {user.coins} coins  |  {user.streak} day streak",
        title="Welcome", border_style=accent(settings),
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("learn", "Practice a set of questions"),
        ("topic", "Choose a topic filter"),
        ("difficulty", "Choose the difficulty"),
        ("adaptive", "Toggle adaptive difficulty"),
        ("timer", "Toggle the 30s question timer"),
        ("review", "Review the last set"),
        ("stats", "Daily goal, streak and history"),
        ("leaderboard", "Top learners"),
        ("admin", "Draft, import and edit questions"),
        ("settings", "Dark mode and notifications"),
        ("signin", "Create a profile and sign in"),
        ("signout", "Switch back to the guest profile"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def start_of_day(db_path: str, today: Optional[date] = None) -> User:
    """Reconcile the current user's streak once per calendar day."""
    today = today or date.today()
    user = current_user(db_path)
    if needs_reconcile(user, today):
        user = reconcile(user, load_history(db_path), today)
        save_user(db_path, user)
        logger.info("Reconciled streak for %s: %d", user.uid, user.streak)
    return user


def credit_set(db_path: str, state: SessionState, today: Optional[date] = None) -> int:
    """Credit a completed set to today's tally. Returns the correct count."""
    correct = correct_count(state)
    history = record(load_history(db_path), today or date.today(), len(state.pool), correct)
    save_history(db_path, history)
    return correct


def run_practice(
    db_path: str,
    prefs: Preferences,
    rng: Optional[random.Random] = None,
    today: Optional[date] = None,
    clock=time.monotonic,
) -> SessionState:
    bank = load_questions(db_path)
    state = new_session(bank, prefs.topic_filter, prefs.difficulty, rng=rng)
    if not state.pool:
        console.print(
            f"[yellow]No {prefs.difficulty.value} questions for topic "
            f"'{prefs.topic_filter}'. Try another filter or add questions in admin.[/yellow]"
        )
        return state
    settings = load_settings(db_path)
    countdown = Countdown()
    console.print(f"\n[bold]Practice[/bold] ({len(state.pool)} questions, {state.active_difficulty.value})\n")
    try:
        while current_question(state) is not None:
            q = current_question(state)
            console.print(f"[bold]Q{state.index + 1}/{len(state.pool)}.[/bold] [dim]{escape(q.topic)}[/dim] {escape(q.prompt)}\n")
            for letter, option in zip(LETTERS, q.options):
                console.print(f"  [cyan]{letter})[/cyan] {escape(option)}")
            if prefs.timer_on:
                countdown.start()
            started = clock()
            choice = session_prompt("\nYour answer", choices=LETTERS)
            if prefs.timer_on:
                countdown.advance(clock() - started)
            if countdown.locked:
                console.print("[red]Time up![/red] Answer locked.")
                correct, chosen = False, "(time up)"
                countdown.reset()
            else:
                index = LETTERS.index(choice.strip().lower())
                correct, chosen = index == q.answer_index, q.options[index]

            user = award_coins(current_user(db_path), correct)
            save_user(db_path, user)
            if correct:
                console.print(f"[green]Correct![/green] +{COINS_PER_CORRECT} coins")
            else:
                console.print(f"[red]Incorrect.[/red] Answer: [green]{escape(q.answer)}[/green]")
            if q.explanation:
                console.print(f"[dim]{escape(q.explanation)}[/dim]")
            console.print()

            before = state
            state = record_answer(state, correct, chosen, adaptive=prefs.adaptive)
            prefs.difficulty = state.active_difficulty
            if is_complete(state):
                score = credit_set(db_path, state, today)
                console.print(f"[bold]Set complete: {score}/{len(state.pool)}[/bold]\n")
                if settings.notifications:
                    console.print(Panel(
                        f"You finished a set. Coins: +{score * COINS_PER_CORRECT}",
                        title="Great job!", border_style="green",
                    ))
                break
            if difficulty_changed(before, state):
                console.print(f"[magenta]Difficulty is now {state.active_difficulty.value}.[/magenta]\n")
                state = new_session(bank, prefs.topic_filter, state.active_difficulty, rng=rng)
                if not state.pool:
                    console.print("[yellow]No questions at this level yet.[/yellow]")
                    break
    except SessionExitRequested:
        console.print("[dim]Set abandoned; progress in this set is not credited.[/dim]")
    return state


def cmd_topic(db_path: str, prefs: Preferences):
    counts = topic_counts(load_questions(db_path))
    table = Table(title="Topics")
    table.add_column("Topic", style="cyan")
    table.add_column("Questions", justify="right")
    for name, count in counts:
        marker = " ←" if name == prefs.topic_filter else ""
        table.add_row(name + marker, str(count))
    console.print(table)
    names = [name for name, _ in counts]
    prefs.topic_filter = Prompt.ask("Topic", choices=names, default=prefs.topic_filter if prefs.topic_filter in names else ALL_TOPICS)


def cmd_difficulty(prefs: Preferences):
    value = Prompt.ask("Difficulty", choices=[d.value for d in Difficulty.ladder()], default=prefs.difficulty.value)
    prefs.difficulty = Difficulty.parse(value)


def cmd_review(state: Optional[SessionState]):
    if state is None or not state.answers:
        console.print("[yellow]Nothing to review yet. Answer some questions first.[/yellow]")
        return
    for i, answer in enumerate(state.answers, 1):
        mark = "[green]✓[/green]" if answer.correct else "[red]✗[/red]"
        console.print(f"{mark} [bold]{i}.[/bold] {escape(answer.question.prompt)}")
        console.print(f"   You chose: {escape(answer.chosen_label)}  |  Answer: [green]{escape(answer.question.answer)}[/green]")
        if answer.question.explanation:
            console.print(f"   [dim]{escape(answer.question.explanation)}[/dim]")


def cmd_stats(db_path: str, today: Optional[date] = None):
    today = today or date.today()
    user = current_user(db_path)
    history = load_history(db_path)
    progress = today_progress(history, today)
    console.print(Panel(
        f"Today: [bold]{progress.attempted}/{user.daily_goal}[/bold] questions"
        f"  |  Streak: [bold]{user.streak}[/bold] (best {user.best_streak})"
        f"  |  Coins: [bold]{user.coins}[/bold]",
        title=f"Progress for {user.name}",
    ))
    table = Table(title="Last 14 days")
    table.add_column("Date")
    table.add_column("Attempted", justify="right")
    table.add_column("Correct", justify="right")
    table.add_column("Accuracy", justify="right")
    for stat in recent(history, 14):
        table.add_row(stat.date, str(stat.attempted), str(stat.correct), f"{accuracy(stat)}%")
    console.print(table)


def cmd_leaderboard(db_path: str):
    table = Table(title="Leaderboard")
    table.add_column("#", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Coins", justify="right")
    table.add_column("Best streak", justify="right")
    for i, user in enumerate(leaderboard(load_users(db_path)), 1):
        table.add_row(str(i), user.name, str(user.coins), str(user.best_streak))
    console.print(table)


def read_multiline(prompt: str) -> str:
    console.print(f"{prompt} [dim](finish with an empty line)[/dim]")
    lines = []
    while True:
        line = Prompt.ask("", default="", show_default=False)
        if not line:
            break
        lines.append(line)
    return "\n".join(lines)


def admin_edit(db_path: str):
    question_id = Prompt.ask("Question id")
    prompt = Prompt.ask("Question text (blank to keep)", default="", show_default=False)
    options = Prompt.ask("Options a,b,c,d (blank to keep)", default="", show_default=False)
    answer = Prompt.ask("Answer index 0-3 (blank to keep)", default="", show_default=False)
    changes = {}
    if prompt:
        changes["prompt"] = prompt
    if options:
        changes["options"] = [o.strip() for o in options.split(",")]
    if answer:
        changes["answer_index"] = answer
    updated = update_question(db_path, question_id, **changes)
    if updated is None:
        console.print(f"[red]No question with id {question_id}[/red]")
    else:
        console.print(f"[green]Updated {updated.id}[/green]")


def admin_list(db_path: str):
    text = Prompt.ask("Filter (blank for all)", default="", show_default=False)
    table = Table(title="Question bank")
    table.add_column("Id", style="cyan")
    table.add_column("Topic")
    table.add_column("Level")
    table.add_column("Question")
    for q in search_questions(load_questions(db_path), text):
        table.add_row(q.id, q.topic, q.difficulty.value, q.prompt)
    console.print(table)


def cmd_admin(db_path: str):
    action = Prompt.ask(
        "Admin", choices=["draft", "file", "csv", "add", "edit", "delete", "list", "back"], default="list",
    )
    if action == "draft":
        topic = Prompt.ask("Topic", default="General")
        text = read_multiline("Paste syllabus text")
        if not is_readable(text):
            console.print("[yellow]Not enough text to draft from.[/yellow]")
            return
        count = draft_from_text(db_path, text, topic)
        console.print(f"[green]Drafted {count} MCQs.[/green] Review & edit before publishing.")
    elif action == "file":
        file_path = Prompt.ask("File path")
        if not Path(file_path).exists():
            console.print(f"[red]File not found: {file_path}[/red]")
            return
        topic = Prompt.ask("Topic", default="General")
        result = draft_from_file(db_path, file_path, topic)
        if not result["readable"]:
            console.print("[red]Couldn't read that file.[/red] Try another file or paste text manually.")
            return
        console.print(
            f"[green]Imported {result['filename']} (~{result['length']} chars) → "
            f"{result['drafted']} drafts[/green]"
        )
    elif action == "csv":
        count = import_csv(db_path, read_multiline("Paste CSV rows"))
        console.print(f"[green]Imported {count} questions.[/green]")
    elif action == "add":
        topic = Prompt.ask("Topic", default="General")
        difficulty = Prompt.ask("Difficulty", choices=[d.value for d in Difficulty.ladder()], default="easy")
        q = add_manual_question(db_path, topic, difficulty)
        console.print(f"[green]Added placeholder {q.id}.[/green] Use 'edit' to fill it in.")
    elif action == "edit":
        admin_edit(db_path)
    elif action == "delete":
        question_id = Prompt.ask("Question id")
        if delete_question(db_path, question_id):
            console.print(f"[green]Deleted {question_id}[/green]")
        else:
            console.print(f"[red]No question with id {question_id}[/red]")
    elif action == "list":
        admin_list(db_path)


def cmd_settings(db_path: str):
    settings = load_settings(db_path)
    settings.dark = Confirm.ask("Dark mode?", default=settings.dark)
    settings.notifications = Confirm.ask("Notify when a set is complete?", default=settings.notifications)
    save_settings(db_path, settings)
    console.print("[green]Settings saved.[/green]")


def cmd_signin(db_path: str, today: Optional[date] = None) -> User:
    name = Prompt.ask("Name")
    email = Prompt.ask("Email (optional)", default="", show_default=False)
    user = sign_in(db_path, name, email or None, today)
    console.print(f"[green]Welcome, {user.name}![/green]")
    return user


def main():
    configure_logging()
    db_path = DEFAULT_DB_PATH
    init_db(db_path)
    first_run = not is_seeded(db_path)
    if first_run:
        console.print("[dim]Setting up for first use...[/dim]")
    seed_all(db_path)
    if first_run:
        console.print("[green]Ready![/green]\n")

    user = start_of_day(db_path)
    show_welcome(user, load_settings(db_path))
    prefs = Preferences()
    last_state = None

    while True:
        show_menu()
        console.print(
            f"\n[dim]topic={prefs.topic_filter}  difficulty={prefs.difficulty.value}  "
            f"adaptive={'on' if prefs.adaptive else 'off'}  timer={'on' if prefs.timer_on else 'off'}[/dim]"
        )
        choice = Prompt.ask("\n[bold]>[/bold]", default="learn").strip().lower()
        try:
            if choice == "learn":
                start_of_day(db_path)
                last_state = run_practice(db_path, prefs)
            elif choice == "topic":
                cmd_topic(db_path, prefs)
            elif choice == "difficulty":
                cmd_difficulty(prefs)
            elif choice == "adaptive":
                prefs.adaptive = not prefs.adaptive
                console.print(f"Adaptive difficulty {'on' if prefs.adaptive else 'off'}.")
            elif choice == "timer":
                prefs.timer_on = not prefs.timer_on
                console.print(f"Timer {'on' if prefs.timer_on else 'off'}.")
            elif choice == "review":
                cmd_review(last_state)
            elif choice == "stats":
                cmd_stats(db_path)
            elif choice == "leaderboard":
                cmd_leaderboard(db_path)
            elif choice == "admin":
                cmd_admin(db_path)
            elif choice == "settings":
                cmd_settings(db_path)
            elif choice == "signin":
                cmd_signin(db_path)
                last_state = None
            elif choice == "signout":
                sign_out(db_path)
                user = start_of_day(db_path)
                console.print(f"[dim]Signed out. Now using {user.name}.[/dim]")
                last_state = None
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Keep the streak going![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            logger.exception("Command %r failed", choice)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
