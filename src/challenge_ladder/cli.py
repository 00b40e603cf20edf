"""CLI for the challenge ladder."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Annotated, TypeVar

import structlog
import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from challenge_ladder import __version__
from challenge_ladder.core.config import LadderConfig, load_config
from challenge_ladder.core.errors import LadderError, ValidationError
from challenge_ladder.core.logs import configure_logging
from challenge_ladder.models import Challenge, Match
from challenge_ladder.services.challenge import ChallengeAction, allowed_actions
from challenge_ladder.services.ladder_service import LadderService
from challenge_ladder.services.reporting import StandingRow, export_standings
from challenge_ladder.services.storage import LadderStore

T = TypeVar("T")

app = typer.Typer(
    name="challenge-ladder",
    help="Challenge Ladder - rank competitors and move positions through challenge matches",
    add_completion=False,
)
console = Console()


@dataclass
class CliState:
    config_path: Path | None = None
    db_path: Path | None = None
    verbose: bool = False


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"challenge-ladder v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Annotated[
        Path | None, typer.Option("--config", "-c", help="Path to config YAML file")
    ] = None,
    db_path: Annotated[
        Path | None, typer.Option("--db", help="Override the ladder database file")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-V", help="Verbose output")] = False,
    log_json: Annotated[bool, typer.Option("--log-json", help="Emit logs as JSON lines")] = False,
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
) -> None:
    """Challenge Ladder CLI."""
    load_dotenv()
    configure_logging(console, verbose, json_logs=log_json)
    structlog.contextvars.bind_contextvars(command=ctx.invoked_subcommand)
    ctx.obj = CliState(config_path=config_path, db_path=db_path, verbose=verbose)


def _load_config(state: CliState) -> LadderConfig:
    if state.config_path is None:
        return LadderConfig()
    return load_config(state.config_path)


def _parse_time(value: str | None) -> datetime | None:
    if value is None:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise ValidationError("--at", "Use ISO 8601, e.g. 2026-03-01T19:00") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _execute(ctx: typer.Context, fn: Callable[[LadderService], Awaitable[T]]) -> T:
    """Open the store, run ``fn`` against a service and report ladder errors."""
    state: CliState = ctx.obj
    try:
        config = _load_config(state)

        async def _run() -> T:
            store = LadderStore(config, db_path=state.db_path)
            try:
                return await fn(LadderService(config, store))
            finally:
                await store.close()

        return asyncio.run(_run())
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    except LadderError as e:
        console.print(f"[red]{e}")
        raise typer.Exit(1) from e
    except Exception as e:
        console.print(f"[red]Unexpected error:[/red] {e}")
        if state.verbose:
            console.print_exception()
        raise typer.Exit(1) from e


def _print_challenge(challenge: Challenge, config: LadderConfig | None = None) -> None:
    venue = challenge.venue or "-"
    if config is not None and challenge.venue:
        venue = config.venue_name(challenge.venue)
    when = challenge.scheduled_time.isoformat() if challenge.scheduled_time else "-"
    console.print(f"[bold]Challenge[/bold] {challenge.id}")
    console.print(f"  {challenge.challenger_id} vs {challenge.challenged_id}")
    console.print(f"  {challenge.discipline}, race to {challenge.race_to}")
    console.print(f"  Status: [cyan]{challenge.status}[/cyan] (version {challenge.version})")
    console.print(f"  Venue: {venue}  Time: {when}")
    if challenge.proposer_id:
        console.print(f"  Proposed by: {challenge.proposer_id}")


def _print_match(match: Match) -> None:
    console.print(f"[bold]Match[/bold] {match.id}")
    console.print(f"  {match.challenger_id} vs {match.challenged_id}, race to {match.race_to}")
    console.print(f"  Status: [cyan]{match.status}[/cyan]")
    if match.winner_id:
        console.print(
            f"  Winner: [green]{match.winner_id}[/green] "
            f"({match.challenger_games}-{match.challenged_games})"
        )
    if match.dispute_reason:
        console.print(f"  [yellow]Disputed:[/yellow] {match.dispute_reason}")


@app.command()
def seed(
    ctx: typer.Context,
    competitors: Annotated[list[str], typer.Argument(help="Competitor ids, top of ladder first")],
) -> None:
    """Append competitors to the ladder in the given order."""
    entries = _execute(ctx, lambda service: service.seed_ladder(competitors))
    for entry in entries:
        console.print(f"  #{entry.rank_position} {entry.competitor_id}")


@app.command()
def join(
    ctx: typer.Context,
    competitor: Annotated[str, typer.Argument(help="Competitor id")],
    score: Annotated[int, typer.Option("--score", help="Initial points")] = 0,
) -> None:
    """Rank a new competitor at the bottom of the ladder."""
    entry = _execute(ctx, lambda service: service.add_competitor(competitor, score))
    console.print(f"[green]{competitor} joined at #{entry.rank_position}[/green]")


@app.command()
def standings(
    ctx: typer.Context,
    export: Annotated[
        Path | None, typer.Option("--export", help="Write standings.md/csv/json to this dir")
    ] = None,
    save: Annotated[
        bool, typer.Option("--save", help="Write standings to the configured output_dir")
    ] = False,
) -> None:
    """Show the current ladder."""

    async def _load(service: LadderService) -> tuple[list[StandingRow], LadderConfig]:
        return await service.get_standings(), service.config

    rows, config = _execute(ctx, _load)

    table = Table(title="Ladder Standings")
    table.add_column("Rank", justify="right")
    table.add_column("Competitor")
    table.add_column("Score", justify="right")
    table.add_column("W", justify="right")
    table.add_column("L", justify="right")
    for r in rows:
        table.add_row(str(r.rank), r.competitor_id, str(r.score), str(r.wins), str(r.losses))
    console.print(table)

    if export is None and save:
        export = Path(config.output_dir)
    if export is not None:
        for path in export_standings(rows, export):
            console.print(f"Saved: {path}")


@app.command()
def challenge(
    ctx: typer.Context,
    challenger: Annotated[str, typer.Argument(help="Competitor issuing the challenge")],
    challenged: Annotated[str, typer.Argument(help="Competitor being challenged")],
    discipline: Annotated[str, typer.Option("--discipline", "-d", help="Discipline")] = "8-ball",
    race_to: Annotated[int | None, typer.Option("--race-to", "-r", help="Games to win")] = None,
) -> None:
    """Issue a challenge."""

    async def _create(service: LadderService) -> Challenge:
        race = race_to if race_to is not None else service.config.min_race
        return await service.create_challenge(challenger, challenged, discipline, race)

    created = _execute(ctx, _create)
    console.print("[green]Challenge created[/green]")
    _print_challenge(created)


@app.command()
def respond(
    ctx: typer.Context,
    challenge_id: Annotated[str, typer.Argument(help="Challenge id")],
    actor: Annotated[str, typer.Argument(help="Acting competitor")],
    action: Annotated[ChallengeAction, typer.Argument(help="Action to take")],
    venue: Annotated[str | None, typer.Option("--venue", help="Venue id")] = None,
    at: Annotated[str | None, typer.Option("--at", help="Match time (ISO 8601)")] = None,
    expect_version: Annotated[
        int | None, typer.Option("--expect-version", help="Reject if the challenge changed")
    ] = None,
) -> None:
    """Propose, counter, confirm, decline or cancel a challenge."""

    async def _respond(service: LadderService) -> tuple[Challenge | Match, LadderConfig]:
        result = await service.respond_to_challenge(
            challenge_id,
            actor,
            action,
            venue=venue,
            scheduled_time=_parse_time(at),
            expected_version=expect_version,
        )
        return result, service.config

    result, config = _execute(ctx, _respond)
    if isinstance(result, Match):
        console.print("[green]Challenge locked - match scheduled[/green]")
        _print_match(result)
    else:
        _print_challenge(result, config)


@app.command()
def expire(
    ctx: typer.Context,
    challenge_id: Annotated[str, typer.Argument(help="Challenge id")],
) -> None:
    """Mark an open challenge as expired."""
    expired = _execute(ctx, lambda service: service.expire_challenge(challenge_id))
    _print_challenge(expired)


@app.command("submit-score")
def submit_score(
    ctx: typer.Context,
    match_id: Annotated[str, typer.Argument(help="Match id")],
    actor: Annotated[str, typer.Argument(help="Submitting competitor")],
    my_games: Annotated[int, typer.Argument(help="Games you won")],
    opponent_games: Annotated[int, typer.Argument(help="Games your opponent won")],
    livestream: Annotated[
        str | None, typer.Option("--livestream", help="Livestream URL")
    ] = None,
) -> None:
    """Submit your view of a match's final score."""
    result = _execute(
        ctx,
        lambda service: service.submit_match_score(
            match_id, actor, my_games, opponent_games, livestream
        ),
    )
    _print_match(result)


@app.command()
def show(
    ctx: typer.Context,
    competitor: Annotated[str, typer.Argument(help="Competitor id")],
) -> None:
    """Show a competitor's challenges and matches."""

    async def _load(service: LadderService) -> tuple[list[Challenge], list[Match]]:
        return (
            await service.get_challenges_for(competitor),
            await service.get_matches_for(competitor),
        )

    challenges, matches = _execute(ctx, _load)

    table = Table(title=f"Challenges: {competitor}")
    for column in ("Id", "Opponent", "Race", "Status", "You can"):
        table.add_column(column)
    for c in challenges:
        actions = ", ".join(allowed_actions(c, competitor)) or "-"
        table.add_row(c.id[:8], c.opponent_of(competitor), str(c.race_to), c.status, actions)
    console.print(table)

    table = Table(title=f"Matches: {competitor}")
    for column in ("Id", "Challenger", "Challenged", "Status", "Score", "Winner"):
        table.add_column(column)
    for m in matches:
        score = "-" if m.challenger_games is None else f"{m.challenger_games}-{m.challenged_games}"
        table.add_row(
            m.id[:8], m.challenger_id, m.challenged_id, m.status, score, m.winner_id or "-"
        )
    console.print(table)


@app.command()
def activity(
    ctx: typer.Context,
    limit: Annotated[int, typer.Option("--limit", "-n", help="Number of events")] = 20,
    competitor: Annotated[
        str | None, typer.Option("--competitor", help="Only events involving this competitor")
    ] = None,
) -> None:
    """Show recent ladder activity."""
    events = _execute(ctx, lambda service: service.get_activity(limit, competitor))
    for event in events:
        console.print(
            f"[dim]{event.created_at:%Y-%m-%d %H:%M}[/dim] "
            f"[cyan]{event.type}[/cyan] {event.description}"
        )


@app.command()
def validate(
    config_path: Annotated[Path, typer.Argument(help="Path to config YAML file")],
) -> None:
    """Validate a configuration file without touching the ladder."""
    try:
        config = load_config(config_path)
        console.print("[green]Configuration is valid![/green]")
        console.print(f"  Minimum race: {config.min_race}")
        console.print(f"  Max rank difference: {config.max_rank_diff}")
        console.print(f"  Disciplines: {', '.join(config.disciplines) or 'any'}")
        console.print(f"  Venues: {', '.join(config.venues.values()) or 'any'}")
        console.print(f"  Database: {config.get_database_path()}")

    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    except Exception as e:
        console.print(f"[red]Validation error:[/red] {e}")
        raise typer.Exit(1) from e


@app.command()
def info() -> None:
    """Show tool information and example commands."""
    console.print("[bold]Challenge Ladder[/bold]")
    console.print(f"Version: {__version__}\n")

    console.print("[bold]Example Commands:[/bold]")
    console.print("  # Seed a ladder, top first")
    console.print("  challenge-ladder seed alice bob carol dave erin\n")

    console.print("  # Erin challenges Bob to a race to 5")
    console.print("  challenge-ladder challenge erin bob --race-to 5\n")

    console.print("  # Bob proposes, Erin confirms")
    console.print(
        "  challenge-ladder respond <challenge-id> bob propose "
        "--venue valley-hub --at 2026-03-01T19:00"
    )
    console.print("  challenge-ladder respond <challenge-id> erin confirm\n")

    console.print("  # Both players report the score")
    console.print("  challenge-ladder submit-score <match-id> erin 5 3")
    console.print("  challenge-ladder submit-score <match-id> bob 3 5\n")

    console.print("  # Standings with export")
    console.print("  challenge-ladder standings --export ./reports")


if __name__ == "__main__":
    app()
