"""Standings reports for the challenge ladder."""

from __future__ import annotations

import csv
import json
from collections import Counter
from collections.abc import Sequence
from dataclasses import asdict, dataclass
from pathlib import Path

import structlog
from tabulate import tabulate

from challenge_ladder.models import LadderEntry, Match, MatchStatus

logger = structlog.get_logger()

STANDINGS_HEADERS = ("Rank", "Competitor", "Score", "Matches", "Wins", "Losses")


@dataclass
class StandingRow:
    """A ladder entry joined with its completed-match record."""

    rank: int
    competitor_id: str
    score: int
    wins: int
    losses: int

    @property
    def matches(self) -> int:
        return self.wins + self.losses


def build_standings(entries: Sequence[LadderEntry], matches: Sequence[Match]) -> list[StandingRow]:
    """Combine ladder positions with win/loss counts from completed matches.

    Args:
        entries: Ladder entries in any order.
        matches: Matches of any status; only completed ones are counted.

    Returns:
        Rows sorted by rank.
    """
    wins: Counter[str] = Counter()
    losses: Counter[str] = Counter()
    for m in matches:
        if m.status != MatchStatus.COMPLETED or m.winner_id is None:
            continue
        wins[m.winner_id] += 1
        losses[m.loser_id] += 1

    return [
        StandingRow(
            rank=e.rank_position,
            competitor_id=e.competitor_id,
            score=e.score,
            wins=wins[e.competitor_id],
            losses=losses[e.competitor_id],
        )
        for e in sorted(entries, key=lambda e: e.rank_position)
    ]


def render_standings(rows: Sequence[StandingRow], title: str = "Ladder Standings") -> str:
    """Render standings as a Markdown report."""
    table = [(r.rank, r.competitor_id, r.score, r.matches, r.wins, r.losses) for r in rows]
    lines = [f"# {title}", ""]
    if not rows:
        lines.append("_No ranked competitors._")
    else:
        lines.append(tabulate(table, headers=STANDINGS_HEADERS, tablefmt="github"))
    return "\n".join(lines) + "\n"


def export_standings(rows: Sequence[StandingRow], output_dir: Path) -> list[Path]:
    """Write standings as Markdown, CSV and JSON.

    Returns:
        Paths of the written files.
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    md_path = output_dir / "standings.md"
    md_path.write_text(render_standings(rows), encoding="utf-8")

    csv_path = output_dir / "standings.csv"
    with csv_path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["rank", "competitor_id", "score", "matches", "wins", "losses"])
        for r in rows:
            writer.writerow([r.rank, r.competitor_id, r.score, r.matches, r.wins, r.losses])

    json_path = output_dir / "standings.json"
    with json_path.open("w", encoding="utf-8") as f:
        json.dump([{**asdict(r), "matches": r.matches} for r in rows], f, indent=2)

    logger.debug("standings_exported", path=str(output_dir), rows=len(rows))
    return [md_path, csv_path, json_path]
