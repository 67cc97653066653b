"""Performance benchmarking for the lottery engine.

This script measures, per league size:
- Full-lottery throughput (lotteries/second)
- Average latency per lottery
- Movement statistics of the drawn picks

Usage:
    python scripts/benchmark.py --sizes 6 --sizes 10 --sizes 16 --iterations 500
"""

from __future__ import annotations

import random
import time
from dataclasses import dataclass
from typing import List

import typer
from tabulate import tabulate
from tqdm import tqdm

from draft_lottery.config import LotteryRules
from draft_lottery.data.schema import DraftConfig, Team, TeamOdds
from draft_lottery.engine import run_complete_lottery, validate_draft_results
from draft_lottery.utils.metrics import summarize_movements

app = typer.Typer(help="Benchmark lottery engine performance")


@dataclass
class BenchmarkResults:
    """Results from benchmarking one league size."""

    teams: int
    rounds: int
    iterations: int
    avg_latency_ms: float
    throughput_per_sec: float
    mean_abs_movement: float
    stayed_share: float


def synthetic_config(teams: int, rounds: int) -> DraftConfig:
    """League of ``teams`` teams whose odds grow linearly from champion to last place."""
    total = teams * (teams + 1) / 2
    return DraftConfig(
        number_of_teams=teams,
        number_of_rounds=rounds,
        teams=[Team(id=f"team-{i}", name=f"Team {i}") for i in range(1, teams + 1)],
        weighted_system=[
            TeamOdds(position=p, percentage=round(100 * p / total, 2)) for p in range(1, teams + 1)
        ],
    )


def benchmark_size(
    teams: int, rounds: int, iterations: int, rules: LotteryRules, seed: int
) -> BenchmarkResults:
    config = synthetic_config(teams, rounds)
    order = list(range(1, teams + 1))
    rng = random.Random(seed)

    all_picks = []
    start_time = time.time()
    for _ in tqdm(range(iterations), desc=f"{teams} teams"):
        picks = run_complete_lottery(config, order, rules=rules, rng=rng)
        all_picks.extend(picks)
    elapsed = time.time() - start_time

    validation = validate_draft_results(all_picks, max_movement=rules.max_movement)
    if not validation.valid:
        typer.echo(f"Invalid picks for {teams} teams: {validation.errors[:3]}", err=True)
        raise typer.Exit(code=1)

    summary = summarize_movements(all_picks)
    return BenchmarkResults(
        teams=teams,
        rounds=rounds,
        iterations=iterations,
        avg_latency_ms=(elapsed / iterations) * 1000,
        throughput_per_sec=iterations / elapsed if elapsed > 0 else float("inf"),
        mean_abs_movement=summary.mean_abs_movement,
        stayed_share=summary.stayed / summary.total,
    )


@app.command()
def run(
    sizes: List[int] = typer.Option([10], help="League sizes to benchmark (repeat the flag)"),
    rounds: int = typer.Option(5, min=1, help="Rounds per lottery"),
    iterations: int = typer.Option(200, min=1, help="Lotteries per league size"),
    max_movement: int = typer.Option(2, min=0, help="Movement cap"),
    seed: int = typer.Option(13, help="Random seed"),
) -> None:
    """Run the lottery repeatedly and report speed and movement statistics."""
    typer.echo("Draft Lottery - Performance Benchmark")
    typer.echo("=" * 60)

    rules = LotteryRules(max_movement=max_movement)
    results = [benchmark_size(size, rounds, iterations, rules, seed) for size in sizes]

    typer.echo("\n" + "=" * 60)
    typer.echo("BENCHMARK RESULTS")
    typer.echo("=" * 60)

    table_data = [
        [
            r.teams,
            r.rounds,
            r.iterations,
            f"{r.avg_latency_ms:.2f}",
            f"{r.throughput_per_sec:.0f}",
            f"{r.mean_abs_movement:.3f}",
            f"{r.stayed_share:.1%}",
        ]
        for r in results
    ]
    headers = ["Teams", "Rounds", "Runs", "ms/lottery", "lotteries/s", "Mean |move|", "Stayed"]
    typer.echo(tabulate(table_data, headers=headers, tablefmt="simple"))
    typer.echo("\n✓ Benchmark complete!")


if __name__ == "__main__":
    app()
