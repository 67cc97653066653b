"""Command line entrypoints for draft-lottery."""

from __future__ import annotations

import random
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional

import typer
from tabulate import tabulate

from draft_lottery.config import get_config
from draft_lottery.data.schema import DraftConfig, DraftLottery, DraftPick, sample_teams
from draft_lottery.data.store import LotteryStore, StoreError
from draft_lottery.engine import InitialOrderError, LotteryError, run_complete_lottery
from draft_lottery.utils import setup_logging
from draft_lottery.utils.metrics import picks_to_frame, simulate_position_odds, summarize_movements

app = typer.Typer(help="Run draft-order lotteries and manage lottery history")


def _store(ctx: typer.Context) -> LotteryStore:
    return ctx.obj["store"]


def _load_config(store: LotteryStore) -> DraftConfig:
    try:
        return store.get_config()
    except StoreError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


def _parse_order(order: str | None) -> List[int] | None:
    if order is None:
        return None
    try:
        return [int(item) for item in order.split(",") if item.strip()]
    except ValueError:
        raise typer.BadParameter(f"Expected comma-separated positions, got {order!r}")


def _rng(seed: int | None) -> random.Random | None:
    if seed is None:
        seed = get_config().random_seed
    return random.Random(seed) if seed is not None else None


def _draw(config: DraftConfig, initial_order: List[int], rng: random.Random | None) -> List[DraftPick]:
    try:
        return run_complete_lottery(config, initial_order, rules=get_config().rules, rng=rng)
    except InitialOrderError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    except LotteryError as e:
        typer.echo(f"Lottery failed: {e}", err=True)
        raise typer.Exit(code=1)


def _movement_label(movement: int) -> str:
    if movement < 0:
        return f"↑{abs(movement)}"
    if movement > 0:
        return f"↓{movement}"
    return "-"


def _echo_picks(config: DraftConfig, picks: List[DraftPick]) -> None:
    names = {team.id: team.name for team in config.teams}
    for round_number in sorted({pick.round for pick in picks}):
        rows = [
            [
                pick.pick_number,
                names.get(pick.team_id, pick.team_id),
                pick.original_position,
                _movement_label(pick.movement),
            ]
            for pick in picks
            if pick.round == round_number
        ]
        typer.echo(f"\nRound {round_number}")
        typer.echo(tabulate(rows, headers=["Pick", "Team", "Orig", "Move"], tablefmt="simple"))


def _echo_movement_stats(picks: List[DraftPick]) -> None:
    summary = summarize_movements(picks)
    typer.echo("  🔄 Movement stats:")
    typer.echo(f"     - Moved up: {summary.up}")
    typer.echo(f"     - Moved down: {summary.down}")
    typer.echo(f"     - Stayed: {summary.stayed}")


@app.callback()
def main(
    ctx: typer.Context,
    db_path: Optional[Path] = typer.Option(
        None, help="Path to database.json (defaults to LOTTERY_DB_PATH)"
    ),
    log_level: Optional[str] = typer.Option(None, help="Logging level (defaults to LOG_LEVEL)"),
) -> None:
    """Draft lottery with a per-team movement cap."""
    setup_logging(log_level or get_config().log_level)
    storage = get_config().storage
    ctx.obj = {"store": LotteryStore(db_path or storage.db_path, indent=storage.indent)}


@app.command()
def run(
    ctx: typer.Context,
    order: Optional[str] = typer.Option(
        None, help="Comma-separated initial order (defaults to the saved order, then 1..N)"
    ),
    seed: Optional[int] = typer.Option(None, help="Seed for a reproducible draw"),
    save: bool = typer.Option(False, help="Store the result in the lottery history"),
    year: Optional[int] = typer.Option(None, help="Season to save under (defaults to currentYear)"),
) -> None:
    """Draw every round and print the resulting pick order."""
    store = _store(ctx)
    config = _load_config(store)
    initial_order = _parse_order(order) or config.default_order()

    picks = _draw(config, initial_order, _rng(seed))
    _echo_picks(config, picks)
    typer.echo("")
    _echo_movement_stats(picks)

    if save:
        season = year if year is not None else config.current_year
        try:
            store.save_lottery(DraftLottery.create(season, picks, config, initial_order))
        except StoreError as e:
            typer.echo(f"Error saving lottery: {e}", err=True)
            raise typer.Exit(code=1)
        typer.echo(f"\n✅ Saved lottery for {season}")


@app.command()
def simulate(
    ctx: typer.Context,
    trials: int = typer.Option(1000, min=1, help="Number of rounds to draw"),
    order: Optional[str] = typer.Option(None, help="Comma-separated initial order"),
    seed: Optional[int] = typer.Option(None, help="Seed for reproducible results"),
) -> None:
    """Estimate how likely each original position is to land on each pick."""
    config = _load_config(_store(ctx))
    initial_order = _parse_order(order) or config.default_order()

    try:
        matrix = simulate_position_odds(
            config,
            initial_order,
            trials,
            rules=get_config().rules,
            seed=seed,
            progress=True,
        )
    except InitialOrderError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    headers = ["Orig"] + [f"#{pick}" for pick in range(1, config.number_of_teams + 1)]
    rows = [
        [position] + [f"{p:.1%}" if p > 0 else "" for p in matrix[position - 1]]
        for position in range(1, config.number_of_teams + 1)
    ]
    typer.echo(f"Final pick odds over {trials} rounds:")
    typer.echo(tabulate(rows, headers=headers, tablefmt="simple"))


@app.command()
def history(ctx: typer.Context) -> None:
    """List stored lotteries, most recent first."""
    try:
        lotteries = _store(ctx).get_all_lotteries()
    except StoreError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if not lotteries:
        typer.echo("No lotteries stored.")
        return

    rows = []
    for lottery in lotteries:
        summary = summarize_movements(lottery.picks)
        rows.append([lottery.year, lottery.date, len(lottery.picks), summary.up, summary.down, summary.stayed])
    typer.echo(tabulate(rows, headers=["Year", "Date", "Picks", "Up", "Down", "Stayed"], tablefmt="simple"))


@app.command("seed-history")
def seed_history(
    ctx: typer.Context,
    years: int = typer.Option(3, min=1, help="Number of past seasons to generate"),
    seed: Optional[int] = typer.Option(None, help="Seed for reproducible history"),
) -> None:
    """Populate the history with sample lotteries for recent seasons.

    The oldest season uses the standard order; later seasons shuffle it to
    simulate different standings.
    """
    store = _store(ctx)
    config = _load_config(store)
    rng = _rng(seed) or random.Random()

    typer.echo("🌱 Seeding lottery history...\n")
    if not config.teams:
        typer.echo("Setting up default teams...")
        config.teams = sample_teams()
        try:
            store.update_config(config)
        except StoreError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(code=1)

    current_year = date.today().year
    seasons = list(range(current_year - years + 1, current_year + 1))

    for season in seasons:
        typer.echo(f"📅 Generating lottery for {season}...")
        initial_order = list(range(1, config.number_of_teams + 1))
        if season != seasons[0]:
            rng.shuffle(initial_order)

        picks = _draw(config, initial_order, rng)
        drawn_at = datetime(season, 6, 15, 19, 0, 0)
        try:
            store.save_lottery(DraftLottery.create(season, picks, config, initial_order, drawn_at))
        except StoreError as e:
            typer.echo(f"Error saving lottery: {e}", err=True)
            raise typer.Exit(code=1)

        typer.echo(f"  ✅ Saved lottery for {season}")
        typer.echo(f"  📊 Total picks: {len(picks)}")
        _echo_movement_stats(picks)
        typer.echo("")

    typer.echo("✨ Seeding complete!")


@app.command("delete-year")
def delete_year(ctx: typer.Context, year: int = typer.Argument(..., help="Season to delete")) -> None:
    """Delete one season from the history. Config and teams are left unchanged."""
    store = _store(ctx)
    typer.echo(f"🔍 Loading database from {store.path}...")
    try:
        lotteries = store.get_all_lotteries()
    except StoreError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    target = next((lottery for lottery in lotteries if lottery.year == year), None)
    if target is None:
        typer.echo(f"❌ Error: No lottery found for year {year}", err=True)
        typer.echo("\nAvailable years:")
        for lottery in lotteries:
            typer.echo(f"   - {lottery.year}")
        raise typer.Exit(code=1)

    try:
        store.delete_lottery(year)
    except StoreError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"🗑️  Removed lottery for year {year}")
    typer.echo(f"   - {len(target.picks)} picks deleted")
    typer.echo(f"📊 Remaining lotteries: {len(lotteries) - 1}")
    for lottery in lotteries:
        if lottery.year != year:
            typer.echo(f"   - Year {lottery.year}")


@app.command("reset-db")
def reset_db(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
) -> None:
    """Recreate the database with the default league and no history."""
    store = _store(ctx)
    if not yes:
        typer.confirm(f"Delete {store.path} and restore the default configuration?", abort=True)

    try:
        store.reset()
        config = store.get_config()
    except StoreError as e:
        typer.echo(f"Error resetting database: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo("✅ Database reset successfully!")
    typer.echo(f"   - {config.number_of_teams} teams")
    typer.echo(f"   - {config.number_of_rounds} rounds")
    typer.echo("   - Weighted odds system")


@app.command()
def export(
    ctx: typer.Context,
    year: int = typer.Option(..., help="Season to export"),
    output: Path = typer.Option(..., help="CSV file to write"),
) -> None:
    """Write one season's picks to CSV."""
    try:
        lottery = _store(ctx).get_lottery_by_year(year)
    except StoreError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    if lottery is None:
        typer.echo(f"❌ Error: No lottery found for year {year}", err=True)
        raise typer.Exit(code=1)

    names = {team.id: team.name for team in lottery.config.teams}
    frame = picks_to_frame(lottery.picks, team_names=names)
    output.parent.mkdir(parents=True, exist_ok=True)
    frame.to_csv(output, index=False)
    typer.echo(f"Wrote {len(frame)} picks to {output}")


if __name__ == "__main__":
    app()
