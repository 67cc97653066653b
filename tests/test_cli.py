import logging
from datetime import date
from pathlib import Path

import pandas as pd
import pytest
from typer.testing import CliRunner

from draft_lottery.cli import app
from draft_lottery.config import Config
from draft_lottery.data.schema import default_config
from draft_lottery.data.store import LotteryStore, StoreError
from draft_lottery.utils.logging_config import ROOT_LOGGER
from draft_lottery.utils.metrics import PICK_COLUMNS

runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_state(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    Config.reset_instance()
    yield
    # The CLI binds a stdout handler to the runner's stream, which closes after each invoke
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    Config.reset_instance()


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "database.json"


def _invoke(db_path: Path, *args: str, **kwargs):
    return runner.invoke(app, ["--db-path", str(db_path), *args], **kwargs)


def test_run_prints_every_round(db_path: Path) -> None:
    result = _invoke(db_path, "run", "--seed", "4")

    assert result.exit_code == 0, result.output
    for round_number in range(1, 6):
        assert f"Round {round_number}" in result.output
    assert "Knockout Kings" in result.output
    assert "Movement stats" in result.output
    # Running without --save leaves the history empty
    assert LotteryStore(db_path).get_all_lotteries() == []


def test_run_with_same_seed_is_reproducible(db_path: Path) -> None:
    first = _invoke(db_path, "run", "--seed", "9")
    second = _invoke(db_path, "run", "--seed", "9")
    assert first.output == second.output


def test_run_save_then_history(db_path: Path) -> None:
    result = _invoke(db_path, "run", "--seed", "1", "--save", "--year", "2024")
    assert result.exit_code == 0, result.output
    assert "Saved lottery for 2024" in result.output

    lottery = LotteryStore(db_path).get_lottery_by_year(2024)
    assert lottery is not None
    assert len(lottery.picks) == 50
    assert lottery.config.initial_order == list(range(1, 11))

    history = _invoke(db_path, "history")
    assert history.exit_code == 0
    assert "2024" in history.output


def test_history_empty(db_path: Path) -> None:
    result = _invoke(db_path, "history")
    assert result.exit_code == 0
    assert "No lotteries stored." in result.output


def test_run_rejects_wrong_length_order(db_path: Path) -> None:
    result = _invoke(db_path, "run", "--order", "1,2,3")
    assert result.exit_code == 1
    assert "Initial order length (3)" in result.output


def test_run_rejects_non_numeric_order(db_path: Path) -> None:
    result = _invoke(db_path, "run", "--order", "a,b")
    assert result.exit_code == 2


def test_run_with_custom_order(db_path: Path) -> None:
    result = _invoke(db_path, "run", "--order", "10,9,8,7,6,5,4,3,2,1", "--seed", "2", "--save")
    assert result.exit_code == 0, result.output

    lottery = LotteryStore(db_path).get_all_lotteries()[0]
    assert lottery.config.initial_order == [10, 9, 8, 7, 6, 5, 4, 3, 2, 1]
    assert all(abs(pick.movement) <= 2 for pick in lottery.picks)


def test_seed_history_creates_recent_seasons(db_path: Path) -> None:
    result = _invoke(db_path, "seed-history", "--years", "2", "--seed", "5")
    assert result.exit_code == 0, result.output
    assert "Seeding complete!" in result.output

    this_year = date.today().year
    lotteries = LotteryStore(db_path).get_all_lotteries()
    assert [lottery.year for lottery in lotteries] == [this_year, this_year - 1]
    oldest = lotteries[-1]
    assert oldest.config.initial_order == list(range(1, 11))
    assert oldest.date == f"{this_year - 1}-06-15T19:00:00"


def test_delete_year_missing(db_path: Path) -> None:
    _invoke(db_path, "run", "--seed", "1", "--save", "--year", "2023")

    result = _invoke(db_path, "delete-year", "2020")
    assert result.exit_code == 1
    assert "No lottery found for year 2020" in result.output
    assert "2023" in result.output


def test_delete_year_existing(db_path: Path) -> None:
    _invoke(db_path, "run", "--seed", "1", "--save", "--year", "2022")
    _invoke(db_path, "run", "--seed", "2", "--save", "--year", "2023")

    result = _invoke(db_path, "delete-year", "2022")
    assert result.exit_code == 0, result.output
    assert "Removed lottery for year 2022" in result.output
    assert "50 picks deleted" in result.output

    store = LotteryStore(db_path)
    assert [lottery.year for lottery in store.get_all_lotteries()] == [2023]
    assert store.get_config().number_of_teams == 10


def test_reset_db_with_yes(db_path: Path) -> None:
    _invoke(db_path, "run", "--seed", "1", "--save", "--year", "2023")

    result = _invoke(db_path, "reset-db", "--yes")
    assert result.exit_code == 0, result.output
    assert "Database reset successfully!" in result.output
    assert LotteryStore(db_path).get_all_lotteries() == []


def test_reset_db_can_be_aborted(db_path: Path) -> None:
    _invoke(db_path, "run", "--seed", "1", "--save", "--year", "2023")

    result = _invoke(db_path, "reset-db", input="n\n")
    assert result.exit_code == 1
    assert [lottery.year for lottery in LotteryStore(db_path).get_all_lotteries()] == [2023]


def test_export_writes_csv(db_path: Path, tmp_path: Path) -> None:
    _invoke(db_path, "run", "--seed", "3", "--save", "--year", "2024")
    output = tmp_path / "exports" / "2024.csv"

    result = _invoke(db_path, "export", "--year", "2024", "--output", str(output))
    assert result.exit_code == 0, result.output
    assert "Wrote 50 picks" in result.output

    frame = pd.read_csv(output)
    assert list(frame.columns) == PICK_COLUMNS + ["team_name"]
    assert len(frame) == 50
    assert frame["movement"].abs().max() <= 2
    assert list(frame.loc[frame["round"] == 1, "pick_number"]) == list(range(1, 11))


def test_export_missing_year(db_path: Path, tmp_path: Path) -> None:
    result = _invoke(db_path, "export", "--year", "1999", "--output", str(tmp_path / "out.csv"))
    assert result.exit_code == 1
    assert not (tmp_path / "out.csv").exists()


def test_simulate_prints_odds_table(db_path: Path) -> None:
    result = _invoke(db_path, "simulate", "--trials", "50", "--seed", "8")
    assert result.exit_code == 0, result.output
    assert "Final pick odds over 50 rounds:" in result.output
    assert "#10" in result.output


def test_simulate_rejects_zero_trials(db_path: Path) -> None:
    result = _invoke(db_path, "simulate", "--trials", "0")
    assert result.exit_code == 2


def test_log_level_defaults_to_environment(db_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    Config.reset_instance()

    result = _invoke(db_path, "history")

    assert result.exit_code == 0, result.output
    assert logging.getLogger(ROOT_LOGGER).level == logging.DEBUG


def test_log_level_option_overrides_environment(db_path: Path) -> None:
    _invoke(db_path, "--log-level", "ERROR", "history")
    assert logging.getLogger(ROOT_LOGGER).level == logging.ERROR


def test_seed_history_fills_in_missing_teams(db_path: Path) -> None:
    store = LotteryStore(db_path)
    config = default_config()
    config.teams = []
    store.update_config(config)

    result = _invoke(db_path, "seed-history", "--years", "1", "--seed", "6")

    assert result.exit_code == 0, result.output
    assert "Setting up default teams..." in result.output
    teams = store.get_config().teams
    assert [team.id for team in teams] == [f"team-{i}" for i in range(1, 11)]
    assert teams[0].name == "Thunderbolts"
    assert teams[0].logo_url.startswith("https://via.placeholder.com/100/FF6B6B/")
    assert len(store.get_all_lotteries()[0].picks) == 50


def _corrupt(db_path: Path) -> None:
    db_path.write_text("{not json")


@pytest.mark.parametrize(
    "args",
    [
        ["run", "--save"],
        ["history"],
        ["seed-history", "--years", "1"],
        ["delete-year", "2023"],
        ["export", "--year", "2023", "--output", "picks.csv"],
    ],
)
def test_commands_report_corrupt_database(db_path: Path, args: list) -> None:
    _corrupt(db_path)

    result = _invoke(db_path, *args)

    assert result.exit_code == 1
    assert "Failed to parse" in result.output
    assert result.exception is None or isinstance(result.exception, SystemExit)


def _failing(*args, **kwargs):
    raise StoreError("database is read-only")


def test_run_save_reports_write_failure(db_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(LotteryStore, "save_lottery", _failing)

    result = _invoke(db_path, "run", "--seed", "1", "--save", "--year", "2024")

    assert result.exit_code == 1
    assert "Error saving lottery: database is read-only" in result.output


def test_seed_history_reports_write_failure(db_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(LotteryStore, "save_lottery", _failing)

    result = _invoke(db_path, "seed-history", "--years", "1")

    assert result.exit_code == 1
    assert "database is read-only" in result.output


def test_delete_year_reports_write_failure(db_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _invoke(db_path, "run", "--seed", "1", "--save", "--year", "2023")
    monkeypatch.setattr(LotteryStore, "delete_lottery", _failing)

    result = _invoke(db_path, "delete-year", "2023")

    assert result.exit_code == 1
    assert "database is read-only" in result.output


def test_reset_db_reports_failure(db_path: Path) -> None:
    # A directory in place of the database file can be neither deleted nor read
    db_path.mkdir()
    (db_path / "keep").write_text("")

    result = _invoke(db_path, "reset-db", "--yes")

    assert result.exit_code == 1
    assert "Error resetting database" in result.output
    assert "Database reset successfully!" not in result.output
