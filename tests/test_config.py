from pathlib import Path

import pytest

from draft_lottery.config import Config, LotteryRules, StorageConfig, get_config
from draft_lottery.utils import get_logger


@pytest.fixture(autouse=True)
def fresh_config():
    Config.reset_instance()
    yield
    Config.reset_instance()


def test_rules_defaults() -> None:
    rules = LotteryRules()
    assert rules.max_movement == 2
    assert rules.max_attempts == 1000
    assert rules.strict is False


def test_rules_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOTTERY_MAX_MOVEMENT", "3")
    monkeypatch.setenv("LOTTERY_MAX_ATTEMPTS", "50")
    monkeypatch.setenv("LOTTERY_STRICT", "TRUE")

    rules = LotteryRules.from_env()

    assert rules == LotteryRules(max_movement=3, max_attempts=50, strict=True)


@pytest.mark.parametrize(
    "kwargs,message",
    [
        ({"max_movement": -1}, "max_movement"),
        ({"max_attempts": 0}, "max_attempts"),
    ],
)
def test_rules_reject_invalid_values(kwargs: dict, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        LotteryRules(**kwargs)


def test_storage_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("LOTTERY_DB_PATH", str(tmp_path / "league.json"))
    monkeypatch.setenv("LOTTERY_DB_INDENT", "4")

    storage = StorageConfig.from_env()

    assert storage.db_path == tmp_path / "league.json"
    assert storage.indent == 4


def test_get_config_is_cached_until_reset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("RANDOM_SEED", raising=False)
    first = get_config()
    assert get_config() is first
    assert first.random_seed is None

    monkeypatch.setenv("RANDOM_SEED", "17")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert get_config().random_seed is None

    Config.reset_instance()
    reloaded = get_config()
    assert reloaded is not first
    assert reloaded.random_seed == 17
    assert reloaded.log_level == "DEBUG"


def test_get_logger_uses_package_namespace() -> None:
    assert get_logger("draft_lottery.engine.lottery").name == "draft_lottery.engine.lottery"
    assert get_logger("draft_lottery").name == "draft_lottery"
    assert get_logger("scripts.serve").name == "draft_lottery.scripts.serve"
