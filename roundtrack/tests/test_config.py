import pytest

from roundtrack.config import EngineSettings, env_bool, get_settings, reset_settings_cache


def test_defaults_match_documented_thresholds() -> None:
    settings = EngineSettings()

    assert settings.fix_window_s == 10.0
    assert settings.min_shot_distance_m == 30.0
    assert settings.accuracy_distance_multiplier == 3.0
    assert settings.min_shot_speed_mps == 8.0
    assert settings.hole_change_debounce_fixes == 3
    assert settings.completion_radius_m == 5.0
    assert settings.completion_dwell_s == 10.0
    assert settings.score_confidence_floor == 0.6
    assert settings.max_plausible_shots == 12


def test_environment_overrides_are_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ROUNDTRACK_MIN_SHOT_SPEED_MPS", "12.5")
    monkeypatch.setenv("ROUNDTRACK_AUTO_ADVANCE_HOLES", "false")

    settings = get_settings()
    monkeypatch.setenv("ROUNDTRACK_MIN_SHOT_SPEED_MPS", "20")

    assert settings.min_shot_speed_mps == 12.5
    assert settings.auto_advance_holes is False
    assert get_settings() is settings

    reset_settings_cache()
    assert get_settings().min_shot_speed_mps == 20.0


@pytest.mark.parametrize(
    "raw,expected", [("1", True), ("true", True), (" YES ", True), ("0", False), ("off", False)]
)
def test_env_bool(monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:
    monkeypatch.setenv("ROUNDTRACK_FLAG", raw)

    assert env_bool("ROUNDTRACK_FLAG") is expected


def test_env_bool_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ROUNDTRACK_FLAG", raising=False)

    assert env_bool("ROUNDTRACK_FLAG", default=True) is True
