from __future__ import annotations

import logging
from pathlib import Path

import pytest

from wellcrafted.configuration import config_section, deep_merge, load_project_config
from wellcrafted.overlay import OverlaySettings, load_overlay_defaults, load_overlay_settings
from wellcrafted.scoring import Palette, Thresholds

from tests.conftest import write_pyproject


def test_load_project_config_reads_tool_section(tmp_path: Path) -> None:
    pyproject = write_pyproject(
        tmp_path,
        """
        [tool.wellcrafted]
        data_dir = "store"

        [tool.wellcrafted.overlay]
        grace_ms = 1500
        """,
    )

    loaded = load_project_config(tmp_path)

    assert loaded is not None
    payload, resolved = loaded
    assert resolved == pyproject.resolve()
    assert payload == {"data_dir": "store", "overlay": {"grace_ms": 1500}}


@pytest.mark.parametrize(
    "contents",
    [
        pytest.param("[tool.other]\nvalue = 1\n", id="other-tool"),
        pytest.param("[project]\nname = 'x'\n", id="no-tool-table"),
        pytest.param("[tool]\nwellcrafted = 3\n", id="not-a-table"),
    ],
)
def test_load_project_config_without_section(tmp_path: Path, contents: str) -> None:
    write_pyproject(tmp_path, contents)

    assert load_project_config(tmp_path / "pyproject.toml") is None


def test_load_project_config_rejects_other_files(tmp_path: Path) -> None:
    assert load_project_config(tmp_path / "settings.ini") is None
    assert load_project_config(tmp_path / "missing") is None


def test_deep_merge_keeps_untouched_keys() -> None:
    base = {"thresholds": {"low": -4.0, "high": 4.0}, "grace_ms": 3000}

    merged = deep_merge(base, {"thresholds": {"low": -2.0}, "palette": {"low": [1, 2, 3]}})

    assert merged is base
    assert merged == {
        "thresholds": {"low": -2.0, "high": 4.0},
        "grace_ms": 3000,
        "palette": {"low": [1, 2, 3]},
    }


def test_packaged_overlay_defaults() -> None:
    defaults = load_overlay_defaults()
    settings = load_overlay_settings()

    assert defaults["grace_ms"] == 3000
    assert settings == OverlaySettings()
    assert settings.placeholder == "No mod  (0.0)"
    assert settings.thresholds == Thresholds(low=-4.0, high=4.0)
    assert settings.palette == Palette()


def test_overrides_are_merged_over_defaults() -> None:
    settings = load_overlay_settings(
        {"overlay": {"grace_ms": 500, "log_unknown_hidden": False, "thresholds": {"low": -2}}}
    )

    assert settings.grace_ms == 500
    assert not settings.log_unknown_hidden
    assert settings.thresholds == Thresholds(low=-2.0, high=4.0)


@pytest.mark.parametrize(("raw", "expected"), [(50_000, 10_000), (-5, 0), ("abc", 3000), (None, 3000)])
def test_grace_window_is_clamped(raw: object, expected: int) -> None:
    assert load_overlay_settings({"overlay": {"grace_ms": raw}}).grace_ms == expected


def test_custom_defaults_file(tmp_path: Path) -> None:
    path = tmp_path / "overlay.yaml"
    path.write_text("grace_ms: 250\nplaceholder: '-'\n", encoding="utf8")

    settings = load_overlay_settings(defaults_path=path)

    assert settings.grace_ms == 250
    assert settings.placeholder == "-"


def test_missing_or_invalid_defaults_file(tmp_path: Path) -> None:
    broken = tmp_path / "broken.yaml"
    broken.write_text("grace_ms: [unclosed\n", encoding="utf8")

    assert load_overlay_defaults(tmp_path / "absent.yaml") == {}
    assert load_overlay_defaults(broken) == {}
    assert load_overlay_settings(defaults_path=broken) == OverlaySettings()


def test_unknown_keys_are_kept_and_logged(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    write_pyproject(tmp_path, '[tool.wellcrafted]\ndata_dir = "d"\ngrace = 1\n')

    with caplog.at_level(logging.WARNING, logger="wellcrafted"):
        payload, _ = load_project_config(tmp_path)

    assert payload == {"data_dir": "d", "grace": 1}
    assert any("grace" in record.getMessage() for record in caplog.records)


def test_config_section_copies_tables() -> None:
    config = {"overlay": {"thresholds": {"low": -1}}, "data_dir": "x"}

    section = config_section(config, "overlay")
    section["thresholds"]["low"] = 5

    assert config["overlay"]["thresholds"]["low"] == -1
    assert config_section(config, "data_dir") == {}
    assert config_section(None, "overlay") == {}


@pytest.mark.parametrize(("raw", "expected"), [(False, False), (True, True), ("false", True), (0, True), (None, True)])
def test_log_unknown_hidden_accepts_only_booleans(raw: object, expected: bool) -> None:
    assert OverlaySettings.from_mapping({"log_unknown_hidden": raw}).log_unknown_hidden is expected
