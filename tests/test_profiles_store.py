from __future__ import annotations

import json
import logging
import os
from pathlib import Path

import pytest

from wellcrafted.profiles import DEFAULT_PROFILE_NAME, PROFILES_FILENAME, ProfileStore, default_profile_set
from wellcrafted.profiles.store import BACKUP_RETENTION, profile_set_from_payload

from tests.helpers import write_json


def test_missing_file_yields_default_profiles(data_dir: Path) -> None:
    result = ProfileStore(data_dir).load()

    assert result.ok
    assert not result.existed
    assert result.value.active_profile.visible_default["pack size"] == 2.0


def test_save_then_load_round_trip(data_dir: Path) -> None:
    store = ProfileStore(data_dir)
    profiles = default_profile_set()
    profiles.create("Farming")
    profiles.set_active("Farming")
    profiles.update_weight("hidden", "# increased Item Rarity", 5)
    profiles.get("Farming").bias_hidden = 0.5

    saved = store.save(profiles)
    document = json.loads(store.path.read_text(encoding="utf8"))
    loaded = store.load().value

    assert saved.ok
    assert saved.backup is None
    assert document["schema"] == 2
    assert document["active"] == "Farming"
    assert document["profiles"]["Farming"] == {
        "visibleDefault": {},
        "visibleDesecrated": {},
        "hidden": {"# increased item rarity": 5.0},
        "multDefault": 0.0,
        "multDesecrated": 0.0,
        "multHidden": 0.5,
    }
    assert loaded.active_name == "Farming"
    assert loaded.active_profile.bias_hidden == 0.5
    assert loaded.names() == [DEFAULT_PROFILE_NAME, "Farming"]


def test_schema_one_documents_are_migrated() -> None:
    payload = {
        "schema": 1,
        "active": "Mine",
        "profiles": {
            "Mine": {
                "Visible": {"Pack Size 5": 2, "Quantity": 1},
                "Hidden": {"# increased Item Rarity": 4},
                "multDefault": 5,
            }
        },
    }

    profiles = profile_set_from_payload(payload)
    mine = profiles.get("Mine")

    assert profiles.active_name == "Mine"
    assert mine.visible_default == {"pack size #": 2.0, "quantity": 1.0}
    assert mine.visible_desecrated == {}
    assert mine.hidden == {"# increased item rarity": 4.0}
    assert (mine.bias_default, mine.bias_desecrated, mine.bias_hidden) == (0.0, 0.0, 0.0)


def test_missing_schema_is_read_as_current() -> None:
    profiles = profile_set_from_payload(
        {"profiles": {"X": {"visibleDefault": {"Quantity": 1}, "multDesecrated": 0.25}}}
    )

    assert profiles.get("X").visible_default == {"quantity": 1.0}
    assert profiles.get("X").bias_desecrated == 0.25


def test_property_names_are_case_insensitive() -> None:
    profiles = profile_set_from_payload(
        {
            "SCHEMA": 2,
            "Active": "x",
            "PROFILES": {"x": {"VisibleDefault": {"Rarity": 3}, "MULTHIDDEN": 0.5}},
        }
    )

    assert profiles.active_name == "x"
    assert profiles.active_profile.visible_default == {"rarity": 3.0}
    assert profiles.active_profile.bias_hidden == 0.5


@pytest.mark.parametrize(
    "contents",
    [
        pytest.param("{ broken", id="invalid-json"),
        pytest.param("[1, 2]", id="not-an-object"),
    ],
)
def test_malformed_file_falls_back_to_defaults(
    data_dir: Path, caplog: pytest.LogCaptureFixture, contents: str
) -> None:
    (data_dir / PROFILES_FILENAME).write_text(contents, encoding="utf8")

    with caplog.at_level(logging.WARNING, logger="wellcrafted"):
        result = ProfileStore(data_dir).load()

    assert not result.ok
    assert result.reason
    assert result.value.names() == [DEFAULT_PROFILE_NAME]
    assert any(record.levelno == logging.WARNING for record in caplog.records)


def test_malformed_profile_entries_are_skipped() -> None:
    profiles = profile_set_from_payload({"schema": 2, "profiles": {"ok": {}, "bad": 3, "": {}}})

    assert profiles.names() == [DEFAULT_PROFILE_NAME, "ok"]


def test_backups_keep_the_three_most_recent(data_dir: Path) -> None:
    store = ProfileStore(data_dir)
    profiles = default_profile_set()

    backups: list[Path | None] = []
    for value in range(1, 6):
        profiles.update_weight("default", "quantity", value)
        backups.append(store.save(profiles).backup)
        if backups[-1] is not None:
            # Spread modification times so ordering never depends on clock resolution.
            stamp = 1_700_000_000 + value
            os.utime(backups[-1], (stamp, stamp))

    retained = store.backups()

    assert backups[0] is None
    assert len(retained) == BACKUP_RETENTION
    assert all(path.name.startswith("WellCraftedProfiles_") for path in retained)
    newest = json.loads(retained[0].read_text(encoding="utf8"))
    oldest = json.loads(retained[-1].read_text(encoding="utf8"))
    assert newest["profiles"][DEFAULT_PROFILE_NAME]["visibleDefault"]["quantity"] == 4.0
    assert oldest["profiles"][DEFAULT_PROFILE_NAME]["visibleDefault"]["quantity"] == 2.0
