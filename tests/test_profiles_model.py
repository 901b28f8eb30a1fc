from __future__ import annotations

import pytest

from wellcrafted.profiles import (
    DEFAULT_PROFILE_NAME,
    ProfileSet,
    WeightCategory,
    WeightProfile,
    canonical_weights,
    default_profile_set,
)


def test_default_profile_set_seeds_weights() -> None:
    profiles = default_profile_set()
    profile = profiles.active_profile

    assert profiles.active_name == DEFAULT_PROFILE_NAME
    assert profile.hidden == {"map item drop chance": 3.0}
    assert profile.visible_default == {"pack size": 2.0, "quantity": 2.0, "rarity": 0.0}
    assert profile.visible_desecrated == {}


def test_default_profile_is_always_present() -> None:
    profiles = ProfileSet({"Mine": WeightProfile(name="Mine")}, active="missing")

    assert DEFAULT_PROFILE_NAME in profiles
    assert profiles.active_name == DEFAULT_PROFILE_NAME
    assert profiles.names() == [DEFAULT_PROFILE_NAME, "Mine"]


def test_canonical_weights_drops_unusable_entries() -> None:
    weights = canonical_weights({"Pack Size 5": 2, "": 1, "bool": True, "text": "x", "Rarity": 1.5})

    assert weights == {"pack size #": 2.0, "rarity": 1.5}


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("HIDDEN", WeightCategory.HIDDEN),
        (" default ", WeightCategory.DEFAULT),
        (WeightCategory.DESECRATED, WeightCategory.DESECRATED),
        ("visible", None),
        (3, None),
    ],
)
def test_weight_category_parse(value: object, expected: WeightCategory | None) -> None:
    assert WeightCategory.parse(value) is expected


def test_create_rejects_duplicates_and_blank_names() -> None:
    profiles = default_profile_set()

    assert profiles.create("Farming")
    assert not profiles.create("farming")
    assert not profiles.create("   ")
    assert not profiles.create(None)
    assert profiles.names() == [DEFAULT_PROFILE_NAME, "Farming"]


def test_delete_rules() -> None:
    profiles = default_profile_set()
    profiles.create("Farming")
    profiles.set_active("Farming")

    assert not profiles.delete(DEFAULT_PROFILE_NAME)
    assert not profiles.delete("default")
    assert not profiles.delete("missing")
    assert profiles.delete("FARMING")
    assert profiles.active_name == DEFAULT_PROFILE_NAME


def test_rename_rules() -> None:
    profiles = default_profile_set()
    profiles.create("Farming")
    profiles.create("Bossing")
    profiles.set_active("Farming")

    assert not profiles.rename(DEFAULT_PROFILE_NAME, "Other")
    assert not profiles.rename("Farming", "bossing")
    assert not profiles.rename("Farming", "FARMING")
    assert not profiles.rename("missing", "Other")
    assert not profiles.rename("Farming", "  ")
    assert profiles.rename("Farming", "Mapping")
    assert profiles.active_name == "Mapping"
    assert profiles.get("Mapping").name == "Mapping"
    assert "Farming" not in profiles


def test_set_active_unknown_profile_fails() -> None:
    profiles = default_profile_set()

    assert not profiles.set_active("missing")
    assert profiles.set_active("default")
    assert profiles.active_name == DEFAULT_PROFILE_NAME


def test_version_bumps_only_on_successful_mutations() -> None:
    profiles = default_profile_set()
    start = profiles.version

    profiles.create("Farming")
    profiles.create("Farming")
    profiles.delete(DEFAULT_PROFILE_NAME)
    profiles.update_weight("hidden", "Pack", 1)

    assert profiles.version == start + 2


def test_update_weight_writes_canonical_keys() -> None:
    profiles = default_profile_set()
    profiles.create("Farming")

    assert profiles.update_weight(WeightCategory.DEFAULT, "Monster Packs 5", 3)
    assert profiles.update_weight("desecrated", "Abysses have 2 additional Pits", -2, profile="farming")
    assert not profiles.update_weight("unknown", "Pack", 1)
    assert not profiles.update_weight("hidden", "!!!", 1)
    assert not profiles.update_weight("hidden", "Pack", 1, profile="missing")

    assert profiles.active_profile.visible_default["monster pack #"] == 3.0
    assert profiles.get("Farming").visible_desecrated == {"abysses have # additional pits": -2.0}


def test_profile_accessors_by_category() -> None:
    profile = WeightProfile(name="P", bias_default=0.5, bias_hidden=-0.25)
    key = profile.set_weight("hidden", "# increased Pack Size", 4)

    assert key == "# increased pack size"
    assert profile.weights("hidden") is profile.hidden
    assert profile.weights("bogus") is None
    assert profile.bias("default") == 0.5
    assert profile.bias(WeightCategory.HIDDEN) == -0.25
    assert profile.bias("bogus") == 0.0


def test_copy_is_independent() -> None:
    profile = default_profile_set().active_profile
    clone = profile.copy(name="Clone")
    clone.set_weight("default", "quantity", 9)

    assert clone.name == "Clone"
    assert profile.visible_default["quantity"] == 2.0


def test_normalise_keys_recanonicalises_manual_edits() -> None:
    profiles = default_profile_set()
    profiles.active_profile.hidden["Raw Key 10%"] = 1.0

    profiles.normalise_keys()

    assert "raw key #" in profiles.active_profile.hidden
    assert "Raw Key 10%" not in profiles.active_profile.hidden
