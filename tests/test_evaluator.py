from __future__ import annotations

import logging

import pytest

from wellcrafted.mapping import MappingEntry, MappingIndex, builtin_entries
from wellcrafted.mapping.builtin import HIDDEN_ITEM_RARITY, HIDDEN_PACK_SIZE
from wellcrafted.overlay import LaneSnapshot, OverlayEvaluator, OverlaySettings, PanelSnapshot
from wellcrafted.profiles import DEFAULT_PROFILE_NAME, ProfileSet, WeightProfile, default_profile_set
from wellcrafted.scoring import BANNED_SCORE, ScoreBand
from wellcrafted.tracking import Rect

from tests.helpers import lane_rects


MARKED_FOR_DEATH = "Players are Marked for Death for 10 seconds after killing a Rare or Unique monster"
PITS = "Abysses have 3 additional Pits"
UNMAPPED = "Monsters deal 30% extra Damage as Chaos"


def _index() -> MappingIndex:
    return MappingIndex.from_sources(
        builtin_entries(), [MappingEntry.create("Abysses have # additional Pits", [HIDDEN_ITEM_RARITY])]
    )


def _snapshot(texts: list[str], *, ready: bool = True, visible: bool = True, offset: float = 0.0) -> PanelSnapshot:
    return PanelSnapshot.from_lanes(
        [
            LaneSnapshot(rect=rect, visible=visible, text=text, text_ready=ready)
            for rect, text in zip(lane_rects(offset), texts)
        ]
    )


def _unknown_records(caplog: pytest.LogCaptureFixture) -> list[logging.LogRecord]:
    return [record for record in caplog.records if getattr(record, "event", None) == "overlay.unknown_hidden"]


def test_banned_hidden_weight_bans_the_choice() -> None:
    profile = WeightProfile(name=DEFAULT_PROFILE_NAME)
    profile.set_weight("hidden", "# increased item rarity", 5)
    profile.set_weight("hidden", "# increased pack size", -11)
    profile.set_weight(
        "default", "players are marked for death for # seconds after killing a rare or unique monster", 2
    )
    evaluator = OverlayEvaluator(_index(), ProfileSet({DEFAULT_PROFILE_NAME: profile}))

    evaluation = evaluator.evaluate(_snapshot([MARKED_FOR_DEATH, PITS, ""]), now_ms=1000)
    lane = evaluation.lanes[0]

    assert evaluator.lookup_hidden_attributes(MARKED_FOR_DEATH) == [HIDDEN_ITEM_RARITY, HIDDEN_PACK_SIZE]
    assert [(line.text, line.weight) for line in lane.hidden] == [
        (HIDDEN_ITEM_RARITY, 5.0),
        (HIDDEN_PACK_SIZE, -11.0),
    ]
    assert [line.band for line in lane.hidden] == [ScoreBand.HIGH, ScoreBand.BANNED]
    assert lane.visible_default == 2.0
    assert lane.score == BANNED_SCORE
    assert lane.label == "BANNED"
    assert lane.band is ScoreBand.BANNED
    assert lane.color == evaluator.settings.palette.low


def test_mapped_lane_scores_with_hidden_average() -> None:
    profiles = default_profile_set()
    profiles.update_weight("hidden", HIDDEN_ITEM_RARITY, 6)
    evaluator = OverlayEvaluator(_index(), profiles)

    lane = evaluator.evaluate(_snapshot([PITS, "", ""]), now_ms=0).lanes[0]

    assert lane.mapped
    assert lane.score == 6.0
    assert lane.label == "6.0"
    assert lane.band is ScoreBand.HIGH


def test_hidden_panel_produces_nothing() -> None:
    evaluator = OverlayEvaluator(_index(), default_profile_set())

    evaluation = evaluator.evaluate(_snapshot([PITS, PITS, PITS], visible=False), now_ms=0)

    assert not evaluation.visible
    assert evaluation.lanes == ()


def test_text_gating_applies_only_outside_grace() -> None:
    evaluator = OverlayEvaluator(_index(), default_profile_set(), settings=OverlaySettings(grace_ms=3000))

    during = evaluator.evaluate(_snapshot([PITS, UNMAPPED, ""], ready=False), now_ms=0)
    after = evaluator.evaluate(_snapshot([PITS, UNMAPPED, ""], ready=False), now_ms=3000)
    ready = evaluator.evaluate(_snapshot([PITS, UNMAPPED, ""], ready=True), now_ms=3000)

    assert during.in_grace and not during.gated
    assert len(during.lanes) == 3
    assert after.visible and after.gated
    assert after.lanes == ()
    assert not ready.gated
    assert len(ready.lanes) == 3


def test_placeholder_only_outside_grace_for_non_empty_text() -> None:
    evaluator = OverlayEvaluator(_index(), default_profile_set(), settings=OverlaySettings(grace_ms=1000))

    in_grace = evaluator.evaluate(_snapshot([UNMAPPED, "", PITS]), now_ms=0)
    settled = evaluator.evaluate(_snapshot([UNMAPPED, "", PITS]), now_ms=1500)

    assert in_grace.lanes[0].hidden == ()
    placeholder = settled.lanes[0].hidden
    assert [line.text for line in placeholder] == ["No mod  (0.0)"]
    assert placeholder[0].weight == 0.0
    assert not settled.lanes[0].mapped
    assert settled.lanes[1].hidden == ()
    assert settled.lanes[2].hidden[0].text == HIDDEN_ITEM_RARITY


def test_lanes_with_invalid_geometry_are_skipped() -> None:
    evaluator = OverlayEvaluator(_index(), default_profile_set())
    rects = lane_rects()
    snapshot = PanelSnapshot.from_lanes(
        [
            LaneSnapshot(rect=rects[0], visible=True, text=PITS, text_ready=True),
            LaneSnapshot(rect=Rect(0, 0, 3, 3), visible=True, text=PITS, text_ready=True),
            LaneSnapshot(rect=rects[2], visible=True, text=PITS, text_ready=True),
        ]
    )

    evaluation = evaluator.evaluate(snapshot, now_ms=0)

    assert [lane.index for lane in evaluation.lanes] == [0, 2]


def test_unknown_text_logged_once_per_key_per_generation(caplog: pytest.LogCaptureFixture) -> None:
    evaluator = OverlayEvaluator(_index(), default_profile_set())

    with caplog.at_level(logging.DEBUG, logger="wellcrafted"):
        evaluator.evaluate(_snapshot([UNMAPPED, "Monsters deal 45% extra Damage as Chaos", ""]), now_ms=0)
        evaluator.evaluate(_snapshot([UNMAPPED, UNMAPPED, ""]), now_ms=16)
        assert len(_unknown_records(caplog)) == 1

        evaluator.evaluate(_snapshot([UNMAPPED, "", ""], offset=40.0), now_ms=32)

    records = _unknown_records(caplog)
    assert len(records) == 2
    assert all(record.levelno == logging.DEBUG for record in records)
    assert records[0].key == "monsters deal # extra damage as chaos"


def test_unknown_logging_can_be_disabled(caplog: pytest.LogCaptureFixture) -> None:
    settings = OverlaySettings(log_unknown_hidden=False)
    evaluator = OverlayEvaluator(_index(), default_profile_set(), settings=settings)

    with caplog.at_level(logging.DEBUG, logger="wellcrafted"):
        evaluator.evaluate(_snapshot([UNMAPPED, "", ""]), now_ms=0)

    assert _unknown_records(caplog) == []


def test_tracker_update_reports_generation() -> None:
    evaluator = OverlayEvaluator(_index(), default_profile_set(), settings=OverlaySettings(grace_ms=500))
    observations = [lane.to_observation() for lane in _snapshot([PITS, PITS, PITS]).lanes]

    first = evaluator.tracker_update(observations, now_ms=0)
    second = evaluator.tracker_update(observations, now_ms=600)

    assert first.generation == second.generation == 1
    assert first.in_grace
    assert not second.in_grace
    assert evaluator.tracker.grace_window_ms == 500


def test_active_profile_switch_changes_scores() -> None:
    profiles = default_profile_set()
    profiles.create("Rarity")
    profiles.update_weight("hidden", HIDDEN_ITEM_RARITY, 11, profile="Rarity")
    evaluator = OverlayEvaluator(_index(), profiles)

    before = evaluator.evaluate(_snapshot([PITS, "", ""]), now_ms=0).lanes[0]
    profiles.set_active("Rarity")
    after = evaluator.evaluate(_snapshot([PITS, "", ""]), now_ms=16).lanes[0]

    assert before.label == "0.0"
    assert after.label == "FAVORITE"
    assert after.band is ScoreBand.FAVORITE
