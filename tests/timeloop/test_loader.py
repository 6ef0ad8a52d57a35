"""Tests for the timeline content loader.

Critical Invariants:
- Content errors name the file, the moment and (for actions) the tag
- Duplicate moment keys are warnings, the later definition wins
- dump -> load reproduces content, runtime disabled flags included
"""

import json
import logging

import pytest
from conftest import Record, t

from timegraph.core.time import TimePoint
from timegraph.errors import ContentError, UnknownActionError
from timegraph.timeloop import At, Labelled, TimelineLoader

SAMPLE = {
    "branch_from": ["tl/a.tl.json", "5s"],
    "moments": {
        "0s": {
            "label": "wake",
            "desc": "start",
            "happenings": [
                {"LABEL": "first", "Record": {"tag": "one"}, "DISABLED": False},
                {"Record": {"tag": "two"}},
            ],
        },
        "1m 30s": {"disabled": True, "happenings": []},
    },
    "merge_into": None,
}


@pytest.fixture
def loader(registry, tmp_path):
    return TimelineLoader(registry, root=tmp_path)


def test_loads_structure(loader):
    tl = loader.loads(json.dumps(SAMPLE), "tl/b.tl.json")

    assert tl.branch_from == TimePoint("tl/a.tl.json", t("5s"))
    assert tl.merge_into is None
    wake = tl.get_moment(Labelled("wake"))
    assert wake.desc == "start"
    assert [h.label for h in wake.happenings] == ["first", None]
    assert wake.happenings[0].actions == [Record(tag="one")]
    assert tl.get_moment(At(t("90s"))).disabled


def test_repeated_tags_in_group_keep_order(loader):
    text = '{"moments": {"0s": {"happenings": [{"Record": {"tag": "a"}, "Record": {"tag": "b"}}]}}}'
    tl = loader.loads(text)
    assert tl.get_moment(At(t("0s"))).happenings[0].actions == [Record(tag="a"), Record(tag="b")]


def test_unknown_tag_names_tag_moment_and_file(loader):
    """CRITICAL: Unknown action tags fail the load, naming where they were found."""
    text = json.dumps({"moments": {"5s": {"label": "intro", "happenings": [{"Explode": {}}]}}})
    with pytest.raises(ContentError) as exc:
        loader.loads(text, "tl/x.tl.json")
    message = str(exc.value)
    assert "Explode" in message
    assert "moment 5s (intro)" in message
    assert "tl/x.tl.json" in message
    assert isinstance(exc.value.__cause__, UnknownActionError)


def test_decode_failure_names_tag(loader):
    text = json.dumps({"moments": {"5s": {"happenings": [{"Record": {"tag": 3}}]}}})
    with pytest.raises(ContentError, match="Record"):
        loader.loads(text, "tl/x.tl.json")


@pytest.mark.parametrize(
    "text",
    [
        "{not json",
        "[]",
        '{"moments": {"soon": {}}}',
        '{"moments": []}',
        '{"moments": {"1s": {"happenings": {}}}}',
        '{"moments": {"1s": {"happenings": [[]]}}}',
        '{"moments": {"1s": {"colour": "red"}}}',
        '{"moments": {"1s": {"disabled": "yes"}}}',
        '{"branch_from": "tl/a.tl.json"}',
        '{"branch_form": null}',
    ],
)
def test_malformed_content_is_content_error(loader, text):
    with pytest.raises(ContentError):
        loader.loads(text, "tl/bad.tl.json")


def test_duplicate_keys_warn_and_later_wins(loader, caplog):
    text = (
        '{"moments": {'
        '"1s": {"label": "first"}, '
        '"1000ms": {"label": "second"}, '
        '"2s": {"label": "x"}, "2s": {"label": "y"}}}'
    )
    with caplog.at_level(logging.WARNING):
        tl = loader.loads(text, "tl/dup.tl.json")
    assert tl.get_moment(At(t("1s"))).label == "second"
    assert tl.get_moment(At(t("2s"))).label == "y"
    assert len(tl) == 2
    assert "duplicate moment key" in caplog.text


def test_round_trip_keeps_runtime_toggles(loader):
    tl = loader.loads(json.dumps(SAMPLE), "tl/b.tl.json")
    tl.get_moment(Labelled("wake")).happenings[1].disabled = True
    tl.get_moment(At(t("90s"))).disabled = False

    reloaded = loader.loads(loader.dumps(tl), "tl/b.tl.json")

    assert loader.dump(reloaded) == loader.dump(tl)
    assert reloaded.get_moment(Labelled("wake")).happenings[1].disabled
    assert not reloaded.get_moment(At(t("90s"))).disabled


def test_save_and_load_file(loader, tmp_path):
    tl = loader.loads(json.dumps(SAMPLE), "tl/b.tl.json")
    loader.save(tl, "tl/b.tl.json")

    assert (tmp_path / "tl" / "b.tl.json").exists()
    loaded = loader.load("tl/b.tl.json")
    assert loader.dump(loaded) == loader.dump(tl)


def test_missing_file_is_content_error(loader):
    with pytest.raises(ContentError, match="tl/none.tl.json"):
        loader.load("tl/none.tl.json")
