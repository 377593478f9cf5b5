"""Tests for the canonical JSON normalization layer."""

import datetime
import json
from pathlib import Path

from changelog_lint.model import Item, Offset, SectionName
from changelog_lint.utils.json_norm import stable_json_dump, stable_json_dumps


def test_stable_json_dumps_sorts_keys_and_adds_newline():
    s = stable_json_dumps({"b": 1, "a": 2})
    assert s.endswith("\n")
    # Keys should be sorted in the serialized output
    assert s.index('"a"') < s.index('"b"')


def test_stable_json_dumps_normalizes_paths():
    s = stable_json_dumps({"p": Path("docs") / "CHANGELOG.md"})
    obj = json.loads(s)
    assert obj["p"] == "docs/CHANGELOG.md"


def test_stable_json_dumps_uses_model_to_dict():
    obj = json.loads(stable_json_dumps([Offset(0, 4), Item(5, 9, jira="TINY-1"), Item(10, 12)]))
    assert obj == [
        {"start": 0, "end": 4},
        {"start": 5, "end": 9, "jira": "TINY-1"},
        {"start": 10, "end": 12},
    ]


def test_stable_json_dumps_enums_and_dates():
    obj = json.loads(stable_json_dumps({SectionName.FIXED: datetime.date(2020, 12, 8)}))
    assert obj == {"Fixed": "2020-12-08"}


def test_stable_json_dump_writes_to_file_like(tmp_path):
    out = tmp_path / "x.json"
    with out.open("w", encoding="utf-8") as f:
        stable_json_dump({"b": 1, "a": 2}, f)
    txt = out.read_text(encoding="utf-8")
    assert txt.endswith("\n")
    assert '"a"' in txt and '"b"' in txt
