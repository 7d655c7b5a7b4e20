import json

import pytest

from insight_sync.combine import combine_files, infer_type
from insight_sync.loader import LoadError


def _read(path):
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture
def dirs(tmp_path):
    in_dir = tmp_path / "in"
    in_dir.mkdir()
    return in_dir, tmp_path / "out"


def _put(in_dir, name, payload):
    (in_dir / name).write_text(json.dumps(payload) if not isinstance(payload, str) else payload)


def test_infer_type():
    assert infer_type("section_12.json") == "section"
    assert infer_type("students-all.json") == "student"
    assert infer_type("school.json") is None


def test_groups_adjacent_files(dirs):
    in_dir, out_dir = dirs
    _put(in_dir, "section_b.json", [{"id": "s2"}])
    _put(in_dir, "section_a.json", [{"id": "s1"}])
    _put(in_dir, "student_a.json", [{"id": "p1"}, {"id": "p2"}])
    _put(in_dir, "notes.txt", "ignore me")
    written = combine_files(in_dir, out_dir)
    assert sorted(p.name for p in written) == ["sections.json", "students.json"]
    assert _read(out_dir / "sections.json") == [{"id": "s1"}, {"id": "s2"}]
    assert _read(out_dir / "students.json") == [{"id": "p1"}, {"id": "p2"}]
    assert not (out_dir / "notess.json").exists()


def test_empty_directory_writes_nothing(dirs):
    in_dir, out_dir = dirs
    assert combine_files(in_dir, out_dir) == []
    assert not out_dir.exists()


def test_output_is_indented(dirs):
    in_dir, out_dir = dirs
    _put(in_dir, "teacher_1.json", [{"id": "t1"}])
    combine_files(in_dir, out_dir)
    assert (out_dir / "teachers.json").read_text() == json.dumps([{"id": "t1"}], indent=2)


def test_unknown_prefix_files_are_skipped(dirs):
    in_dir, out_dir = dirs
    _put(in_dir, "a_section.json", [{"id": "x"}])
    _put(in_dir, "section_1.json", [{"id": "s1"}])
    _put(in_dir, "sectionz.json", [{"id": "s2"}])
    _put(in_dir, "student_1.json", [{"id": "p1"}])
    _put(in_dir, "students_x_section.json", [{"id": "p2"}])
    _put(in_dir, "teacher_1.json", [{"id": "t1"}])
    _put(in_dir, "zz_section.json", [{"id": "lost"}])
    written = combine_files(in_dir, out_dir)
    assert [p.name for p in written] == ["sections.json", "students.json", "teachers.json"]
    assert _read(out_dir / "sections.json") == [{"id": "s1"}, {"id": "s2"}]
    assert _read(out_dir / "students.json") == [{"id": "p1"}, {"id": "p2"}]


def test_extension_match_is_case_insensitive(dirs):
    in_dir, out_dir = dirs
    _put(in_dir, "section_1.json", [{"id": "s1"}])
    _put(in_dir, "section_9.JSON", [{"id": "s9"}])
    _put(in_dir, "section_x.json.bak", [{"id": "bak"}])
    combine_files(in_dir, out_dir)
    assert _read(out_dir / "sections.json") == [{"id": "s1"}, {"id": "s9"}]


def test_fragment_must_be_array(dirs):
    in_dir, out_dir = dirs
    _put(in_dir, "section_1.json", {"id": "s1"})
    with pytest.raises(LoadError, match="JSON array"):
        combine_files(in_dir, out_dir)


def test_missing_input_directory(tmp_path):
    with pytest.raises(LoadError, match="not found"):
        combine_files(tmp_path / "nope", tmp_path / "out")
