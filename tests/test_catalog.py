"""Tests for the JSONL topic catalog loader and the bundled data files."""

import json
from pathlib import Path

import pytest

from attestation.services.catalog import CatalogError, TopicCatalog, clean_line, load_catalog

DATA_DIR = Path(__file__).resolve().parents[1] / "data"


def _q(topic_id, qid, correct="A", ids=("A", "B")):
    return {
        "topic_id": topic_id,
        "id": qid,
        "text": f"q{qid}",
        "options": [{"id": i, "text": f"opt {i}"} for i in ids],
        "correct_option_id": correct,
    }


def _write(path, rows):
    path.write_text("\n".join(r if isinstance(r, str) else json.dumps(r, ensure_ascii=False)
                              for r in rows) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def files(tmp_path):
    """Return a writer producing (topics_path, questions_path)."""
    def make(topics, questions):
        return (
            _write(tmp_path / "topics.jsonl", topics),
            _write(tmp_path / "questions.jsonl", questions),
        )
    return make


TOPICS = [
    {"id": "t1", "title": "First", "description": "d1"},
    {"id": "t2", "title": "Second", "description": "d2"},
]


class TestLoadCatalog:

    def test_groups_questions_in_file_order(self, files):
        paths = files(TOPICS, [_q("t2", 7), _q("t1", 1), _q("t1", 2, "B"), _q("t2", 3)])
        catalog = load_catalog(*paths)
        assert catalog.count == 2
        assert [t.id for t in catalog] == ["t1", "t2"]
        assert [q.id for q in catalog.get(0).questions] == [1, 2]
        assert [q.id for q in catalog.get(1).questions] == [7, 3]
        assert catalog.get(0).questions[1].correct_option_id == "B"

    def test_blank_lines_and_trailing_commas_tolerated(self, files):
        topics = [json.dumps(TOPICS[0]) + ",", "", "   "]
        questions = ["  " + json.dumps(_q("t1", 1)) + ",  "]
        catalog = load_catalog(*files(topics, questions))
        assert catalog.count == 1

    def test_explanation_is_optional(self, files):
        q = _q("t1", 1)
        q["explanation"] = "because"
        catalog = load_catalog(*files(TOPICS[:1], [q]))
        assert catalog.get(0).questions[0].explanation == "because"

    @pytest.mark.parametrize("question,needle", [
        (_q("zz", 1), "unknown topic_id"),
        (_q("t1", 1, correct="C"), "not an option"),
        (_q("t1", 1, ids=("A", "A")), "repeats option id"),
        (_q("t1", 1, ids=()), "no options"),
        ({**_q("t1", 1), "id": "one"}, "must be an integer"),
        ({**_q("t1", 1), "text": ""}, "missing 'text'"),
    ])
    def test_bad_question(self, files, question, needle):
        with pytest.raises(CatalogError, match=needle):
            load_catalog(*files(TOPICS[:1], [question]))

    def test_duplicate_question_id_in_topic(self, files):
        with pytest.raises(CatalogError, match="duplicate question id"):
            load_catalog(*files(TOPICS[:1], [_q("t1", 1), _q("t1", 1)]))

    def test_same_question_id_in_different_topics_is_fine(self, files):
        catalog = load_catalog(*files(TOPICS, [_q("t1", 1), _q("t2", 1)]))
        assert catalog.count == 2

    def test_duplicate_topic(self, files):
        with pytest.raises(CatalogError, match="duplicate topic id"):
            load_catalog(*files([TOPICS[0], TOPICS[0]], [_q("t1", 1)]))

    def test_empty_topic(self, files):
        with pytest.raises(CatalogError, match="has no questions"):
            load_catalog(*files(TOPICS, [_q("t1", 1)]))

    def test_invalid_json_reports_line(self, files):
        with pytest.raises(CatalogError, match=r"questions.jsonl:2"):
            load_catalog(*files(TOPICS[:1], [_q("t1", 1), "{not json"]))

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_catalog(tmp_path / "nope.jsonl", tmp_path / "nope2.jsonl")

    def test_catalog_error_is_value_error(self):
        assert issubclass(CatalogError, ValueError)


class TestTopicCatalog:

    def test_get_out_of_range(self, catalog):
        with pytest.raises(IndexError):
            catalog.get(catalog.count)
        with pytest.raises(IndexError):
            catalog.get(-1)

    def test_len_and_iter(self, catalog):
        assert len(catalog) == 3
        assert [t.id for t in catalog] == ["five", "three", "one"]

    def test_empty_catalog(self):
        assert TopicCatalog([]).count == 0


class TestCleanLine:

    @pytest.mark.parametrize("raw,expected", [
        ('  {"a": 1}  ', '{"a": 1}'),
        ('{"a": 1},', '{"a": 1}'),
        ("   ", ""),
    ])
    def test_clean_line(self, raw, expected):
        assert clean_line(raw) == expected


def test_bundled_catalog_loads():
    catalog = load_catalog(DATA_DIR / "topics.jsonl", DATA_DIR / "questions.jsonl")
    assert [t.id for t in catalog] == ["block1", "block2", "block3", "block4"]
    for topic in catalog:
        assert topic.questions
        for q in topic.questions:
            assert q.correct_option_id in q.option_ids()
