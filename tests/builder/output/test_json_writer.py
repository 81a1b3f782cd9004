"""
Unit tests for exam JSON output and the history log.
"""

import json

from shsat_toolkit.builder.output import append_history, read_exam_json, write_exam_json
from shsat_toolkit.common.file_locking import locked_read_jsonl
from shsat_toolkit.core.models import ComposedExam


def _exam(make_pool):
    pool = make_pool([("Algebra", True, 2), ("Geometry", False, 3)])
    return ComposedExam(questions=tuple(q.with_index(i) for i, q in enumerate(pool, 1)),
                        requested_total=5, requested_grid_ins=2)


class TestWriteExamJson:

    def test_write_when_called_then_summary_and_questions(self, tmp_path, make_pool):
        # Arrange
        exam = _exam(make_pool)
        path = tmp_path / "out" / "exam.json"

        # Act
        result = write_exam_json(exam, path, metadata={"seed": 4})

        # Assert
        payload = json.loads(path.read_text(encoding="utf-8"))
        assert result == path
        assert payload["total"] == 5
        assert payload["grid_ins"] == 2
        assert payload["meta"] == {"seed": 4}
        assert "generated_at" in payload
        assert [q["index"] for q in payload["questions"]] == [1, 2, 3, 4, 5]

    def test_read_when_written_file_then_same_questions(self, tmp_path, make_pool):
        exam = _exam(make_pool)
        path = write_exam_json(exam, tmp_path / "exam.json")
        assert read_exam_json(path) == list(exam.questions)

    def test_read_when_bare_list_then_parsed(self, tmp_path, write_json):
        path = write_json(tmp_path / "list.json", [{"id": "q1", "type": "grid-in", "stem": "s", "answer": 2}])
        questions = read_exam_json(path)
        assert questions[0].is_grid_in
        assert questions[0].answer == "2"


class TestAppendHistory:

    def test_append_when_two_builds_then_two_records(self, tmp_path):
        path = tmp_path / "history.jsonl"
        append_history(path, {"total": 57})
        append_history(path, {"total": 20})
        assert locked_read_jsonl(path) == [{"total": 57}, {"total": 20}]
