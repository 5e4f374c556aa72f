"""Tests for request binding and field validators."""

from datetime import datetime

import pytest
from flask import request

from errors import BadRequest, ValidationError
from validation import (
    Payload,
    bind_payload,
    parse_deadline,
    parse_id,
    validate_category,
    validate_options,
    validate_task,
)


def always(result):
    return lambda category_id: result


class TestParseDeadline:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("2025-03-01", datetime(2025, 3, 1)),
            ("2025-03-01 08:15", datetime(2025, 3, 1, 8, 15)),
            ("2025-03-01T08:15:30", datetime(2025, 3, 1, 8, 15, 30)),
            ("2025-03-01T08:15:00Z", datetime(2025, 3, 1, 8, 15)),
            ("2025-03-01T10:15:00+02:00", datetime(2025, 3, 1, 8, 15)),
            ("01.03.2025 08:15", datetime(2025, 3, 1, 8, 15)),
            ("01/03/2025", datetime(2025, 3, 1)),
        ],
    )
    def test_accepted_formats(self, raw, expected):
        assert parse_deadline(raw) == expected

    @pytest.mark.parametrize("raw", ["tomorrow", "2025-13-01", "32.01.2025", ""])
    def test_rejected(self, raw):
        with pytest.raises(ValueError):
            parse_deadline(raw)


class TestParseId:
    def test_numeric_strings(self):
        assert parse_id("42") == 42
        assert parse_id(7) == 7

    @pytest.mark.parametrize("raw", [None, ""])
    def test_missing(self, raw):
        with pytest.raises(BadRequest) as exc:
            parse_id(raw)
        assert exc.value.message == "Missing id"

    @pytest.mark.parametrize("raw", ["abc", True, [1]])
    def test_invalid(self, raw):
        with pytest.raises(BadRequest):
            parse_id(raw)


class TestBindPayload:
    def test_json_body_with_aliases(self, app):
        with app.test_request_context("/x?id=3", method="POST", json={"task_sort": "title_asc", "theme": "dark"}):
            payload = bind_payload(request)
        assert payload == {"id": "3", "taskSort": "title_asc", "theme": "dark"}

    def test_body_wins_over_query(self, app):
        with app.test_request_context("/x?id=3", method="POST", data={"id": "5"}):
            assert bind_payload(request)["id"] == "5"

    def test_json_array_is_rejected(self, app):
        with app.test_request_context("/x", method="POST", json=[1, 2]):
            with pytest.raises(BadRequest) as exc:
                bind_payload(request)
        assert exc.value.errors == {"body": "Invalid JSON"}

    def test_empty_json_body(self, app):
        with app.test_request_context("/x", method="POST", data="", content_type="application/json"):
            assert bind_payload(request) == {}


class TestValidateTask:
    def test_create_defaults(self):
        fields = validate_task(Payload(title="Buy milk"), always(True))
        assert fields == {
            "title": "Buy milk",
            "status": "pending",
            "priority": 2,
            "deadline": None,
            "category_id": None,
        }

    def test_partial_only_returns_present_fields(self):
        assert validate_task(Payload(priority="3"), always(True), partial=True) == {"priority": 3}

    def test_collects_all_errors(self):
        with pytest.raises(ValidationError) as exc:
            validate_task(
                Payload(title="", status="later", priority="x", deadline="soon", categoryId="9", category="Work"),
                always(False),
            )
        assert set(exc.value.errors) == {"title", "status", "priority", "deadline", "categoryId", "category"}

    def test_category_lookup_receives_integer(self):
        seen = []
        validate_task(Payload(title="x", categoryId="12"), lambda category_id: seen.append(category_id) or True)
        assert seen == [12]


class TestValidateCategory:
    def test_color_accepts_mixed_case_hex(self):
        assert validate_category(Payload(name="Work", color="#1a2B3c")) == {"name": "Work", "color": "#1a2B3c"}

    def test_null_color_clears(self):
        assert validate_category(Payload(color=None), partial=True) == {"color": None}


class TestValidateOptions:
    def test_normalizes_theme(self):
        assert validate_options(Payload(theme="LIGHT")) == {"theme": "light"}

    def test_all_fields(self):
        fields = validate_options(
            Payload(language="EN", theme="dark", taskFilter="in_progress", taskSort="priority_desc")
        )
        assert fields == {
            "language": "EN",
            "theme": "dark",
            "task_filter": "in_progress",
            "task_sort": "priority_desc",
        }

    def test_reports_every_bad_field(self):
        with pytest.raises(ValidationError) as exc:
            validate_options(Payload(language="DE", taskFilter="done"))
        assert exc.value.errors == {"language": "Invalid language", "taskFilter": "Invalid task filter"}
