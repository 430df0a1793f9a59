"""
Unit tests for log formatting.
"""

import json
import logging

from jobly.core.logging_config import CustomJsonFormatter, UserFilter, current_username


def make_record(level=logging.INFO, msg="Created company nike"):
    return logging.LogRecord("jobly.crud.company", level, "/app/jobly/crud/company.py", 42, msg, None, None)


class TestJsonFormatter:

    def test_standard_fields(self):
        formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(logger)s %(message)s")

        payload = json.loads(formatter.format(make_record()))

        assert payload["message"] == "Created company nike"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "jobly.crud.company"
        assert payload["user"] is None
        assert "location" not in payload

    def test_user_from_context(self):
        formatter = CustomJsonFormatter("%(message)s")
        token = current_username.set("adminTester")
        try:
            payload = json.loads(formatter.format(make_record()))
        finally:
            current_username.reset(token)

        assert payload["user"] == "adminTester"

    def test_location_on_warning(self):
        formatter = CustomJsonFormatter("%(message)s")

        payload = json.loads(formatter.format(make_record(level=logging.WARNING)))

        assert payload["location"] == "/app/jobly/crud/company.py:42"


class TestUserFilter:

    def test_anonymous(self):
        record = make_record()

        assert UserFilter().filter(record) is True
        assert record.user == "-"

    def test_known_user(self):
        record = make_record()
        token = current_username.set("firstTester")
        try:
            UserFilter().filter(record)
        finally:
            current_username.reset(token)

        assert record.user == "firstTester"
