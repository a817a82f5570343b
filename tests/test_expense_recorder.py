"""
Recorder Tests
==============

The HTTP call is mocked; these check the payload and how responses map
to success, RemoteRejected and TransportFault.

Usage:
    pytest tests/test_expense_recorder.py -v
"""

from unittest.mock import Mock, patch

import pytest
import requests

from config import Settings
from errors import RemoteRejected, TransportFault
from expense_parser import ExpenseRecord
from expense_recorder import build_payload, record_expense

SETTINGS = Settings(token="t", script_url="https://script.example/exec", secret="s3cret")
RECORD = ExpenseRecord("Food", "Nasi Goreng", 50000, "Cash", "makan pagi")


def make_response(body=None, status=200, json_error=False):
    resp = Mock()
    resp.status_code = status
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(response=resp)
    else:
        resp.raise_for_status.return_value = None
    if json_error:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = body
    return resp


class TestRecordExpense:

    def test_payload_has_exact_fields(self):
        assert build_payload("s3cret", RECORD) == {
            "secret": "s3cret",
            "category": "Food",
            "description": "Nasi Goreng",
            "amount": 50000,
            "method": "Cash",
            "note": "makan pagi",
        }

    def test_ok_response(self):
        session = Mock()
        session.post.return_value = make_response({"ok": True})

        assert record_expense(SETTINGS, RECORD, session=session) is None
        session.post.assert_called_once_with(
            "https://script.example/exec",
            json=build_payload("s3cret", RECORD),
            timeout=None,
        )

    def test_configured_timeout_is_passed(self):
        session = Mock()
        session.post.return_value = make_response({"ok": True})
        settings = Settings(token="t", script_url="https://x", secret="s", http_timeout=5.0)

        record_expense(settings, RECORD, session=session)
        assert session.post.call_args.kwargs["timeout"] == 5.0

    def test_falsy_ok_is_rejected_with_server_text(self):
        session = Mock()
        session.post.return_value = make_response({"ok": False, "error": "Unauthorized"})

        with pytest.raises(RemoteRejected) as exc_info:
            record_expense(SETTINGS, RECORD, session=session)
        assert exc_info.value.reason == "Unauthorized"

    def test_rejection_without_error_text(self):
        session = Mock()
        session.post.return_value = make_response({"ok": False})

        with pytest.raises(RemoteRejected) as exc_info:
            record_expense(SETTINGS, RECORD, session=session)
        assert exc_info.value.reason == "unknown error"

    def test_non_2xx_is_transport_fault(self):
        session = Mock()
        session.post.return_value = make_response(status=500)

        with pytest.raises(TransportFault) as exc_info:
            record_expense(SETTINGS, RECORD, session=session)
        assert str(exc_info.value) == "Request failed with status code 500"

    def test_connection_error_is_transport_fault(self):
        session = Mock()
        session.post.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(TransportFault) as exc_info:
            record_expense(SETTINGS, RECORD, session=session)
        assert "connection refused" in str(exc_info.value)

    def test_timeout_is_transport_fault(self):
        session = Mock()
        session.post.side_effect = requests.Timeout("read timed out")

        with pytest.raises(TransportFault):
            record_expense(SETTINGS, RECORD, session=session)

    @pytest.mark.parametrize("kwargs", [{"json_error": True}, {"body": ["ok"]}])
    def test_unreadable_body_is_transport_fault(self, kwargs):
        session = Mock()
        session.post.return_value = make_response(**kwargs)

        with pytest.raises(TransportFault):
            record_expense(SETTINGS, RECORD, session=session)

    def test_without_session_uses_requests_module(self):
        with patch("expense_recorder.requests.post") as mock_post:
            mock_post.return_value = make_response({"ok": True})
            record_expense(SETTINGS, RECORD)
        mock_post.assert_called_once()
