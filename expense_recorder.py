# expense_recorder.py
import logging

import requests

from errors import RemoteRejected, TransportFault

logger = logging.getLogger(__name__)


def build_payload(secret, record):
    """Request body expected by the spreadsheet endpoint."""
    return {
        "secret": secret,
        "category": record.category,
        "description": record.description,
        "amount": record.amount,
        "method": record.method,
        "note": record.note,
    }


def record_expense(settings, record, session=None):
    """
    POST one expense to the configured endpoint. Single attempt, no retry.

    Returns None when the endpoint answers {"ok": true}.
    Raises RemoteRejected when it answers with a falsy "ok",
    TransportFault for network errors, bad statuses or unreadable bodies.
    """
    http = session or requests
    try:
        r = http.post(
            settings.script_url,
            json=build_payload(settings.secret, record),
            timeout=settings.http_timeout,
        )
        r.raise_for_status()
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else "unknown"
        raise TransportFault(f"Request failed with status code {status}") from e
    except requests.RequestException as e:
        raise TransportFault(str(e)) from e

    try:
        data = r.json()
    except ValueError as e:
        raise TransportFault("Response body is not valid JSON") from e

    if not isinstance(data, dict):
        raise TransportFault("Response body is not a JSON object")

    if not data.get("ok"):
        reason = data.get("error") or "unknown error"
        logger.info("Endpoint rejected %s/%s: %s", record.category, record.description, reason)
        raise RemoteRejected(reason)
