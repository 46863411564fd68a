from __future__ import annotations

from tripshare._redact import redact_for_log


def test_redact_for_log_hides_message_bodies() -> None:
    payload = {
        "tripId": "trip-1",
        "text": "meet at the gate",
        "nested": {"notes": "call me on 555"},
    }

    redacted = redact_for_log(payload)
    assert redacted["tripId"] == "trip-1"
    assert redacted["text"] == "<redacted:16ch>"
    assert redacted["nested"]["notes"].startswith("<redacted:")


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]


def test_redact_for_log_bounds_long_lists() -> None:
    redacted = redact_for_log(list(range(30)), max_items=5)
    assert redacted[:5] == [0, 1, 2, 3, 4]
    assert redacted[-1] == "<+25 more>"
