from __future__ import annotations

import math

from tripshare.ingestion.normalize import is_blank, safe_float, safe_int, safe_str, truncate
from tripshare.models.requests import AddVehicleRequest, ChatMessagePayload, CreateTripRequest, JoinTripPayload
from tripshare.models.trip import MapCenter


def test_safe_float_rejects_placeholders_and_non_finite() -> None:
    assert safe_float("12.5") == 12.5
    assert safe_float(3) == 3.0
    assert safe_float("") is None
    assert safe_float("abc") is None
    assert safe_float(True) is None
    assert safe_float(math.nan) is None
    assert safe_float(math.inf) is None


def test_safe_int_and_str() -> None:
    assert safe_int("42.9") == 42
    assert safe_int(None) is None
    assert safe_str(5) == "5"
    assert safe_str("") is None


def test_is_blank_and_truncate() -> None:
    assert is_blank(None) and is_blank("  ")
    assert not is_blank("x") and not is_blank(0)
    assert truncate(None, 5) == ""
    assert truncate(123456789, 4) == "1234"


def test_create_trip_request_defaults() -> None:
    assert CreateTripRequest.model_validate({}).name == "My Trip"
    assert CreateTripRequest.model_validate({"name": "  "}).name == "My Trip"
    assert CreateTripRequest.model_validate({"center": None}).center == MapCenter()

    custom = CreateTripRequest.model_validate({"name": "Khao Yai", "center": {"lat": 14.7, "lng": 101.4, "zoom": 10}})
    assert custom.name == "Khao Yai"
    assert custom.center.zoom == 10


def test_vehicle_request_default_name() -> None:
    assert AddVehicleRequest.model_validate({}).name == "Vehicle"
    assert AddVehicleRequest.model_validate({"name": "Van"}).name == "Van"


def test_realtime_payloads_accept_both_key_styles() -> None:
    assert JoinTripPayload.model_validate({"tripId": "t1"}).trip_id == "t1"
    assert JoinTripPayload.model_validate({"trip_id": " t1 "}).trip_id == "t1"
    assert ChatMessagePayload.model_validate({"tripId": "t1", "text": 42}).text == "42"
    assert ChatMessagePayload.model_validate({"tripId": "t1"}).text == ""


def test_numbers_too_large_for_float_are_dropped() -> None:
    huge = 10**400
    assert safe_float(huge) is None
    assert safe_int(huge) is None
    assert safe_float(-huge) is None
