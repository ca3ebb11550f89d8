from datetime import datetime, timedelta, timezone

from libs.mixpanel import IGNORE_TIME, Event, Update
from libs.mixpanel.payloads import build_alias, build_track, build_update, is_historical


def test_track_defaults_to_track_endpoint_with_geolocation():
    prepared = build_track("tok", "42", "Signed Up", Event(properties={"plan": "pro"}))

    assert prepared.endpoint == "track"
    assert prepared.auto_geolocate is True
    assert prepared.params == {
        "event": "Signed Up",
        "properties": {"token": "tok", "distinct_id": "42", "plan": "pro"},
    }


def test_track_with_ip_disables_geolocation():
    prepared = build_track("tok", "42", "Signed Up", Event(properties={"a": 1}, ip="1.2.3.4"))

    assert prepared.auto_geolocate is False
    assert prepared.params["properties"]["ip"] == "1.2.3.4"


def test_track_passes_zero_ip_through():
    prepared = build_track("tok", "42", "Signed Up", Event(properties={"a": 1}, ip="0"))

    assert prepared.auto_geolocate is False
    assert prepared.params["properties"]["ip"] == "0"


def test_track_recent_timestamp_stays_on_track():
    timestamp = datetime.now(timezone.utc) - timedelta(days=4)
    prepared = build_track("tok", "42", "Login", Event(properties={"a": 1}, timestamp=timestamp))

    assert prepared.endpoint == "track"
    assert prepared.params["properties"]["time"] == int(timestamp.timestamp())


def test_track_old_timestamp_uses_import(caplog):
    timestamp = datetime(2016, 3, 3, 15, 17, 53, tzinfo=timezone(timedelta(hours=1)))
    with caplog.at_level("INFO", logger="libs.mixpanel.payloads"):
        prepared = build_track("tok", "42", "Login", Event(properties={"a": 1}, timestamp=timestamp))

    assert prepared.endpoint == "import"
    assert prepared.params["properties"]["time"] == 1457014673
    assert any("import" in message for message in caplog.messages)


def test_track_custom_properties_override_reserved_keys():
    prepared = build_track("tok", "42", "Login", Event(properties={"distinct_id": "other"}))

    assert prepared.params["properties"]["distinct_id"] == "other"


def test_is_historical_boundary():
    now = 1_700_000_000.0
    inside = datetime.fromtimestamp(now - 5 * 86400 + 1, tz=timezone.utc)
    outside = datetime.fromtimestamp(now - 5 * 86400 - 1, tz=timezone.utc)

    assert not is_historical(inside, now=now)
    assert is_historical(outside, now=now)


def test_update_ignore_time_sets_flag_without_time():
    prepared = build_update("tok", "7", Update(operation="$set", properties={"name": "Ann"}, timestamp=IGNORE_TIME))

    assert prepared.endpoint == "engage"
    assert prepared.params["$ignore_time"] is True
    assert "$time" not in prepared.params


def test_update_explicit_time_and_ip():
    timestamp = datetime(2020, 1, 1, tzinfo=timezone.utc)
    prepared = build_update(
        "tok",
        "7",
        Update(operation="$add", properties={"visits": 1}, ip="10.0.0.1", timestamp=timestamp),
    )

    assert prepared.auto_geolocate is False
    assert prepared.params == {
        "$token": "tok",
        "$distinct_id": "7",
        "$ip": "10.0.0.1",
        "$time": 1577836800,
        "$add": {"visits": 1},
    }


def test_update_without_timestamp_omits_time_keys():
    prepared = build_update("tok", "7", Update(operation="$set", properties={"x": 1}))

    assert prepared.auto_geolocate is True
    assert "$time" not in prepared.params
    assert "$ignore_time" not in prepared.params


def test_alias_never_geolocates():
    prepared = build_alias("tok", "old", "new")

    assert prepared.endpoint == "track"
    assert prepared.auto_geolocate is False
    assert prepared.params == {
        "event": "$create_alias",
        "properties": {"token": "tok", "distinct_id": "old", "alias": "new"},
    }
