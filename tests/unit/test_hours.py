import pytest

from volunteer_tracker.utils.hours import (
    format_minutes,
    is_valid_date,
    is_valid_hours,
    parse_hours,
    progress_percentage,
    sum_hours,
)


@pytest.mark.parametrize("value", ["0:00", "2:30", "12:05", "100:59"])
def test_valid_hours(value):
    assert is_valid_hours(value)


@pytest.mark.parametrize("value", ["", None, "2", "2:5", "2:60", "-1:00", "1:00:00", " 2:30", "a:bc", "1:30\n"])
def test_invalid_hours(value):
    assert not is_valid_hours(value)


def test_parse_hours_returns_minutes():
    assert parse_hours("2:30") == 150
    assert parse_hours("0:05") == 5


def test_parse_hours_rejects_bad_format():
    with pytest.raises(ValueError):
        parse_hours("2:75")
    with pytest.raises(ValueError):
        parse_hours("2:30\n")


def test_format_minutes_pads_minutes():
    assert format_minutes(0) == "0:00"
    assert format_minutes(65) == "1:05"
    assert format_minutes(6000) == "100:00"


def test_format_minutes_rejects_negative():
    with pytest.raises(ValueError):
        format_minutes(-1)


def test_sum_hours_carries_minutes():
    assert sum_hours(["1:45", "0:30", "2:50"]) == "5:05"
    assert sum_hours([]) == "0:00"


def test_progress_percentage_without_goal():
    assert progress_percentage("10:00", None) == 0
    assert progress_percentage("10:00", "") == 0
    assert progress_percentage("10:00", "0:00") == 0


def test_progress_percentage_rounds_and_caps():
    assert progress_percentage("1:00", "3:00") == 33
    assert progress_percentage("2:00", "3:00") == 67
    assert progress_percentage("1:00", "8:00") == 13
    assert progress_percentage("5:00", "4:00") == 100


@pytest.mark.parametrize(
    "value,expected",
    [("2024-02-29", True), ("2023-02-29", False), ("2024-13-01", False), ("2024-1-01", False), ("2024-02-29\n", False), ("", False)],
)
def test_is_valid_date(value, expected):
    assert is_valid_date(value) is expected
