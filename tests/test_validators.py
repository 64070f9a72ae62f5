import pytest

from MediBook.validators import (
    MESSAGE_TIME_PERIOD_FORMAT,
    MESSAGE_TIME_PERIOD_ORDER,
    check_time_period,
    is_valid_appointment_name,
    is_valid_date,
    is_valid_nric,
    is_valid_phone,
)


@pytest.mark.parametrize("nric", ["S1234567A", "T0000000Z", "F1111111B", "G2222222C", "M3333333D"])
def test_valid_nric(nric):
    assert is_valid_nric(nric)


@pytest.mark.parametrize("nric", ["", "A1234567B", "S123456A", "S12345678A", "s1234567a", "S1234567"])
def test_invalid_nric(nric):
    assert not is_valid_nric(nric)


# Arabic-Indic and full-width digits are not accepted in place of 0-9
@pytest.mark.parametrize("nric", ["S\u0661\u0662\u0663\u0664\u0665\u0666\u0667A", "S\uff11234567A"])
def test_nric_rejects_non_ascii_digits(nric):
    assert not is_valid_nric(nric)


@pytest.mark.parametrize("date", ["\u0662\u0660\u0662\u0664-01-01", "2024-\uff101-01"])
def test_date_rejects_non_ascii_digits(date):
    assert not is_valid_date(date)


@pytest.mark.parametrize("tp", ["\u0660\u0669\u0660\u0660-1000", "0900-\uff11000"])
def test_time_period_rejects_non_ascii_digits(tp):
    with pytest.raises(ValueError):
        check_time_period(tp)


def test_dates():
    assert is_valid_date("2024-01-01")
    assert is_valid_date("2024-02-29")
    assert not is_valid_date("2023-02-29")
    assert not is_valid_date("2024-13-01")
    assert not is_valid_date("01-01-2024")
    assert not is_valid_date("2024-1-1")


@pytest.mark.parametrize("tp", ["0900-1000", "0000-2359", "1230-1231"])
def test_time_period_ok(tp):
    check_time_period(tp)


@pytest.mark.parametrize("tp", ["0900", "9-10", "0900-2400", "0960-1000", "09:00-10:00"])
def test_time_period_bad_format(tp):
    with pytest.raises(ValueError, match="HHMM-HHMM"):
        check_time_period(tp)


@pytest.mark.parametrize("tp", ["1000-0900", "1000-1000"])
def test_time_period_start_must_precede_end(tp):
    with pytest.raises(ValueError) as e:
        check_time_period(tp)
    assert str(e.value) == MESSAGE_TIME_PERIOD_ORDER
    assert str(e.value) != MESSAGE_TIME_PERIOD_FORMAT


def test_appointment_names():
    assert is_valid_appointment_name("John Doe")
    assert is_valid_appointment_name("Checkup 2")
    assert not is_valid_appointment_name("")
    assert not is_valid_appointment_name(" leading space")
    assert not is_valid_appointment_name("X-ray!")


def test_phone():
    assert is_valid_phone("999")
    assert not is_valid_phone("12")
    assert not is_valid_phone("9876 5432")
    assert not is_valid_phone("\u0669\u0668\u0667\u0666\u0665\u0664\u0663\u0662")
