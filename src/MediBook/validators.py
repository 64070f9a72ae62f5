"""
Field validators used by the parsers and by the domain dataclasses.

All checks are pure. ``check_time_period`` raises ``ValueError`` with a
user-facing message; the others return a boolean.
"""

import re

from datetime import datetime

# Patterns (ASCII so \d only matches 0-9)
_NRIC_PATTERN = re.compile(r"^[STFGM]\d{7}[A-Z]$", re.ASCII)
_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$", re.ASCII)
_TIME_PERIOD_PATTERN = re.compile(r"^(?P<start>\d{4})-(?P<end>\d{4})$", re.ASCII)
_APPOINTMENT_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9 ]*$")
_PATIENT_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9 ,.'/@-]*$")
_PHONE_PATTERN = re.compile(r"^\d{3,}$", re.ASCII)

MEDCON_MAX_LENGTH = 45
# joins the tags of one patient in a saved book, so it cannot appear inside a tag
MEDCON_SEPARATOR = ";"

MESSAGE_NRIC_CONSTRAINTS = (
    "NRIC should start with S, T, F, G or M, followed by 7 digits, "
    "and end with an uppercase letter (e.g. S1234567A)."
)
MESSAGE_APPT_NAME_CONSTRAINTS = (
    "Appointment names should only contain alphanumeric characters and spaces, "
    "and it should not be blank."
)
MESSAGE_DATE_CONSTRAINTS = "Appointment date should be a valid date in the format YYYY-MM-DD."
MESSAGE_TIME_PERIOD_FORMAT = (
    "Time period should be in the format HHMM-HHMM using 24-hour times (e.g. 0900-1030)."
)
MESSAGE_TIME_PERIOD_ORDER = "Start time of the time period must be before its end time."
MESSAGE_MEDCON_CONSTRAINTS = "Medical conditions should not be blank."
MESSAGE_MEDCON_LENGTH = f"Medical conditions should be {MEDCON_MAX_LENGTH} characters or less."
MESSAGE_MEDCON_SEPARATOR = f"Medical conditions should not contain '{MEDCON_SEPARATOR}'."
MESSAGE_PATIENT_NAME_CONSTRAINTS = (
    "Names should start with an alphanumeric character and it should not be blank."
)
MESSAGE_PHONE_CONSTRAINTS = "Phone numbers should only contain digits, and be at least 3 digits long."


def is_valid_nric(text: str) -> bool:
    return bool(_NRIC_PATTERN.match(text))


def is_valid_date(text: str) -> bool:
    """True for a real calendar date written as YYYY-MM-DD."""
    if not _DATE_PATTERN.match(text):
        return False
    try:
        datetime.strptime(text, "%Y-%m-%d")
    except ValueError:
        return False
    return True


def check_time_period(text: str) -> None:
    """
    Validate a ``HHMM-HHMM`` time period.

    Raises:
        ValueError: if either time is malformed or the start is not strictly before the end.
    """
    m = _TIME_PERIOD_PATTERN.match(text)
    if not m:
        raise ValueError(MESSAGE_TIME_PERIOD_FORMAT)
    try:
        start = datetime.strptime(m.group("start"), "%H%M").time()
        end = datetime.strptime(m.group("end"), "%H%M").time()
    except ValueError:
        raise ValueError(MESSAGE_TIME_PERIOD_FORMAT)
    if start >= end:
        raise ValueError(MESSAGE_TIME_PERIOD_ORDER)


def split_time_period(text: str) -> tuple[str, str]:
    # assumes text already passed check_time_period
    start, end = text.split("-")
    return start, end


def is_valid_appointment_name(text: str) -> bool:
    return bool(_APPOINTMENT_NAME_PATTERN.match(text))


def is_valid_patient_name(text: str) -> bool:
    return bool(_PATIENT_NAME_PATTERN.match(text))


def is_valid_phone(text: str) -> bool:
    return bool(_PHONE_PATTERN.match(text))
