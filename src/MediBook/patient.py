"""
Patient domain model.

Defines the immutable records held by the patient book: Nric, MedCon,
Appointment and Patient, plus the NricMatchesPredicate used to select
patients. Each dataclass validates its fields on construction and raises
ValueError when a field is malformed.
"""

from dataclasses import dataclass, field, replace

from .validators import (
    MEDCON_MAX_LENGTH,
    MEDCON_SEPARATOR,
    MESSAGE_APPT_NAME_CONSTRAINTS,
    MESSAGE_DATE_CONSTRAINTS,
    MESSAGE_MEDCON_CONSTRAINTS,
    MESSAGE_MEDCON_LENGTH,
    MESSAGE_MEDCON_SEPARATOR,
    MESSAGE_NRIC_CONSTRAINTS,
    MESSAGE_PATIENT_NAME_CONSTRAINTS,
    MESSAGE_PHONE_CONSTRAINTS,
    check_time_period,
    is_valid_appointment_name,
    is_valid_date,
    is_valid_nric,
    is_valid_patient_name,
    is_valid_phone,
    split_time_period,
)


@dataclass(frozen=True)
class Nric:
    """
    National registration identity card number, e.g. "S1234567A".
    """

    value: str

    def __post_init__(self):
        if not isinstance(self.value, str) or not is_valid_nric(self.value):
            raise ValueError(MESSAGE_NRIC_CONSTRAINTS)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class MedCon:
    """
    A medical condition tag. Compared by exact text, so repeated tags collapse in a set.
    """

    value: str

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value:
            raise ValueError(MESSAGE_MEDCON_CONSTRAINTS)
        if len(self.value) > MEDCON_MAX_LENGTH:
            raise ValueError(MESSAGE_MEDCON_LENGTH)
        if MEDCON_SEPARATOR in self.value:
            raise ValueError(MESSAGE_MEDCON_SEPARATOR)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Appointment:
    """
    Attributes:
        name: What the appointment is for, e.g. "Checkup".
        date: Day of the appointment, YYYY-MM-DD.
        time_period: Start and end in 24-hour time, HHMM-HHMM.
    """

    name: str
    date: str
    time_period: str

    def __post_init__(self):
        if not is_valid_appointment_name(self.name):
            raise ValueError(MESSAGE_APPT_NAME_CONSTRAINTS)
        if not is_valid_date(self.date):
            raise ValueError(MESSAGE_DATE_CONSTRAINTS)
        check_time_period(self.time_period)

    def overlaps(self, other: "Appointment") -> bool:
        """Same day and the two time periods intersect."""
        if self.date != other.date:
            return False
        start, end = split_time_period(self.time_period)
        other_start, other_end = split_time_period(other.time_period)
        return start < other_end and other_start < end

    def __str__(self) -> str:
        return f"{self.name} on {self.date} ({self.time_period})"


@dataclass(frozen=True)
class Patient:
    """
    A patient entry in the book. Never mutated in place: the with_* helpers return a copy.
    """

    nric: Nric
    name: str
    phone: str
    medcons: frozenset[MedCon] = field(default_factory=frozenset)
    appointments: tuple[Appointment, ...] = ()

    def __post_init__(self):
        if not isinstance(self.nric, Nric):
            raise ValueError(f"nric must be an Nric, got {type(self.nric).__name__}")
        if not is_valid_patient_name(self.name):
            raise ValueError(MESSAGE_PATIENT_NAME_CONSTRAINTS)
        if not is_valid_phone(self.phone):
            raise ValueError(MESSAGE_PHONE_CONSTRAINTS)

    def with_medcons(self, medcons: frozenset[MedCon]) -> "Patient":
        return replace(self, medcons=frozenset(medcons))

    def with_appointments(self, appointments: tuple[Appointment, ...]) -> "Patient":
        return replace(self, appointments=tuple(appointments))

    def __str__(self) -> str:
        medcons = ", ".join(sorted(str(m) for m in self.medcons)) or "-"
        return f"{self.name} [{self.nric}] phone: {self.phone} medical conditions: {medcons}"


@dataclass(frozen=True)
class NricMatchesPredicate:
    """
    Selects the patient whose NRIC equals ``nric``.
    """

    nric: Nric

    def __call__(self, patient: Patient) -> bool:
        return patient.nric == self.nric
