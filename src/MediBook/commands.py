"""
Command objects produced by the parsers.

Commands are immutable bundles of validated fields. ``execute`` applies one to a
PatientBook and returns a CommandResult, or raises CommandError without touching
the book.
"""

import abc
import typing

from dataclasses import dataclass

from .book import PatientBook
from .errors import CommandError
from .patient import Appointment, MedCon, Nric, NricMatchesPredicate, Patient
from .syntax import (
    COMMAND_ADD_APPT,
    COMMAND_ADD_MEDCON,
    COMMAND_ADD_PATIENT,
    COMMAND_DEL_APPT,
    COMMAND_DEL_MEDCON,
    COMMAND_EXIT,
    COMMAND_HELP,
    COMMAND_LIST,
    COMMAND_REDO,
    COMMAND_UNDO,
)

MESSAGE_PATIENT_NOT_FOUND = "No patient found with NRIC {nric}"


@dataclass(frozen=True)
class CommandResult:
    feedback: str
    should_exit: bool = False


class Command(metaclass=abc.ABCMeta):
    @abc.abstractmethod
    def execute(self, book: PatientBook) -> CommandResult:
        raise NotImplementedError


def _format_medcons(medcons: typing.Iterable[MedCon]) -> str:
    return ", ".join(sorted(str(m) for m in medcons))


def _require_patient(book: PatientBook, nric: Nric) -> Patient:
    patient = book.get(nric)
    if patient is None:
        raise CommandError(MESSAGE_PATIENT_NOT_FOUND.format(nric=nric))
    return patient


@dataclass(frozen=True)
class AddPatientCommand(Command):
    MESSAGE_USAGE: typing.ClassVar[str] = (
        f"{COMMAND_ADD_PATIENT}: Adds a patient to the book.\n"
        "Parameters: n/NAME nric/NRIC p/PHONE [medcon/MEDICAL_CONDITION]...\n"
        f"Example: {COMMAND_ADD_PATIENT} n/John Doe nric/S1234567A p/98765432 medcon/Diabetes"
    )

    patient: Patient

    def execute(self, book: PatientBook) -> CommandResult:
        if book.has_patient(self.patient.nric):
            raise CommandError(f"This patient already exists in the book: {self.patient.nric}")
        book.add_patient(self.patient)
        book.commit()
        return CommandResult(f"New patient added: {self.patient}")


@dataclass(frozen=True)
class AddApptCommand(Command):
    MESSAGE_USAGE: typing.ClassVar[str] = (
        f"{COMMAND_ADD_APPT}: Adds an appointment to the patient identified by NRIC.\n"
        "Parameters: APPOINTMENT_NAME nric/NRIC date/YYYY-MM-DD tp/HHMM-HHMM\n"
        f"Example: {COMMAND_ADD_APPT} Checkup nric/S1234567A date/2024-01-01 tp/0900-1000"
    )

    predicate: NricMatchesPredicate
    appt_name: str
    appt_date: str
    appt_time_period: str

    def execute(self, book: PatientBook) -> CommandResult:
        matches = book.find(self.predicate)
        if not matches:
            raise CommandError(MESSAGE_PATIENT_NOT_FOUND.format(nric=self.predicate.nric))
        patient = matches[0]
        appointment = Appointment(self.appt_name, self.appt_date, self.appt_time_period)
        clashes = [existing for existing in patient.appointments if existing.overlaps(appointment)]
        if clashes:
            raise CommandError(f"Appointment clashes with existing appointment: {clashes[0]}")
        book.set_patient(patient.with_appointments(patient.appointments + (appointment,)))
        book.commit()
        return CommandResult(f"Appointment added for {patient.name}: {appointment}")


@dataclass(frozen=True)
class DelApptCommand(Command):
    MESSAGE_USAGE: typing.ClassVar[str] = (
        f"{COMMAND_DEL_APPT}: Deletes the appointment of the patient identified by NRIC.\n"
        "Parameters: nric/NRIC date/YYYY-MM-DD tp/HHMM-HHMM\n"
        f"Example: {COMMAND_DEL_APPT} nric/S1234567A date/2024-01-01 tp/0900-1000"
    )

    nric: Nric
    appt_date: str
    appt_time_period: str

    def execute(self, book: PatientBook) -> CommandResult:
        patient = _require_patient(book, self.nric)
        remaining = tuple(
            appt for appt in patient.appointments
            if (appt.date, appt.time_period) != (self.appt_date, self.appt_time_period)
        )
        if len(remaining) == len(patient.appointments):
            raise CommandError(
                f"No appointment on {self.appt_date} ({self.appt_time_period}) for {patient.name}"
            )
        book.set_patient(patient.with_appointments(remaining))
        book.commit()
        return CommandResult(
            f"Appointment on {self.appt_date} ({self.appt_time_period}) deleted for {patient.name}"
        )


@dataclass(frozen=True)
class AddMedConCommand(Command):
    MESSAGE_USAGE: typing.ClassVar[str] = (
        f"{COMMAND_ADD_MEDCON}: Adds medical conditions to the patient identified by NRIC.\n"
        "Parameters: nric/NRIC medcon/MEDICAL_CONDITION [medcon/MEDICAL_CONDITION]...\n"
        f"Example: {COMMAND_ADD_MEDCON} nric/S1234567A medcon/Diabetes medcon/Asthma"
    )

    nric: Nric
    medcons: frozenset[MedCon]

    def execute(self, book: PatientBook) -> CommandResult:
        patient = _require_patient(book, self.nric)
        already = self.medcons & patient.medcons
        if already:
            raise CommandError(
                f"Medical condition(s) already recorded for {patient.name}: {_format_medcons(already)}"
            )
        book.set_patient(patient.with_medcons(patient.medcons | self.medcons))
        book.commit()
        return CommandResult(
            f"Added medical condition(s) to {patient.name}: {_format_medcons(self.medcons)}"
        )


@dataclass(frozen=True)
class DelMedConCommand(Command):
    MESSAGE_USAGE: typing.ClassVar[str] = (
        f"{COMMAND_DEL_MEDCON}: Deletes medical conditions from the patient identified by NRIC.\n"
        "Parameters: nric/NRIC medcon/MEDICAL_CONDITION [medcon/MEDICAL_CONDITION]...\n"
        f"Example: {COMMAND_DEL_MEDCON} nric/S1234567A medcon/Diabetes"
    )

    nric: Nric
    medcons: frozenset[MedCon]

    def execute(self, book: PatientBook) -> CommandResult:
        patient = _require_patient(book, self.nric)
        missing = self.medcons - patient.medcons
        if missing:
            raise CommandError(
                f"Medical condition(s) not recorded for {patient.name}: {_format_medcons(missing)}"
            )
        book.set_patient(patient.with_medcons(patient.medcons - self.medcons))
        book.commit()
        return CommandResult(
            f"Deleted medical condition(s) from {patient.name}: {_format_medcons(self.medcons)}"
        )


@dataclass(frozen=True)
class ListCommand(Command):
    MESSAGE_USAGE: typing.ClassVar[str] = f"{COMMAND_LIST}: Lists all patients."

    def execute(self, book: PatientBook) -> CommandResult:
        patients = book.patients()
        if not patients:
            return CommandResult("No patients in the book.")
        lines = [f"{index}. {patient}" for index, patient in enumerate(patients, start=1)]
        for patient in patients:
            for appt in patient.appointments:
                lines.append(f"   {patient.nric}: {appt}")
        return CommandResult("\n".join(lines))


@dataclass(frozen=True)
class UndoCommand(Command):
    MESSAGE_USAGE: typing.ClassVar[str] = f"{COMMAND_UNDO}: Reverts the last change to the book."

    def execute(self, book: PatientBook) -> CommandResult:
        if not book.can_undo():
            raise CommandError("No more commands to undo!")
        book.undo()
        return CommandResult("Undo success!")


@dataclass(frozen=True)
class RedoCommand(Command):
    MESSAGE_USAGE: typing.ClassVar[str] = f"{COMMAND_REDO}: Re-applies the last undone change."

    def execute(self, book: PatientBook) -> CommandResult:
        if not book.can_redo():
            raise CommandError("No more commands to redo!")
        book.redo()
        return CommandResult("Redo success!")


@dataclass(frozen=True)
class HelpCommand(Command):
    MESSAGE_USAGE: typing.ClassVar[str] = f"{COMMAND_HELP}: Shows every command and its format."

    def execute(self, book: PatientBook) -> CommandResult:
        usages = [
            AddPatientCommand.MESSAGE_USAGE,
            AddApptCommand.MESSAGE_USAGE,
            DelApptCommand.MESSAGE_USAGE,
            AddMedConCommand.MESSAGE_USAGE,
            DelMedConCommand.MESSAGE_USAGE,
            ListCommand.MESSAGE_USAGE,
            UndoCommand.MESSAGE_USAGE,
            RedoCommand.MESSAGE_USAGE,
            HelpCommand.MESSAGE_USAGE,
            ExitCommand.MESSAGE_USAGE,
        ]
        return CommandResult("\n\n".join(usages))


@dataclass(frozen=True)
class ExitCommand(Command):
    MESSAGE_USAGE: typing.ClassVar[str] = f"{COMMAND_EXIT}: Exits the program."

    def execute(self, book: PatientBook) -> CommandResult:
        return CommandResult("Exiting MediBook as requested ...", should_exit=True)
