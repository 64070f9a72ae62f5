import abc
import typing

import pandas as pd

from dataclasses import dataclass
from stairval.notepad import Notepad

from .book import PatientBook
from .loader import APPOINTMENTS_SHEET, PATIENTS_SHEET
from .patient import Appointment, MedCon, Nric, Patient
from .validators import MEDCON_SEPARATOR

# Minimal required columns (after renaming, index brought in as 'nric')
PATIENT_KEY_COLUMNS = {"nric", "name", "phone"}
APPOINTMENT_KEY_COLUMNS = {"nric", "appt_name", "date", "time_period"}

# Friendly aliases for sheet names
KNOWN_SHEET_ALIASES: dict[str, set[str]] = {PATIENTS_SHEET: {"patients", "patient", "persons", "people"},
                                            APPOINTMENTS_SHEET: {"appointments", "appointment", "appts", "appt"}}


@dataclass
class TypedTables:
    """
    Explicit, typed access to book sheets.
    Any field can be `None`, meaning that the sheet was not provided.
    """
    patients: pd.DataFrame | None
    appointments: pd.DataFrame | None


class TableMapper(metaclass=abc.ABCMeta):
    @abc.abstractmethod
    def apply_mapping(self, tables: dict[str, pd.DataFrame], notepad: Notepad) -> PatientBook:
        raise NotImplementedError


class BookMapper(TableMapper):
    def apply_mapping(self, tables: dict[str, pd.DataFrame], notepad: Notepad) -> PatientBook:
        """
        Process:
        1) choose the patients and appointments tables
        2) map rows to Patient / Appointment records, skipping rows with errors
        3) attach appointments to their patients
        4) return a PatientBook holding the result
        """
        typed_tables = self._choose_named_tables(tables, notepad)
        patients = self._map_patients_table(typed_tables.patients, notepad)
        appointments = self._map_appointments_table(typed_tables.appointments, notepad)

        by_nric: dict[Nric, Patient] = {}
        for patient in patients:
            if patient.nric in by_nric:
                notepad.add_error(f"Sheet {PATIENTS_SHEET!r}: duplicate NRIC {str(patient.nric)!r}")
                continue
            by_nric[patient.nric] = patient

        for nric, appointment in appointments:
            patient = by_nric.get(nric)
            if patient is None:
                notepad.add_error(f"Sheet {APPOINTMENTS_SHEET!r}: no patient with NRIC {str(nric)!r}")
                continue
            clashes = [existing for existing in patient.appointments if existing.overlaps(appointment)]
            if clashes:
                notepad.add_error(
                    f"Sheet {APPOINTMENTS_SHEET!r}: {appointment} clashes with {clashes[0]} for {str(nric)!r}"
                )
                continue
            by_nric[nric] = patient.with_appointments(patient.appointments + (appointment,))

        return PatientBook(by_nric.values())

    @staticmethod
    def _prepare_sheet(df: pd.DataFrame) -> pd.DataFrame:
        """Bring the index into a column named 'nric'."""
        working = df.reset_index()
        original = working.columns[0]
        return working.rename(columns={original: "nric"})

    @staticmethod
    def _cell_str(value: typing.Any) -> str:
        """
        - None, NaN and whitespace-only cells become ''
        - whole floats lose their '.0' (e.g. 98765432.0 -> '98765432')
        - everything else is str()-ed and trimmed
        """
        if value is None or (not isinstance(value, str) and pd.isna(value)):
            return ""
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value).strip()

    @staticmethod
    def _split_medcons(value: typing.Any) -> list[str]:
        cell = BookMapper._cell_str(value)
        return [part.strip() for part in cell.split(MEDCON_SEPARATOR) if part.strip()]

    @staticmethod
    def parse_patient_row(row: pd.Series, sheet_name: str, notepad: Notepad) -> Patient | None:
        """
        Parse a single patient row. Returns None if validation fails for this row.
        """
        try:
            return Patient(
                nric=Nric(BookMapper._cell_str(row["nric"]).upper()),
                name=BookMapper._cell_str(row["name"]),
                phone=BookMapper._cell_str(row["phone"]),
                medcons=frozenset(MedCon(text) for text in BookMapper._split_medcons(row.get("medcons"))),
            )
        except (ValueError, TypeError) as e:
            notepad.add_error(f"Sheet {sheet_name!r}, patient {BookMapper._cell_str(row.get('nric'))!r}: {e}")
            return None

    @staticmethod
    def parse_appointment_row(row: pd.Series, sheet_name: str, notepad: Notepad) -> tuple[Nric, Appointment] | None:
        """
        Parse a single appointment row into (patient NRIC, Appointment). Returns None on error.
        """
        try:
            nric = Nric(BookMapper._cell_str(row["nric"]).upper())
            appointment = Appointment(
                name=BookMapper._cell_str(row["appt_name"]),
                date=BookMapper._cell_str(row["date"]),
                time_period=BookMapper._cell_str(row["time_period"]),
            )
        except (ValueError, TypeError) as e:
            notepad.add_error(f"Sheet {sheet_name!r}, patient {BookMapper._cell_str(row.get('nric'))!r}: {e}")
            return None
        return nric, appointment

    def _choose_named_tables(self, tables: dict[str, pd.DataFrame], notepad: Notepad) -> TypedTables:
        """
        Prefer explicit sheet names (plus common aliases).
        """

        def by_alias(kind: str) -> pd.DataFrame | None:
            aliases = KNOWN_SHEET_ALIASES[kind]
            for sheet_name, df in tables.items():
                if sheet_name.strip().casefold() in aliases:
                    return df
            return None

        selected = TypedTables(
            patients=by_alias(PATIENTS_SHEET),
            appointments=by_alias(APPOINTMENTS_SHEET),
        )

        # Hard-minimum: a patients sheet must exist
        if selected.patients is None:
            notepad.add_error(f"Missing required sheet: {PATIENTS_SHEET!r}.")

        return selected

    # Table-level wrapper mappers
    def _map_patients_table(self, df: pd.DataFrame | None, notepad: Notepad) -> list[Patient]:
        if df is None:
            return []
        working = self._prepare_sheet(df)
        missing = PATIENT_KEY_COLUMNS - set(working.columns)
        if missing:
            notepad.add_error(f"Sheet {PATIENTS_SHEET!r}: missing required columns: {sorted(missing)}")
            return []

        records: list[Patient] = []
        for _, row in working.iterrows():
            patient = self.parse_patient_row(row, PATIENTS_SHEET, notepad)
            if patient is not None:
                records.append(patient)
        return records

    def _map_appointments_table(self, df: pd.DataFrame | None, notepad: Notepad) -> list[tuple[Nric, Appointment]]:
        if df is None:
            return []
        working = self._prepare_sheet(df)
        missing = APPOINTMENT_KEY_COLUMNS - set(working.columns)
        if missing:
            notepad.add_error(f"Sheet {APPOINTMENTS_SHEET!r}: missing required columns: {sorted(missing)}")
            return []

        records: list[tuple[Nric, Appointment]] = []
        for _, row in working.iterrows():
            parsed = self.parse_appointment_row(row, APPOINTMENTS_SHEET, notepad)
            if parsed is not None:
                records.append(parsed)
        return records
