import pathlib

import pandas as pd

from .book import PatientBook
from .validators import MEDCON_SEPARATOR

# Columns that need renaming → target field names
RENAME_MAP = {
    # patient columns
    "patient_name": "name",
    "phone_number": "phone",
    "medical_conditions": "medcons",
    "medcon": "medcons",
    # appointment columns
    "appointment": "appt_name",
    "appointment_name": "appt_name",
    "appointment_date": "date",
    "tp": "time_period",
}

PATIENTS_SHEET = "patients"
APPOINTMENTS_SHEET = "appointments"

_EXCEL_SUFFIXES = {".xlsx", ".xlsm"}


def appointments_csv_path(book_path: pathlib.Path) -> pathlib.Path:
    """'patients.csv' -> 'patients.appointments.csv' in the same folder."""
    return book_path.with_name(f"{book_path.stem}.{APPOINTMENTS_SHEET}{book_path.suffix}")


def _normalize_headers(df: pd.DataFrame) -> pd.DataFrame:
    df.columns = (
        df.columns.astype(str).str.strip()
        .str.replace(r"\s*\(.*?\)", "", regex=True)  # drop any "(…)"
        .str.replace(r"\s+", "_", regex=True)  # spaces → underscore
        .str.replace(":", "", regex=False)  # drop colons
        .str.lower()
    )
    # apply specific renames (e.g. "tp" → "time_period")
    return df.rename(
        columns={orig: target for orig, target in RENAME_MAP.items() if orig in df.columns}
    )


def load_sheets_as_tables(book_path: str) -> dict[str, pd.DataFrame]:
    """
    Read a patient book into DataFrames:
      - Excel workbook: one table per worksheet
      - CSV file: a 'patients' table, plus an 'appointments' table read from
        the sibling <stem>.appointments.csv when that file exists
      - first row = header, first column = index (NRIC)
      - every cell read as text, headers normalized to snake_case
    """
    path = pathlib.Path(book_path)
    tables: dict[str, pd.DataFrame] = {}

    if path.suffix.lower() in _EXCEL_SUFFIXES:
        excel = pd.ExcelFile(path, engine="openpyxl")
        for sheet_name in excel.sheet_names:
            df = pd.read_excel(excel, sheet_name=sheet_name, header=0, index_col=0, dtype=str)
            tables[sheet_name] = _normalize_headers(df)
    else:
        df = pd.read_csv(path, header=0, index_col=0, dtype=str, keep_default_na=False)
        tables[PATIENTS_SHEET] = _normalize_headers(df)
        appointments_path = appointments_csv_path(path)
        if appointments_path.is_file():
            df = pd.read_csv(appointments_path, header=0, index_col=0, dtype=str, keep_default_na=False)
            tables[APPOINTMENTS_SHEET] = _normalize_headers(df)

    return tables


def book_to_tables(book: PatientBook) -> dict[str, pd.DataFrame]:
    """Inverse of the mapper: one row per patient and one row per appointment."""
    patient_rows = [
        {
            "nric": str(patient.nric),
            "name": patient.name,
            "phone": patient.phone,
            "medcons": f"{MEDCON_SEPARATOR} ".join(sorted(str(m) for m in patient.medcons)),
        }
        for patient in book.patients()
    ]
    appointment_rows = [
        {
            "nric": str(patient.nric),
            "appt_name": appt.name,
            "date": appt.date,
            "time_period": appt.time_period,
        }
        for patient in book.patients()
        for appt in patient.appointments
    ]
    patients = pd.DataFrame(patient_rows, columns=["nric", "name", "phone", "medcons"]).set_index("nric")
    appointments = pd.DataFrame(
        appointment_rows, columns=["nric", "appt_name", "date", "time_period"]
    ).set_index("nric")
    return {PATIENTS_SHEET: patients, APPOINTMENTS_SHEET: appointments}


def save_book(book: PatientBook, book_path: str) -> None:
    """
    Write the book in the layout load_sheets_as_tables reads.
    CSV output writes patients to ``book_path`` and appointments to
    the sibling <stem>.appointments.csv.
    """
    path = pathlib.Path(book_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tables = book_to_tables(book)
    if path.suffix.lower() in _EXCEL_SUFFIXES:
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            for sheet_name, df in tables.items():
                df.to_excel(writer, sheet_name=sheet_name)
    else:
        tables[PATIENTS_SHEET].to_csv(path)
        tables[APPOINTMENTS_SHEET].to_csv(appointments_csv_path(path))
