import pytest

from stairval.notepad import Notepad, create_notepad

from MediBook.book import PatientBook
from MediBook.patient import Appointment, MedCon, Nric, Patient


@pytest.fixture
def notepad() -> Notepad:
    return create_notepad("test")


@pytest.fixture
def alice() -> Patient:
    return Patient(
        nric=Nric("S1234567A"),
        name="Alice Tan",
        phone="98765432",
        medcons=frozenset({MedCon("Diabetes"), MedCon("Asthma")}),
        appointments=(Appointment("Checkup", "2024-01-01", "0900-1000"),),
    )


@pytest.fixture
def bob() -> Patient:
    return Patient(nric=Nric("T7654321B"), name="Bob Lim", phone="91234567")


@pytest.fixture
def book(alice: Patient, bob: Patient) -> PatientBook:
    """
    A fresh two-patient book for every test, with nothing to undo.
    """
    return PatientBook([alice, bob])


@pytest.fixture
def book_csv(tmp_path) -> str:
    """
    Path to a CSV patient book in the layout load_sheets_as_tables expects.
    """
    path = tmp_path / "patients.csv"
    path.write_text(
        "NRIC,Name,Phone Number,Medical Conditions\n"
        "S1234567A,Alice Tan,98765432,Diabetes; Asthma\n"
        "T7654321B,Bob Lim,91234567,\n",
        encoding="utf-8",
    )
    return str(path)
