"""
Execution of parsed commands against a PatientBook.
Failed commands must leave the book (and its history) untouched.
"""

import pytest

from MediBook.commands import (
    AddApptCommand,
    AddMedConCommand,
    AddPatientCommand,
    DelApptCommand,
    DelMedConCommand,
    ExitCommand,
    HelpCommand,
    ListCommand,
    RedoCommand,
    UndoCommand,
)
from MediBook.errors import CommandError
from MediBook.patient import Appointment, MedCon, Nric, NricMatchesPredicate, Patient

ALICE = Nric("S1234567A")
UNKNOWN = Nric("G9999999Z")


def add_appt(nric, name="Scan", date="2024-01-01", tp="1000-1100"):
    return AddApptCommand(NricMatchesPredicate(nric), name, date, tp)


def test_add_appt(book):
    result = add_appt(ALICE).execute(book)
    assert "Scan" in result.feedback
    assert book.get(ALICE).appointments[-1] == Appointment("Scan", "2024-01-01", "1000-1100")
    assert book.can_undo()


def test_add_appt_unknown_patient(book):
    with pytest.raises(CommandError, match="No patient found"):
        add_appt(UNKNOWN).execute(book)
    assert not book.can_undo()


def test_add_appt_clash(book):
    with pytest.raises(CommandError, match="clashes"):
        add_appt(ALICE, tp="0930-1030").execute(book)
    assert len(book.get(ALICE).appointments) == 1


def test_del_appt(book):
    DelApptCommand(ALICE, "2024-01-01", "0900-1000").execute(book)
    assert book.get(ALICE).appointments == ()


def test_del_appt_missing(book):
    with pytest.raises(CommandError):
        DelApptCommand(ALICE, "2024-01-02", "0900-1000").execute(book)


def test_del_medcon(book):
    result = DelMedConCommand(ALICE, frozenset({MedCon("Diabetes")})).execute(book)
    assert book.get(ALICE).medcons == frozenset({MedCon("Asthma")})
    assert "Diabetes" in result.feedback


def test_del_medcon_not_recorded_leaves_book_unchanged(book):
    before = book.get(ALICE)
    with pytest.raises(CommandError, match="Hypertension"):
        DelMedConCommand(ALICE, frozenset({MedCon("Diabetes"), MedCon("Hypertension")})).execute(book)
    assert book.get(ALICE) == before


def test_del_medcon_unknown_patient(book):
    with pytest.raises(CommandError):
        DelMedConCommand(UNKNOWN, frozenset({MedCon("Diabetes")})).execute(book)


def test_add_medcon(book):
    AddMedConCommand(ALICE, frozenset({MedCon("Flu")})).execute(book)
    assert MedCon("Flu") in book.get(ALICE).medcons


def test_add_medcon_already_present(book):
    with pytest.raises(CommandError, match="already recorded"):
        AddMedConCommand(ALICE, frozenset({MedCon("Asthma")})).execute(book)


def test_add_patient(book):
    carol = Patient(nric=Nric("F1111111B"), name="Carol", phone="81234567")
    AddPatientCommand(carol).execute(book)
    assert book.get(carol.nric) == carol
    with pytest.raises(CommandError):
        AddPatientCommand(carol).execute(book)


def test_undo_redo_commands(book):
    DelMedConCommand(ALICE, frozenset({MedCon("Diabetes")})).execute(book)
    assert UndoCommand().execute(book).feedback == "Undo success!"
    assert MedCon("Diabetes") in book.get(ALICE).medcons
    assert RedoCommand().execute(book).feedback == "Redo success!"
    assert MedCon("Diabetes") not in book.get(ALICE).medcons
    with pytest.raises(CommandError):
        RedoCommand().execute(book)


def test_undo_with_nothing_to_undo(book):
    with pytest.raises(CommandError, match="undo"):
        UndoCommand().execute(book)


def test_list_help_exit(book):
    listing = ListCommand().execute(book).feedback
    assert "1. Alice Tan" in listing
    assert "2. Bob Lim" in listing
    assert "Checkup" in listing
    assert "addappt" in HelpCommand().execute(book).feedback
    assert ExitCommand().execute(book).should_exit
