import pytest

from MediBook.book import PatientBook
from MediBook.patient import MedCon, Nric


def test_patients_keep_insertion_order(book, alice, bob):
    assert book.patients() == [alice, bob]
    assert len(book) == 2


def test_add_duplicate_patient_raises(book, alice):
    with pytest.raises(ValueError):
        book.add_patient(alice)


def test_fresh_book_has_no_history(book):
    assert not book.can_undo()
    assert not book.can_redo()
    with pytest.raises(IndexError):
        book.undo()


def test_undo_and_redo_restore_snapshots(book, alice):
    book.set_patient(alice.with_medcons(frozenset()))
    book.commit()
    assert book.get(alice.nric).medcons == frozenset()

    book.undo()
    assert MedCon("Diabetes") in book.get(alice.nric).medcons
    assert book.can_redo()

    book.redo()
    assert book.get(alice.nric).medcons == frozenset()
    assert not book.can_redo()


def test_commit_after_undo_drops_redo_branch(book, alice):
    book.set_patient(alice.with_medcons(frozenset()))
    book.commit()
    book.undo()
    book.set_patient(alice.with_appointments(()))
    book.commit()
    assert not book.can_redo()
    assert book.get(alice.nric).appointments == ()
    assert MedCon("Diabetes") in book.get(alice.nric).medcons


def test_set_unknown_patient_raises(alice):
    with pytest.raises(KeyError):
        PatientBook().set_patient(alice)


def test_find_by_predicate(book, bob):
    assert book.find(lambda p: p.nric == Nric("T7654321B")) == [bob]
