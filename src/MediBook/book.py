"""
In-memory patient book with undo/redo.

Patients are keyed by NRIC and kept in insertion order. Every mutation is
staged on the working copy and recorded with ``commit()``, which snapshots
the whole book; ``undo()``/``redo()`` move between snapshots.
"""

import logging
import typing

from .patient import Nric, Patient

logger = logging.getLogger(__name__)


class PatientBook:
    def __init__(self, patients: typing.Iterable[Patient] = ()):
        self._patients: dict[Nric, Patient] = {}
        for patient in patients:
            self.add_patient(patient)
        self._history: list[dict[Nric, Patient]] = [dict(self._patients)]
        self._cursor = 0

    # Queries
    def patients(self) -> list[Patient]:
        return list(self._patients.values())

    def find(self, predicate: typing.Callable[[Patient], bool]) -> list[Patient]:
        return [patient for patient in self._patients.values() if predicate(patient)]

    def get(self, nric: Nric) -> typing.Optional[Patient]:
        return self._patients.get(nric)

    def has_patient(self, nric: Nric) -> bool:
        return nric in self._patients

    def __len__(self) -> int:
        return len(self._patients)

    # Mutations (call commit() afterwards to record them)
    def add_patient(self, patient: Patient) -> None:
        if patient.nric in self._patients:
            raise ValueError(f"Patient with NRIC {patient.nric} already exists")
        self._patients[patient.nric] = patient

    def set_patient(self, patient: Patient) -> None:
        if patient.nric not in self._patients:
            raise KeyError(str(patient.nric))
        self._patients[patient.nric] = patient

    # History
    def commit(self) -> None:
        # a fresh commit after undo drops the redo branch
        del self._history[self._cursor + 1:]
        self._history.append(dict(self._patients))
        self._cursor += 1
        logger.debug(f"Committed book state #{self._cursor} ({len(self._patients)} patients)")

    def can_undo(self) -> bool:
        return self._cursor > 0

    def can_redo(self) -> bool:
        return self._cursor < len(self._history) - 1

    def undo(self) -> None:
        if not self.can_undo():
            raise IndexError("No more commands to undo")
        self._cursor -= 1
        self._patients = dict(self._history[self._cursor])
        logger.debug(f"Undo to book state #{self._cursor}")

    def redo(self) -> None:
        if not self.can_redo():
            raise IndexError("No more commands to redo")
        self._cursor += 1
        self._patients = dict(self._history[self._cursor])
        logger.debug(f"Redo to book state #{self._cursor}")
