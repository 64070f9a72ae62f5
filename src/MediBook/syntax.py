"""
Command syntax shared by every parser: prefix markers and command words.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Prefix:
    """
    A marker such as ``nric/`` that introduces one field of a command.
    """

    marker: str

    def __str__(self) -> str:
        return self.marker


PREFIX_NAME = Prefix("n/")
PREFIX_NRIC = Prefix("nric/")
PREFIX_PHONE = Prefix("p/")
PREFIX_DATE = Prefix("date/")
PREFIX_TIMEPERIOD = Prefix("tp/")
PREFIX_MEDCON = Prefix("medcon/")

# Command words recognized by the dispatcher
COMMAND_ADD_PATIENT = "addpatient"
COMMAND_ADD_APPT = "addappt"
COMMAND_DEL_APPT = "delappt"
COMMAND_ADD_MEDCON = "addmedcon"
COMMAND_DEL_MEDCON = "delmedcon"
COMMAND_LIST = "list"
COMMAND_UNDO = "undo"
COMMAND_REDO = "redo"
COMMAND_HELP = "help"
COMMAND_EXIT = "exit"
