"""
Command parsers.

Each parser turns the argument string of one command into a command object:
tokenize by prefix, validate each field, then construct. Failures are
returned as a ParseOutcome carrying a ParseFailure instead of being raised.
Rejected input is recorded as a warning on the injected Notepad so callers
decide whether and where diagnostics are shown.
"""

import abc
import typing

from stairval.notepad import Notepad, create_notepad

from .commands import (
    AddApptCommand,
    AddMedConCommand,
    AddPatientCommand,
    Command,
    DelApptCommand,
    DelMedConCommand,
    ExitCommand,
    HelpCommand,
    ListCommand,
    RedoCommand,
    UndoCommand,
)
from .errors import (
    MESSAGE_DUPLICATE_FIELDS,
    MESSAGE_INVALID_COMMAND_FORMAT,
    MESSAGE_UNKNOWN_COMMAND,
    ParseErrorKind,
    ParseOutcome,
)
from .patient import MedCon, Nric, NricMatchesPredicate, Patient
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
    PREFIX_DATE,
    PREFIX_MEDCON,
    PREFIX_NAME,
    PREFIX_NRIC,
    PREFIX_PHONE,
    PREFIX_TIMEPERIOD,
    Prefix,
)
from .tokenizer import ArgumentMultimap, tokenize
from .validators import (
    MEDCON_MAX_LENGTH,
    MEDCON_SEPARATOR,
    MESSAGE_APPT_NAME_CONSTRAINTS,
    MESSAGE_DATE_CONSTRAINTS,
    MESSAGE_MEDCON_LENGTH,
    MESSAGE_MEDCON_SEPARATOR,
    check_time_period,
    is_valid_appointment_name,
    is_valid_date,
)


def parse_nric(text: str) -> Nric:
    """
    Trim and upper-case ``text`` before validating it as an NRIC.

    Raises:
        ValueError: with the NRIC constraint message if the format is wrong.
    """
    return Nric(text.strip().upper())


def usage_error(usage: str) -> str:
    return MESSAGE_INVALID_COMMAND_FORMAT.format(usage=usage)


class CommandParser(metaclass=abc.ABCMeta):
    def __init__(self, notepad: typing.Optional[Notepad] = None):
        self._notepad = notepad if notepad is not None else create_notepad("parser")

    @property
    def notepad(self) -> Notepad:
        return self._notepad

    @abc.abstractmethod
    def parse(self, args: str) -> ParseOutcome[Command]:
        raise NotImplementedError

    def _fail(self, kind: ParseErrorKind, message: str, diagnostic: typing.Optional[str] = None) -> ParseOutcome:
        self._notepad.add_warning(f"{type(self).__name__}: {diagnostic or message}")
        return ParseOutcome.fail(kind, message)

    def _check_duplicates(self, multimap: ArgumentMultimap, *prefixes: Prefix) -> typing.Optional[ParseOutcome]:
        duplicated = multimap.verify_no_duplicate_prefixes_for(*prefixes)
        if duplicated:
            listed = " ".join(str(prefix) for prefix in duplicated)
            return self._fail(ParseErrorKind.DUPLICATE_PREFIX, MESSAGE_DUPLICATE_FIELDS.format(prefixes=listed))
        return None

    def _parse_medcons(self, values: list[str], usage: str) -> typing.Union[frozenset[MedCon], ParseOutcome]:
        """
        Build the set of MedCon tags from every ``medcon/`` value.
        Identical text collapses to one tag; the first bad value fails the whole command.
        """
        medcons: set[MedCon] = set()
        for value in values:
            if not value:
                return self._fail(ParseErrorKind.INVALID_FORMAT, usage_error(usage), "Medical condition is empty.")
            if len(value) > MEDCON_MAX_LENGTH:
                return self._fail(
                    ParseErrorKind.LENGTH_EXCEEDED,
                    MESSAGE_MEDCON_LENGTH,
                    f"Medical condition exceeds character limit: {value}",
                )
            if MEDCON_SEPARATOR in value:
                return self._fail(
                    ParseErrorKind.INVALID_FORMAT,
                    MESSAGE_MEDCON_SEPARATOR,
                    f"Medical condition contains the separator: {value}",
                )
            medcons.add(MedCon(value))
        return frozenset(medcons)


class AddApptCommandParser(CommandParser):
    """
    ``addappt APPOINTMENT_NAME nric/NRIC date/YYYY-MM-DD tp/HHMM-HHMM``

    Duplicate prefixes are not rejected here; the last value of each prefix wins.
    """

    def parse(self, args: str) -> ParseOutcome[Command]:
        multimap = tokenize(args, PREFIX_NRIC, PREFIX_NAME, PREFIX_DATE, PREFIX_TIMEPERIOD)

        appt_name = multimap.preamble
        appt_time_period = multimap.get_value(PREFIX_TIMEPERIOD)
        appt_date = multimap.get_value(PREFIX_DATE)
        nric_value = multimap.get_value(PREFIX_NRIC)

        for prefix, value in ((PREFIX_TIMEPERIOD, appt_time_period), (PREFIX_DATE, appt_date), (PREFIX_NRIC, nric_value)):
            if value is None:
                return self._fail(
                    ParseErrorKind.MISSING_FIELD,
                    usage_error(AddApptCommand.MESSAGE_USAGE),
                    f"Missing {prefix} in appointment arguments.",
                )

        if not is_valid_appointment_name(appt_name):
            return self._fail(ParseErrorKind.INVALID_FORMAT, MESSAGE_APPT_NAME_CONSTRAINTS)

        if not is_valid_date(appt_date):
            return self._fail(ParseErrorKind.INVALID_FORMAT, MESSAGE_DATE_CONSTRAINTS)

        try:
            check_time_period(appt_time_period)
        except ValueError as e:
            return self._fail(ParseErrorKind.INVALID_FORMAT, str(e))

        try:
            nric = parse_nric(nric_value)
        except ValueError as e:
            return self._fail(ParseErrorKind.INVALID_FORMAT, str(e))

        return ParseOutcome.success(
            AddApptCommand(NricMatchesPredicate(nric), appt_name, appt_date, appt_time_period)
        )


class DelApptCommandParser(CommandParser):
    """``delappt nric/NRIC date/YYYY-MM-DD tp/HHMM-HHMM``"""

    def parse(self, args: str) -> ParseOutcome[Command]:
        multimap = tokenize(args, PREFIX_NRIC, PREFIX_DATE, PREFIX_TIMEPERIOD)
        usage = DelApptCommand.MESSAGE_USAGE

        if not multimap.is_present(PREFIX_NRIC, PREFIX_DATE, PREFIX_TIMEPERIOD) or multimap.preamble:
            return self._fail(ParseErrorKind.MISSING_FIELD, usage_error(usage))

        duplicate = self._check_duplicates(multimap, PREFIX_NRIC, PREFIX_DATE, PREFIX_TIMEPERIOD)
        if duplicate is not None:
            return duplicate

        appt_date = multimap.get_value(PREFIX_DATE)
        appt_time_period = multimap.get_value(PREFIX_TIMEPERIOD)
        if not is_valid_date(appt_date):
            return self._fail(ParseErrorKind.INVALID_FORMAT, MESSAGE_DATE_CONSTRAINTS)
        try:
            check_time_period(appt_time_period)
            nric = parse_nric(multimap.get_value(PREFIX_NRIC))
        except ValueError as e:
            return self._fail(ParseErrorKind.INVALID_FORMAT, str(e))

        return ParseOutcome.success(DelApptCommand(nric, appt_date, appt_time_period))


class _MedConCommandParser(CommandParser):
    """
    Shared shape of ``addmedcon`` / ``delmedcon``:
    ``nric/NRIC medcon/MEDICAL_CONDITION [medcon/MEDICAL_CONDITION]...`` and no preamble.
    """

    command_type: typing.ClassVar[type]

    def parse(self, args: str) -> ParseOutcome[Command]:
        multimap = tokenize(args, PREFIX_NRIC, PREFIX_MEDCON)
        usage = self.command_type.MESSAGE_USAGE

        if not multimap.is_present(PREFIX_NRIC, PREFIX_MEDCON):
            return self._fail(
                ParseErrorKind.MISSING_FIELD, usage_error(usage), "NRIC or medical condition not provided."
            )
        if multimap.preamble:
            return self._fail(
                ParseErrorKind.INVALID_FORMAT, usage_error(usage), f"Unexpected preamble {multimap.preamble!r}."
            )

        duplicate = self._check_duplicates(multimap, PREFIX_NRIC)
        if duplicate is not None:
            return duplicate

        try:
            nric = parse_nric(multimap.get_value(PREFIX_NRIC))
        except ValueError as e:
            return self._fail(ParseErrorKind.INVALID_FORMAT, str(e))

        medcons = self._parse_medcons(multimap.get_all_values(PREFIX_MEDCON), usage)
        if isinstance(medcons, ParseOutcome):
            return medcons

        return ParseOutcome.success(self.command_type(nric, medcons))


class DelMedConCommandParser(_MedConCommandParser):
    command_type = DelMedConCommand


class AddMedConCommandParser(_MedConCommandParser):
    command_type = AddMedConCommand


class AddPatientCommandParser(CommandParser):
    """``addpatient n/NAME nric/NRIC p/PHONE [medcon/MEDICAL_CONDITION]...``"""

    def parse(self, args: str) -> ParseOutcome[Command]:
        multimap = tokenize(args, PREFIX_NAME, PREFIX_NRIC, PREFIX_PHONE, PREFIX_MEDCON)
        usage = AddPatientCommand.MESSAGE_USAGE

        if not multimap.is_present(PREFIX_NAME, PREFIX_NRIC, PREFIX_PHONE) or multimap.preamble:
            return self._fail(ParseErrorKind.MISSING_FIELD, usage_error(usage))

        duplicate = self._check_duplicates(multimap, PREFIX_NAME, PREFIX_NRIC, PREFIX_PHONE)
        if duplicate is not None:
            return duplicate

        try:
            nric = parse_nric(multimap.get_value(PREFIX_NRIC))
        except ValueError as e:
            return self._fail(ParseErrorKind.INVALID_FORMAT, str(e))

        medcons = self._parse_medcons(multimap.get_all_values(PREFIX_MEDCON), usage)
        if isinstance(medcons, ParseOutcome):
            return medcons

        try:
            patient = Patient(
                nric=nric,
                name=multimap.get_value(PREFIX_NAME),
                phone=multimap.get_value(PREFIX_PHONE),
                medcons=medcons,
            )
        except ValueError as e:
            return self._fail(ParseErrorKind.INVALID_FORMAT, str(e))

        return ParseOutcome.success(AddPatientCommand(patient))


class NoArgumentCommandParser(CommandParser):
    """
    For commands such as ``list`` or ``undo`` that take no arguments.
    """

    def __init__(self, command: Command, notepad: typing.Optional[Notepad] = None):
        super().__init__(notepad)
        self._command = command

    def parse(self, args: str) -> ParseOutcome[Command]:
        if args.strip():
            return self._fail(ParseErrorKind.INVALID_FORMAT, usage_error(self._command.MESSAGE_USAGE))
        return ParseOutcome.success(self._command)


class BookParser:
    """
    Routes a full line of user input to the parser registered for its command word.
    Every parser shares the same Notepad.
    """

    def __init__(self, notepad: typing.Optional[Notepad] = None):
        self._notepad = notepad if notepad is not None else create_notepad("commands")
        self._parsers: dict[str, CommandParser] = {
            COMMAND_ADD_PATIENT: AddPatientCommandParser(self._notepad),
            COMMAND_ADD_APPT: AddApptCommandParser(self._notepad),
            COMMAND_DEL_APPT: DelApptCommandParser(self._notepad),
            COMMAND_ADD_MEDCON: AddMedConCommandParser(self._notepad),
            COMMAND_DEL_MEDCON: DelMedConCommandParser(self._notepad),
            COMMAND_LIST: NoArgumentCommandParser(ListCommand(), self._notepad),
            COMMAND_UNDO: NoArgumentCommandParser(UndoCommand(), self._notepad),
            COMMAND_REDO: NoArgumentCommandParser(RedoCommand(), self._notepad),
            COMMAND_HELP: NoArgumentCommandParser(HelpCommand(), self._notepad),
            COMMAND_EXIT: NoArgumentCommandParser(ExitCommand(), self._notepad),
        }

    @property
    def notepad(self) -> Notepad:
        return self._notepad

    @property
    def command_words(self) -> list[str]:
        return list(self._parsers)

    def parse_command(self, user_input: str) -> ParseOutcome[Command]:
        parts = user_input.strip().split(maxsplit=1)
        if not parts:
            return ParseOutcome.fail(
                ParseErrorKind.UNKNOWN_COMMAND, usage_error(HelpCommand.MESSAGE_USAGE)
            )
        command_word = parts[0].lower()
        arguments = parts[1] if len(parts) > 1 else ""

        parser = self._parsers.get(command_word)
        if parser is None:
            self._notepad.add_warning(f"Unknown command word {command_word!r}")
            return ParseOutcome.fail(ParseErrorKind.UNKNOWN_COMMAND, MESSAGE_UNKNOWN_COMMAND)
        return parser.parse(arguments)
