"""
Tests for the prefix tokenizer:
- preamble extraction
- per-prefix value order
- prefixes only count after whitespace
"""

from MediBook.syntax import PREFIX_DATE, PREFIX_MEDCON, PREFIX_NAME, PREFIX_NRIC, PREFIX_TIMEPERIOD
from MediBook.tokenizer import tokenize


def test_preamble_and_values():
    m = tokenize(" John Doe nric/S1234567A date/2024-01-01 tp/0900-1000", PREFIX_NRIC, PREFIX_DATE, PREFIX_TIMEPERIOD)
    assert m.preamble == "John Doe"
    assert m.get_value(PREFIX_NRIC) == "S1234567A"
    assert m.get_value(PREFIX_DATE) == "2024-01-01"
    assert m.get_value(PREFIX_TIMEPERIOD) == "0900-1000"


def test_no_prefixes_everything_is_preamble():
    m = tokenize("  just some text  ", PREFIX_NRIC)
    assert m.preamble == "just some text"
    assert m.get_value(PREFIX_NRIC) is None
    assert m.get_all_values(PREFIX_NRIC) == []


def test_prefix_at_start_of_string_is_recognized():
    m = tokenize("nric/S1234567A medcon/Flu", PREFIX_NRIC, PREFIX_MEDCON)
    assert m.preamble == ""
    assert m.get_value(PREFIX_NRIC) == "S1234567A"


def test_repeated_prefix_keeps_input_order_and_last_wins():
    m = tokenize(" medcon/Flu medcon/Asthma medcon/Cough", PREFIX_MEDCON)
    assert m.get_all_values(PREFIX_MEDCON) == ["Flu", "Asthma", "Cough"]
    assert m.get_value(PREFIX_MEDCON) == "Cough"


def test_prefix_must_follow_whitespace():
    m = tokenize(" abcnric/S1234567A", PREFIX_NRIC)
    assert m.get_value(PREFIX_NRIC) is None
    assert m.preamble == "abcnric/S1234567A"


def test_name_prefix_not_confused_with_longer_prefixes():
    """'medcon/' and 'nric/' both contain 'n' but must not be read as 'n/'."""
    m = tokenize(" n/Alice nric/S1234567A medcon/Flu", PREFIX_NAME, PREFIX_NRIC, PREFIX_MEDCON)
    assert m.get_all_values(PREFIX_NAME) == ["Alice"]
    assert m.get_value(PREFIX_NRIC) == "S1234567A"
    assert m.get_value(PREFIX_MEDCON) == "Flu"


def test_empty_value_is_kept():
    m = tokenize(" nric/ medcon/", PREFIX_NRIC, PREFIX_MEDCON)
    assert m.get_value(PREFIX_NRIC) == ""
    assert m.get_all_values(PREFIX_MEDCON) == [""]
    assert m.is_present(PREFIX_NRIC, PREFIX_MEDCON)


def test_verify_no_duplicate_prefixes_for():
    m = tokenize(" nric/S1234567A nric/T7654321B medcon/Flu medcon/Cough", PREFIX_NRIC, PREFIX_MEDCON)
    assert m.verify_no_duplicate_prefixes_for(PREFIX_NRIC) == [PREFIX_NRIC]
    assert m.verify_no_duplicate_prefixes_for(PREFIX_DATE) == []


def test_tab_also_separates_prefixes():
    m = tokenize("Checkup\tnric/S1234567A date/2024-01-01", PREFIX_NRIC, PREFIX_DATE)
    assert m.preamble == "Checkup"
    assert m.get_value(PREFIX_NRIC) == "S1234567A"
    assert m.get_value(PREFIX_DATE) == "2024-01-01"
