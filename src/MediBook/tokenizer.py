"""
Tokenizer for command arguments.

Splits a raw argument string such as ``" John Doe nric/S1234567A tp/0900-1000"``
into a preamble (``"John Doe"``) and a multimap of prefix → values. A prefix only
counts when it begins the string or follows whitespace, so ``abcnric/`` is plain
text. Any whitespace counts as the boundary, tabs and non-breaking spaces
included, not only a plain space. No validation happens here.
"""

import re
import typing

from collections import defaultdict

from .syntax import Prefix


class ArgumentMultimap:
    """
    Values found after each prefix, in the order they were typed, plus the preamble.
    A prefix that never appeared yields ``None`` / ``[]`` rather than an error.
    """

    def __init__(self, preamble: str = ""):
        self._preamble = preamble
        self._values: dict[Prefix, list[str]] = defaultdict(list)

    def put(self, prefix: Prefix, value: str) -> None:
        self._values[prefix].append(value)

    @property
    def preamble(self) -> str:
        return self._preamble

    def get_value(self, prefix: Prefix) -> typing.Optional[str]:
        """Last value given for ``prefix``, or ``None`` if it is absent."""
        values = self._values.get(prefix)
        if not values:
            return None
        return values[-1]

    def get_all_values(self, prefix: Prefix) -> list[str]:
        return list(self._values.get(prefix, []))

    def is_present(self, *prefixes: Prefix) -> bool:
        return all(self.get_value(prefix) is not None for prefix in prefixes)

    def verify_no_duplicate_prefixes_for(self, *prefixes: Prefix) -> list[Prefix]:
        """
        Return the prefixes among ``prefixes`` that were supplied more than once.
        An empty list means every one of them is single-valued.
        """
        return [prefix for prefix in prefixes if len(self._values.get(prefix, [])) > 1]


def tokenize(args: str, *prefixes: Prefix) -> ArgumentMultimap:
    """
    Split ``args`` at every recognized prefix.

    - preamble: trimmed text before the first prefix
    - each value: trimmed text up to the next prefix or the end of the string
    """
    # pad so a prefix at the very start is still preceded by whitespace
    text = " " + args
    positions: list[tuple[int, Prefix]] = []
    for prefix in prefixes:
        pattern = re.compile(r"(?<=\s)" + re.escape(prefix.marker))
        positions.extend((m.start(), prefix) for m in pattern.finditer(text))
    positions.sort(key=lambda item: item[0])

    if not positions:
        return ArgumentMultimap(text.strip())

    multimap = ArgumentMultimap(text[: positions[0][0]].strip())
    for index, (start, prefix) in enumerate(positions):
        end = positions[index + 1][0] if index + 1 < len(positions) else len(text)
        multimap.put(prefix, text[start + len(prefix.marker): end].strip())
    return multimap
