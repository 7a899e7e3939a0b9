from enum import IntFlag, auto
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from thompson.parser import State

# callers that cannot transmit a literal empty string use this symbol instead
EMPTY_STRING_SENTINEL = "$"


class SubAutomaton(NamedTuple):
    """
    The result of building one grammar rule

    Attributes
    ----------
    states: list[State]
        The states of the sub-automaton in arena order, the last one being its accepting stub
    start: int
        The arena position of the sub-automaton's initial state
    """

    states: list["State"]
    start: int

    @staticmethod
    def empty() -> "SubAutomaton":
        return SubAutomaton([], -1)


class RegexFlag(IntFlag):
    NOFLAG = auto()
    DEBUG = auto()

    def debug(self) -> bool:
        return bool(self & RegexFlag.DEBUG)


def normalize_text(text: str) -> str:
    """
    Map the empty string sentinel to the empty string

    Examples
    --------
    >>> normalize_text('$')
    ''
    >>> normalize_text('ab')
    'ab'
    """
    return "" if text == EMPTY_STRING_SENTINEL else text
