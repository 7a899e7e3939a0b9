import logging
from dataclasses import dataclass, replace
from string import ascii_letters
from typing import Optional

from thompson.utils import RegexFlag, SubAutomaton

logger = logging.getLogger(__name__)

OPERATORS = set("( ) | *".split())


class RegexpParsingError(Exception):
    ...


class MalformedExpression(RegexpParsingError):
    """
    Raised when a pattern does not follow the grammar

    Attributes
    ----------
    pattern: str
        The pattern being parsed
    position: int
        The index in `pattern` at which parsing failed
    """

    def __init__(self, message: str, pattern: str, position: int):
        super().__init__(
            f"{message} at position {position}\n"
            f"regexp = {pattern!r}\n"
            f"left = {pattern[position:]!r}"
        )
        self.pattern = pattern
        self.position = position


def is_letter(char: str) -> bool:
    """
    Check if `char` is a single ASCII letter

    Examples
    --------
    >>> is_letter('a')
    True
    >>> is_letter('Z')
    True
    >>> is_letter('1')
    False
    >>> is_letter('é')
    False
    >>> is_letter('')
    False
    """
    return len(char) == 1 and char in ascii_letters


@dataclass(frozen=True, slots=True)
class State:
    """
    A node in the automaton

    Attributes
    ----------
    label: Optional[str]
        None for an epsilon state, otherwise the symbol consumed on the edge `out1`
    out1: Optional[int]
        The consuming edge of a labelled state or the first epsilon edge of an epsilon state
    out2: Optional[int]
        The second epsilon edge, only ever present on epsilon states

    Examples
    --------
    >>> State('a', 1)
    State(label='a', out1=1, out2=None)
    >>> State('a', 1).edges()
    (1,)
    >>> State().is_epsilon()
    True
    """

    label: Optional[str] = None
    out1: Optional[int] = None
    out2: Optional[int] = None

    def __post_init__(self):
        if self.label is not None and self.out2 is not None:
            raise ValueError(f"labelled state {self.label!r} cannot have two edges")

    def is_epsilon(self) -> bool:
        return self.label is None

    def edges(self) -> tuple[int, ...]:
        return tuple(end for end in (self.out1, self.out2) if end is not None)


class RegexParser:
    """
    A recursive descent parser which emits the states of a Thompson NFA while it parses

    Grammar:
        Expression ::= Term ("|" Expression)?
        Term       ::= Factor Term?
        Factor     ::= (Letter | "(" Expression ")") "*"?
        Letter     ::= [A-Za-z]

    Every rule returns a SubAutomaton whose states are numbered by their final position in the
    arena. `_next_index` is the first free arena position; a rule allocates its own states at
    `_next_index` after its children have been built, so concatenating the children's state
    lists in the order they were built always puts every state at the position it was given.
    The last state of every SubAutomaton is its accepting stub.

    Examples
    --------
    >>> RegexParser('a').root
    SubAutomaton(states=[State(label='a', out1=1, out2=None), State(label=None, out1=None, out2=None)], start=0)
    >>> RegexParser('').root
    SubAutomaton(states=[], start=-1)
    """

    def __init__(self, regex: str, flags: RegexFlag = RegexFlag.NOFLAG):
        self._regex = regex
        self._pos = 0
        self._flags = flags
        self._next_index = 0
        self._root = self.parse_regex()
        if self._pos < len(self._regex):
            raise self.error(f"unexpected {self.current()!r}")
        logger.debug(
            "built %d states from %r, start = %d",
            len(self._root.states),
            regex,
            self._root.start,
        )

    @property
    def root(self) -> SubAutomaton:
        return self._root

    @property
    def flags(self) -> RegexFlag:
        return self._flags

    @property
    def pattern(self) -> str:
        return self._regex

    def error(self, message: str) -> MalformedExpression:
        return MalformedExpression(message, self._regex, self._pos)

    def consume(self, char: str):
        if self._pos >= len(self._regex):
            raise self.error(f"expected {char!r} got end of pattern")
        if not self.remainder().startswith(char):
            raise self.error(f"expected {char!r} got {self.current()!r}")
        self._pos += len(char)

    def consume_and_return(self) -> str:
        char = self.current()
        self.consume(char)
        return char

    def optional(self, expected: str) -> bool:
        if self.matches(expected):
            self.consume(expected)
            return True
        return False

    def current(self) -> str:
        return self._regex[self._pos]

    def remainder(self) -> str:
        return "" if self._pos >= len(self._regex) else self._regex[self._pos :]

    def within_bounds(self) -> bool:
        return self._pos < len(self._regex)

    def matches(self, char: str) -> bool:
        return self.within_bounds() and self.current() == char

    def can_parse_letter(self) -> bool:
        return self.within_bounds() and is_letter(self.current())

    def can_parse_factor(self) -> bool:
        return self.matches("(") or self.can_parse_letter()

    def allocate(self, states: list[State], split: State) -> int:
        """
        Append `split` followed by a fresh accepting stub, returning the position of `split`
        """
        index = self._next_index
        states.extend((split, State()))
        self._next_index += 2
        return index

    def parse_regex(self) -> SubAutomaton:
        if self._regex == "":
            return SubAutomaton.empty()
        return self.parse_expression()

    def parse_expression(self) -> SubAutomaton:
        # Expression ::= Term ("|" Expression)?
        states, front = self.parse_term()
        if not self.optional("|"):
            return SubAutomaton(states, front)

        alternative, alternative_front = self.parse_expression()
        # both branches exit into the join stub placed right after the split state
        join = self._next_index + 1
        states[-1] = replace(states[-1], out1=join)
        alternative[-1] = replace(alternative[-1], out1=join)
        states.extend(alternative)
        start = self.allocate(states, State(None, front, alternative_front))
        return SubAutomaton(states, start)

    def parse_term(self) -> SubAutomaton:
        # Term ::= Factor Term?
        states, front = self.parse_factor()
        if self.can_parse_factor():
            concatenation, concatenation_front = self.parse_term()
            states[-1] = replace(states[-1], out1=concatenation_front)
            states.extend(concatenation)
        return SubAutomaton(states, front)

    def parse_factor(self) -> SubAutomaton:
        # Factor ::= (Letter | "(" Expression ")") "*"?
        if self.matches("("):
            self.consume("(")
            if self.matches(")"):
                raise self.error("empty group")
            states, start = self.parse_expression()
            self.consume(")")
        elif self.can_parse_letter():
            states, start = self.parse_letter()
        elif self.matches("*"):
            raise self.error("nothing to repeat")
        elif self.within_bounds():
            if self.current() in OPERATORS:
                raise self.error(f"unexpected {self.current()!r}")
            raise self.error(f"unrecognized character {self.current()!r}")
        else:
            raise self.error("expected a letter or '(' got end of pattern")

        if self.optional("*"):
            states, start = self.kleene_star(states, start)
            if self.matches("*"):
                raise self.error("multiple repeat")
        return SubAutomaton(states, start)

    def parse_letter(self) -> SubAutomaton:
        # Letter ::= [A-Za-z]
        symbol = self.consume_and_return()
        start = self._next_index
        self._next_index += 2
        return SubAutomaton([State(symbol, start + 1), State()], start)

    def kleene_star(self, states: list[State], start: int) -> SubAutomaton:
        exit_stub = self._next_index + 1
        # the old accepting stub either loops back or leaves through the new stub
        states[-1] = replace(states[-1], out1=start, out2=exit_stub)
        entry = self.allocate(states, State(None, start, exit_stub))
        return SubAutomaton(states, entry)


if __name__ == "__main__":
    import doctest

    doctest.testmod()
