import logging
from typing import Iterable, Iterator, Optional

from more_itertools import first_true, ilen
from tqdm import tqdm

from thompson.parser import RegexParser, State
from thompson.utils import RegexFlag, normalize_text

logger = logging.getLogger(__name__)


class NFA:
    """Formally, an NFA is a 5-tuple (Q, Σ, q0, T, δ) where
        • Q is finite set of states;
        • Σ is alphabet of input symbols;
        • q0 is start state;
        • T is subset of Q giving the ``accept`` states;
        and
        • δ is the transition function.

    Here Q is an arena of states addressed by position, T holds exactly one state and
    every state has at most two outgoing edges, so δ is stored on the states themselves.

    An automaton is immutable once built. Building from a new pattern gives a new automaton.

    Examples
    --------
    >>> nfa = NFA('(a|b)*a')
    >>> nfa.match('abba')
    True
    >>> nfa.match('ab')
    False
    >>> NFA().match('$')
    True
    """

    __slots__ = ("pattern", "states", "start_state", "accepting_state", "_flags")

    def __init__(
        self, pattern: Optional[str] = None, flags: RegexFlag = RegexFlag.NOFLAG
    ):
        self._flags = flags
        self.pattern = pattern or ""
        parser = RegexParser(self.pattern, flags)
        states, start = parser.root
        self.states: tuple[State, ...] = tuple(states)
        self.start_state: int = start
        # the accepting state is always the last one the parser appended
        self.accepting_state: int = len(self.states) - 1

    def __len__(self):
        return len(self.states)

    def __iter__(self) -> Iterator[State]:
        return iter(self.states)

    def __getitem__(self, index: int) -> State:
        return self.states[index]

    def __repr__(self):
        return (
            f"NFA(pattern={self.pattern!r}, "
            f"start_state={self.start_state}, "
            f"accepting_state={self.accepting_state}, "
            f"states={self.states})"
        )

    @property
    def flags(self) -> RegexFlag:
        return self._flags

    def is_empty(self) -> bool:
        return not self.states

    @property
    def alphabet(self) -> frozenset[str]:
        return frozenset(state.label for state in self.states if not state.is_epsilon())

    def transitions(self) -> Iterator[tuple[int, Optional[str], int]]:
        """
        Yield every present edge as (start, label, end), label being None for epsilon edges
        """
        for index, state in enumerate(self.states):
            for end in state.edges():
                yield index, state.label, end

    def n_transitions(self) -> int:
        return ilen(self.transitions())

    def validate(self) -> None:
        """
        Check the structural invariants of the automaton

        Raises
        ------
        ValueError
            If an edge leaves the arena, or the accepting state is not
            the only state without outgoing edges
        """
        if self.is_empty():
            if self.start_state != -1 or self.accepting_state != -1:
                raise ValueError(
                    "empty automaton cannot have a start or accepting state"
                )
            return

        for start, _, end in self.transitions():
            if not 0 <= end < len(self.states):
                raise ValueError(f"edge {start} -> {end} leaves the automaton")
        if not 0 <= self.start_state < len(self.states):
            raise ValueError(f"start state {self.start_state} is not in the automaton")

        dead_end = first_true(
            range(len(self.states)), pred=lambda index: not self.states[index].edges()
        )
        if dead_end != self.accepting_state:
            raise ValueError(
                f"state {dead_end} has no outgoing edges but the accepting state "
                f"is {self.accepting_state}"
            )
        if self.states[self.accepting_state].edges():
            raise ValueError("the accepting state cannot have outgoing edges")

    def epsilon_closure(self, states: Iterable[int]) -> frozenset[int]:
        """
        This is the set of all the nodes which can be reached by following epsilon labeled edges
        This is done here using a depth first search

        A state is expanded at most once, so the back edges introduced by a Kleene star
        cannot make the search loop forever

        https://castle.eiu.edu/~mathcs/mat4885/index/Webview/examples/epsilon-closure.pdf
        """

        seen: set[int] = set()
        stack = list(states)

        while stack:
            if (state := stack.pop()) in seen:
                continue

            seen.add(state)
            if self.states[state].is_epsilon():
                stack.extend(self.states[state].edges())

        return frozenset(seen)

    def move(self, states: Iterable[int], symbol: str) -> frozenset[int]:
        return frozenset(
            self.states[state].out1
            for state in states
            if self.states[state].label == symbol
        )

    def match(self, text: str) -> bool:
        """
        Check whether the whole of `text` is in the language of this automaton

        Parameters
        ----------
        text: str
            The string to test. The sentinel '$' stands for the empty string

        Returns
        -------
        bool
            True if the accepting state is reachable after consuming all of `text`

        Examples
        --------
        >>> nfa = NFA('a*')
        >>> nfa.match('aaaa')
        True
        >>> nfa.match('$')
        True
        >>> nfa.match('b')
        False
        """
        text = normalize_text(text)
        if self.is_empty():
            return text == ""

        current = self.epsilon_closure((self.start_state,))
        with tqdm(text, disable=not self._flags.debug()) as symbols:
            for symbol in symbols:
                current = self.epsilon_closure(self.move(current, symbol))
                if self._flags.debug():
                    logger.debug("after %r: %s", symbol, sorted(current))
                if not current:
                    break
        return self.accepting_state in current


if __name__ == "__main__":
    import doctest

    doctest.testmod()
