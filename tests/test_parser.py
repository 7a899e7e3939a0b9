import pytest

from thompson.fsm import NFA
from thompson.parser import MalformedExpression, RegexParser, RegexpParsingError, State

VALID_PATTERNS = [
    "a",
    "Z",
    "ab",
    "a|b",
    "a*",
    "(a|b)*a",
    "(a*)*",
    "((a))",
    "a(b|c)*d",
    "A|bC*",
    "(ab|c)*(d|e)",
    "a|b|c",
    "((a|b)(c|d))*e",
    "abc|def|ghi",
]


@pytest.mark.parametrize(
    "pattern, states, start",
    [
        ("a", [State("a", 1), State()], 0),
        ("ab", [State("a", 1), State(None, 2), State("b", 3), State()], 0),
        (
            "a|b",
            [
                State("a", 1),
                State(None, 5),
                State("b", 3),
                State(None, 5),
                State(None, 0, 2),
                State(),
            ],
            4,
        ),
        ("a*", [State("a", 1), State(None, 0, 3), State(None, 0, 3), State()], 2),
        ("(a)", [State("a", 1), State()], 0),
    ],
)
def test_state_layout(pattern, states, start):
    root = RegexParser(pattern).root
    assert root.states == states
    assert root.start == start


@pytest.mark.parametrize("pattern", VALID_PATTERNS)
def test_accepting_state_is_last(pattern):
    nfa = NFA(pattern)
    assert nfa.accepting_state == len(nfa) - 1
    assert nfa[nfa.accepting_state].edges() == ()
    nfa.validate()


@pytest.mark.parametrize("pattern", VALID_PATTERNS)
def test_references_stay_inside_the_automaton(pattern):
    nfa = NFA(pattern)
    assert 0 <= nfa.start_state < len(nfa)
    for start, _, end in nfa.transitions():
        assert 0 <= start < len(nfa)
        assert 0 <= end < len(nfa)


@pytest.mark.parametrize("pattern", VALID_PATTERNS)
def test_labelled_states_have_a_single_edge(pattern):
    for state in NFA(pattern):
        if not state.is_epsilon():
            assert state.out2 is None
            assert state.out1 is not None
            assert state.label.isalpha()


@pytest.mark.parametrize(
    "pattern, n_states",
    [
        ("a", 2),
        ("ab", 4),
        ("a|b", 6),
        ("a*", 4),
        ("(a|b)*a", 10),
        ("(((a)))", 2),
    ],
)
def test_state_count(pattern, n_states):
    assert len(NFA(pattern)) == n_states


def test_empty_pattern_gives_empty_automaton():
    nfa = NFA("")
    assert nfa.is_empty()
    assert nfa.start_state == -1
    assert nfa.accepting_state == -1
    nfa.validate()
    assert NFA().is_empty()


def test_labelled_state_cannot_have_two_edges():
    with pytest.raises(ValueError):
        State("a", 1, 2)


def test_states_are_immutable():
    nfa = NFA("a")
    with pytest.raises(AttributeError):
        nfa[0].out1 = 0  # type: ignore


@pytest.mark.parametrize(
    "pattern",
    [
        "(",
        ")",
        "(a",
        "a)",
        "()",
        "*a",
        "a**",
        "|a",
        "a|",
        "a||b",
        "a b",
        " a",
        "a1",
        "é",
        "(*)",
        "(|a)",
        "a(",
        "ab)c",
        "a.b",
        "$",
    ],
)
def test_raises_exception(pattern):
    with pytest.raises(MalformedExpression):
        _ = NFA(pattern)


def test_error_reports_position():
    with pytest.raises(RegexpParsingError) as info:
        RegexParser("ab)c")
    assert info.value.position == 2
    assert info.value.pattern == "ab)c"
    assert "')'" in str(info.value)
