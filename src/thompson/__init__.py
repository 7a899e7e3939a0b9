from thompson.fsm import NFA
from thompson.parser import MalformedExpression, RegexpParsingError, State
from thompson.serializer import to_dot, to_json
from thompson.utils import EMPTY_STRING_SENTINEL, RegexFlag

__all__ = [
    "NFA",
    "State",
    "RegexFlag",
    "RegexpParsingError",
    "MalformedExpression",
    "EMPTY_STRING_SENTINEL",
    "build",
    "matches",
    "render",
    "to_dot",
    "to_json",
]


def build(expression: str, flags: RegexFlag = RegexFlag.NOFLAG) -> NFA:
    """Build a Thompson NFA from `expression`, raising MalformedExpression on bad syntax."""
    return NFA(expression, flags)


def matches(nfa: NFA, text: str) -> bool:
    return nfa.match(text)


def render(nfa: NFA) -> str:
    return to_dot(nfa)
