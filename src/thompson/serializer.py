import json
from typing import Any

import graphviz

from thompson.fsm import NFA
from thompson.parser import State

EPSILON_LABEL = "&epsilon;"
START_MARKER = "0"


def node_name(index: int) -> str:
    # 0 is taken by the invisible start marker
    return str(index + 1)


def to_digraph(nfa: NFA) -> graphviz.Digraph:
    dot = graphviz.Digraph()
    dot.attr("graph", rankdir="LR")
    dot.attr("node", shape="circle", style="filled", fillcolor="gray93")

    if nfa.is_empty():
        # there is nothing to point at, so a lone accepting node stands in for the automaton
        dot.node(node_name(0), shape="doublecircle")
        initial = node_name(0)
    else:
        dot.node(node_name(nfa.accepting_state), shape="doublecircle")
        initial = node_name(nfa.start_state)

    dot.node(START_MARKER, style="invisible")
    dot.edge(START_MARKER, initial)

    for start, label, end in nfa.transitions():
        dot.edge(
            node_name(start),
            node_name(end),
            label=EPSILON_LABEL if label is None else label,
        )
    return dot


def to_dot(nfa: NFA) -> str:
    """
    Render `nfa` as a Graphviz digraph

    One edge line is written for every transition, plus one from the invisible start marker

    Examples
    --------
    >>> source = to_dot(NFA('a'))
    >>> source.startswith('digraph {')
    True
    >>> [line.strip() for line in source.splitlines() if '->' in line]
    ['0 -> 1', '1 -> 2 [label=a]']
    """
    return to_digraph(nfa).source


class AutomatonEncoder(json.JSONEncoder):
    def default(self, o: Any) -> Any:
        if isinstance(o, State):
            return [o.label, o.out1, o.out2]
        if isinstance(o, NFA):
            return {
                "pattern": o.pattern,
                "states": list(o.states),
                "start_state": o.start_state,
                "accepting_state": o.accepting_state,
            }
        return json.JSONEncoder.default(self, o)


def to_json(nfa: NFA, indent: int | None = None) -> str:
    return json.dumps(nfa, cls=AutomatonEncoder, indent=indent)


if __name__ == "__main__":
    import doctest

    doctest.testmod()
