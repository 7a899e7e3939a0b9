import logging
from typing import IO, Optional

import click

from thompson.fsm import NFA
from thompson.parser import MalformedExpression
from thompson.serializer import to_dot, to_json
from thompson.utils import RegexFlag

logger = logging.getLogger(__name__)

BANNER = "Regular expression parsing with Thompson's construction"
MENU = (
    "Available operations:\n"
    " - exp <expression>\tRead in regular expression\n"
    " - dot <filename>\tExport regular expression to dot-notation\n"
    " - mat <string>\t\tCheck whether a string is accepted by automaton\n"
    " - end\t\t\tClose the program\n"
    "Please enter an operation. If applicable, you can immediately provide\n"
    "an argument for the operation:"
)


def verdict(accepted: bool) -> str:
    return "match" if accepted else "no match"


class Shell:
    """
    A line oriented command loop holding the current automaton

    Commands
    --------
    exp <expression>    replace the current automaton
    mat <string>        test a string against the current automaton
    dot <filename>      write the current automaton as a digraph to a file
    end                 leave the loop
    """

    def __init__(self, stream: IO, quiet: bool, flags: RegexFlag = RegexFlag.NOFLAG):
        self.stream = stream
        self.quiet = quiet
        self.flags = flags
        self.nfa = NFA(flags=flags)

    def read_line(self) -> Optional[str]:
        line = self.stream.readline()
        if not line:
            return None
        # lines coming from windows terminals carry a carriage return
        return line.rstrip("\n").split("\r", 1)[0]

    def ask(self, prompt: str) -> str:
        click.echo(prompt, nl=False)
        return self.read_line() or ""

    def build(self, expression: str) -> None:
        try:
            self.nfa = NFA(expression, self.flags)
        except MalformedExpression as e:
            logger.debug("keeping %r", self.nfa.pattern)
            click.echo(f"Malformed expression: {e}")

    def export(self, filename: str) -> None:
        try:
            with click.open_file(filename, "w") as out:
                out.write(to_dot(self.nfa))
        except OSError as e:
            click.echo(f"Error while exporting .dot: {e}")

    def execute(self, operation: str) -> bool:
        """Run a single command, returning False once the loop should stop"""
        token, _, argument = operation.lstrip().partition(" ")
        match token:
            case "exp":
                if not argument.strip():
                    argument = self.ask("Please enter a regular expression:")
                self.build(argument)
            case "dot":
                filename = argument.strip() or self.ask(
                    "Please enter a filepath to write the output to:"
                )
                self.export(filename)
            case "mat":
                if not argument.strip():
                    argument = self.ask("Please enter a string to check:")
                click.echo(verdict(self.nfa.match(argument)))
            case "end":
                return False
            case _:
                click.echo(f"Unknown command: {token or '(none)'}")
        return True

    def run(self) -> None:
        if not self.quiet:
            click.echo(BANNER)
        while True:
            if not self.quiet:
                click.echo(MENU, nl=False)
            if (operation := self.read_line()) is None:
                return
            if not self.execute(operation):
                return


@click.group(name="thompson", help="Thompson NFA construction and matching tool")
@click.option(
    "--debug",
    "-g",
    is_flag=True,
    show_default=True,
    default=False,
    help="Turn on debug mode",
)
@click.pass_context
def entry(ctx: click.Context, debug: bool):
    flags = RegexFlag.NOFLAG
    if debug:
        flags |= RegexFlag.DEBUG
        logging.basicConfig(level=logging.DEBUG)
    ctx.obj = flags


@entry.command(name="match", help="Test strings against a regular expression")
@click.argument("pattern", type=click.STRING)
@click.option(
    "--text",
    "-t",
    "texts",
    type=click.STRING,
    multiple=True,
    help="String to test, '$' for the empty string",
)
@click.option(
    "--dot",
    "-o",
    type=click.File("w"),
    default=None,
    help="Write the automaton in dot-notation",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    show_default=True,
    default=False,
    help="Print the automaton as json",
)
@click.pass_obj
def match(
    flags: RegexFlag, pattern: str, texts: tuple[str, ...], dot: IO, as_json: bool
):
    try:
        nfa = NFA(pattern, flags)
    except MalformedExpression as e:
        raise click.BadParameter(str(e), param_hint="PATTERN") from e

    for text in texts:
        click.echo(f"{text}\t{verdict(nfa.match(text))}")
    if as_json:
        click.echo(to_json(nfa, indent=4))
    if dot is not None:
        # click closes the file once the command returns
        dot.write(to_dot(nfa))


@entry.command(name="shell", help="Read exp/mat/dot/end commands line by line")
@click.option(
    "--input-file",
    "-i",
    type=click.File(),
    default="-",
    help="Input file, stdin by default",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    show_default=True,
    default=False,
    help="Do not print the banner and the menu",
)
@click.pass_obj
def shell(flags: RegexFlag, input_file: IO, quiet: bool):
    Shell(input_file, quiet, flags).run()


if __name__ == "__main__":
    entry()
