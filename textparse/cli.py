"""Command line interface for textparse."""

from __future__ import annotations

import argparse
import io
import sys
from pathlib import Path

from pydantic import ValidationError

from .core.config import get_settings
from .core.errors import ErrorKind, GradeError, InvalidArgumentError, ParseError
from .core.logging import get_logger, setup_logging
from .grade import ExpressionCalculator
from .json import parse_json
from .parser import Context, Cursor, MathExpression
from .parser.evaluation import format_number

logger = get_logger(__name__)


def _assignment(text: str) -> tuple[str, float]:
    name, sep, value = text.partition("=")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {text!r}")
    try:
        return name.strip(), float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from None


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="textparse",
        description="Evaluate expressions, reformat JSON and solve weighted averages.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    evaluate = commands.add_parser("eval", help="Evaluate an arithmetic expression.")
    evaluate.add_argument("expression", help="Expression such as '3x + 2'.")
    evaluate.add_argument(
        "--set",
        dest="assignments",
        type=_assignment,
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Bind a variable (repeatable).",
    )
    evaluate.add_argument(
        "--context",
        type=Path,
        help="YAML context with extra functions and variable defaults.",
    )
    evaluate.add_argument(
        "--tree",
        action="store_true",
        help="Also print the parsed expression and its variables.",
    )

    json = commands.add_parser("json", help="Parse and re-serialize a JSON document.")
    json.add_argument("source", help="File path, URL, or '-' for stdin.")
    json.add_argument(
        "--indent",
        action="store_true",
        help="Write one member per line, indented with tabs.",
    )

    grade = commands.add_parser("grade", help="Weighted average from a weighting expression.")
    grade.add_argument("expression", help="Weighting expression such as '(2a + 3b)/5'.")
    grade.add_argument(
        "--set",
        dest="assignments",
        type=_assignment,
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Set an obtained grade (repeatable).",
    )
    grade.add_argument("--solve", metavar="NAME", help="Grade to solve for.")
    grade.add_argument("--average", type=float, help="Average to reach (with --solve).")
    return parser


def _run_eval(args: argparse.Namespace) -> int:
    context_file = args.context or get_settings().CONTEXT_FILE
    context = Context.from_yaml(context_file) if context_file else Context.default()

    expression = MathExpression(args.expression, context)
    for name, value in args.assignments:
        expression.set_variable(name, value)

    if args.tree:
        print(expression)
        print(f"variables: {', '.join(expression.variables) or '-'}")
    print(format_number(expression.value()))
    return 0


def _open_source(source: str) -> Cursor:
    if source == "-":
        return Cursor(io.StringIO(sys.stdin.read()))
    if "://" in source:
        return Cursor.from_url(source)
    return Cursor(open(source, "r", encoding=get_settings().FILE_ENCODING))


def _run_json(args: argparse.Namespace) -> int:
    cursor = _open_source(args.source)
    try:
        document = parse_json(cursor)
    finally:
        cursor.close()
    if document is None:
        print("Error: input is neither a JSON object nor an array", file=sys.stderr)
        return 1

    print(document.to_string(indent=args.indent))
    return 0


def _run_grade(args: argparse.Namespace) -> int:
    calculator = ExpressionCalculator(args.expression)
    for name, value in args.assignments:
        grade = calculator.get_grade(name)
        if grade is None:
            raise GradeError(ErrorKind.INVALID_GRADE, f"Invalid grade name '{name}'", name=name)
        grade.set_grade(value)

    if args.solve:
        print(format_number(calculator.calculate_grade(args.solve, args.average)))
    else:
        print(format_number(calculator.calculate_average()))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command == "grade" and args.solve and args.average is None:
        parser.error("--solve requires --average")

    setup_logging(get_settings(), level="DEBUG" if args.verbose else None)

    handlers = {"eval": _run_eval, "json": _run_json, "grade": _run_grade}
    try:
        return handlers[args.command](args)
    except (ParseError, InvalidArgumentError, ValidationError, OSError) as exc:
        logger.debug("%s failed", args.command, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
