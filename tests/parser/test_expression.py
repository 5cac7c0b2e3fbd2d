"""Tests for the expression parser and MathExpression."""

import io

import pytest

from textparse.core.errors import ErrorKind, ParseError
from textparse.parser import (
    Constant,
    Context,
    Cursor,
    Expression,
    ExpressionParser,
    Function,
    FunctionCall,
    Group,
    MathExpression,
    Operator,
    Variable,
)


def value_of(text: str) -> float:
    return MathExpression(text).value()


class TestArithmetic:
    """Test evaluation of literal arithmetic."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("5+2*3", 11.0),
            ("(5+2)*3", 21.0),
            ("10-4-3", 3.0),
            ("8/2/2", 2.0),
            ("2^3", 8.0),
            ("2*3^2", 36.0),
            ("1 + 2 * 3 - 4 / 2", 5.0),
            ("  5 +  2 ", 7.0),
            ("5 - -3", 8.0),
            ("0.5 * 4", 2.0),
        ],
    )
    def test_values(self, text, expected):
        """Test values respecting the two priority tiers."""
        assert value_of(text) == pytest.approx(expected)

    def test_extra_parentheses_do_not_change_value(self):
        """Test that wrapping a parenthesized sub-expression again is a no-op."""
        assert value_of("((5+2))*3") == value_of("(5+2)*3")
        assert value_of("(((1 - 4)))") == value_of("(1 - 4)")

    def test_literal_arithmetic_folds_to_constant(self):
        """Test that an expression without variables folds to one number."""
        assert MathExpression("5+2*3").root == Constant(11.0)

    @pytest.mark.parametrize("text,expected", [("+5", 5.0), ("-5", -5.0)])
    def test_signed_constants(self, text, expected):
        """Test that a signed number is a single Constant."""
        assert MathExpression(text).root == Constant(expected)

    def test_divide_by_zero_while_folding(self):
        """Test that literal division by zero fails at parse time."""
        with pytest.raises(ParseError) as exc_info:
            MathExpression("1/0")
        assert exc_info.value.kind is ErrorKind.DIVIDE_BY_ZERO

    def test_divide_by_zero_at_evaluation(self):
        """Test that division by zero through a variable fails on evaluation."""
        expr = MathExpression("x/0")
        with pytest.raises(ParseError) as exc_info:
            expr.value()
        assert exc_info.value.kind is ErrorKind.DIVIDE_BY_ZERO


class TestVariables:
    """Test variables, coefficients and rebinding."""

    def test_coefficient_round_trip(self):
        """Test binding a variable with a coefficient."""
        expr = MathExpression("3x+2")
        assert expr.variables == ["x"]
        expr.set_variable("x", 4.0)
        assert expr.value() == 14.0
        expr.set_variable("x", 0.0)
        assert expr.value() == 2.0

    def test_unbound_variable_is_zero(self):
        """Test that an unbound variable evaluates to zero."""
        assert value_of("x + 1") == 1.0

    def test_repeated_variable(self):
        """Test that every occurrence of a name is rebound."""
        expr = MathExpression("x + x * 2")
        assert expr.variables == ["x"]
        expr.set_variable("x", 3.0)
        assert expr.value() == 9.0

    def test_variable_order(self):
        """Test that names are listed in order of first appearance."""
        expr = MathExpression("b * a + c - a")
        assert expr.variables == ["b", "a", "c"]

    def test_identifier_characters(self):
        """Test identifiers with underscores and digits."""
        expr = MathExpression("_rate2 * 10")
        expr.set_variable("_rate2", 0.5)
        assert expr.value() == 5.0

    def test_unknown_name_ignored(self):
        """Test that binding an absent name changes nothing."""
        expr = MathExpression("2x")
        expr.set_variable("y", 5.0)
        assert expr.value() == 0.0

    def test_variable_set_fixed_at_parse_time(self):
        """Test that rebinding does not change the variable names."""
        expr = MathExpression("x + y")
        expr.set_variable("x", 1.0)
        assert expr.variables == ["x", "y"]
        assert expr.has_variable()
        assert not MathExpression("1 + 2").has_variable()

    def test_variables_in_groups_and_calls(self):
        """Test rebinding inside parentheses and function arguments."""
        expr = MathExpression("2 * (x + 1) + root(y)")
        expr.set_variable("x", 2.0)
        expr.set_variable("y", 16.0)
        assert expr.value() == 10.0

    def test_exponent_form_is_coefficient_and_variable(self):
        """Test that terms do not read exponent notation."""
        expr = MathExpression("1.5e2")
        assert expr.variables == ["e2"]
        assert isinstance(expr.root, Variable)
        assert expr.root.coefficient == 1.5


class TestTreeShape:
    """Test the structure of parsed trees."""

    def test_folding_stops_at_first_variable(self):
        """Test that folding only applies before a variable is seen."""
        expr = MathExpression("1 + 2 + x + 3 + 4")
        assert isinstance(expr.root, Expression)
        assert expr.root.components[0] == Constant(3.0)
        assert len(expr.root.components) == 4
        assert expr.root.operators == (Operator.PLUS,) * 3
        assert expr.value() == 10.0

    def test_high_tier_nested_in_low_tier(self):
        """Test that precedence is encoded by nesting."""
        root = MathExpression("x + 2 * y").root
        assert root.operators == (Operator.PLUS,)
        product = root.components[1]
        assert isinstance(product, Expression)
        assert product.operators == (Operator.MULTIPLY,)

    def test_single_unit_is_not_wrapped(self):
        """Test that a lone term is returned as itself."""
        root = MathExpression("3x").root
        assert isinstance(root, Variable)
        assert root.coefficient == 3.0

    def test_group(self):
        """Test that parentheses around a variable make a Group."""
        root = MathExpression("(x + 1)").root
        assert isinstance(root, Group)
        assert root.variables == ("x",)

    def test_function_call(self):
        """Test that a call resolves its function."""
        root = MathExpression("root(x, 3)").root
        assert isinstance(root, FunctionCall)
        assert root.name == "root"
        assert len(root.args) == 2

    def test_expression_needs_operator_per_gap(self):
        """Test that an expression needs one operator fewer than components."""
        with pytest.raises(ValueError):
            Expression((Constant(1.0), Constant(2.0)), ())


class TestFunctions:
    """Test function calls."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("root(9)", 3.0),
            ("root(8,3)", 2.0),
            ("root( 8 , 3 )", 2.0),
            ("sin(0)", 0.0),
            ("cos(0) + 1", 2.0),
            ("root(root(16))", 2.0),
            ("2root(9)", 6.0),
            ("deg(rad(90))", 90.0),
            ("root(9) * 2 + 1", 7.0),
        ],
    )
    def test_calls(self, text, expected):
        """Test evaluating built-in functions."""
        assert value_of(text) == pytest.approx(expected)

    def test_unknown_function(self):
        """Test that an unregistered name raises UNKNOWN_FUNCTION."""
        with pytest.raises(ParseError) as exc_info:
            MathExpression("foo(1)")
        assert exc_info.value.kind is ErrorKind.UNKNOWN_FUNCTION

    @pytest.mark.parametrize("text", ["sin(1, 2)", "root(1, 2, 3)"])
    def test_argument_count(self, text):
        """Test that arity violations raise ARGUMENT_COUNT_OUT_OF_RANGE."""
        with pytest.raises(ParseError) as exc_info:
            MathExpression(text)
        assert exc_info.value.kind is ErrorKind.ARGUMENT_COUNT_OUT_OF_RANGE

    def test_custom_registry(self, registry):
        """Test calling a function from an injected registry."""
        registry.register(Function("double", 1, 1, lambda x: 2 * x))
        context = Context("custom", functions=registry)
        assert MathExpression("double(4) + 1", context).value() == 9.0

    def test_default_registry_not_shared(self):
        """Test that a custom registration does not leak into defaults."""
        with pytest.raises(ParseError):
            MathExpression("double(4)")


class TestErrors:
    """Test malformed expressions."""

    @pytest.mark.parametrize(
        "text,kind",
        [
            ("5 + ", ErrorKind.NO_VALID_TERM),
            ("", ErrorKind.NO_VALID_TERM),
            ("*5", ErrorKind.NO_VALID_TERM),
            ("(5+2", ErrorKind.EXPECTED_CHAR),
            ("root(9", ErrorKind.EXPECTED_CHAR),
            ("5 $ 3", ErrorKind.UNEXPECTED_CHARACTER),
            ("5+2)", ErrorKind.UNEXPECTED_CHARACTER),
            ("2(3)", ErrorKind.UNEXPECTED_CHARACTER),
            ("1.2.3", ErrorKind.MULTIPLE_DECIMAL_POINTS),
        ],
    )
    def test_syntax_errors(self, text, kind):
        """Test that malformed input raises the matching ParseError."""
        with pytest.raises(ParseError) as exc_info:
            MathExpression(text)
        assert exc_info.value.kind is kind

    def test_error_message(self):
        """Test that errors carry a readable message."""
        with pytest.raises(ParseError, match=r"Expected '\)'"):
            MathExpression("(5+2")


class TestSources:
    """Test the accepted input sources."""

    def test_stream(self):
        """Test parsing from a text stream."""
        assert MathExpression(io.StringIO("4*4")).value() == 16.0

    def test_shared_cursor_left_after_expression(self):
        """Test that a caller's cursor is left at the first unused character."""
        cursor = Cursor.from_string("5+2) rest")
        assert MathExpression(cursor).value() == 7.0
        assert cursor.peek() == ")"

    def test_parser_on_cursor(self):
        """Test using ExpressionParser directly."""
        parser = ExpressionParser(Cursor.from_string("x*2, 3"))
        component = parser.parse()
        assert component.variables == ("x",)
        assert parser.cursor.is_next(",")

    def test_context_variable_defaults(self):
        """Test that context variables are bound after parsing."""
        context = Context("physics", variables={"g": 9.81})
        expr = MathExpression("2g + h", context)
        assert expr.value() == pytest.approx(19.62)
        expr.set_variable("g", 10.0)
        assert expr.value() == 20.0

    @pytest.mark.parametrize("text", ["5 + $ 1 2 3", "(5+2", "1 2", "nope(1)"])
    def test_stream_closed_on_error(self, text):
        """Test that a stream is released when parsing it fails."""
        stream = io.StringIO(text)
        with pytest.raises(ParseError):
            MathExpression(stream)
        assert stream.closed

    def test_shared_cursor_open_on_error(self):
        """Test that a caller's cursor is not closed by a failed parse."""
        stream = io.StringIO("5 + $ rest")
        with pytest.raises(ParseError):
            MathExpression(Cursor(stream))
        assert not stream.closed


class TestRendering:
    """Test rendering trees back to text."""

    @pytest.mark.parametrize(
        "text,rendered",
        [
            ("3x+2", "3x + 2"),
            ("2*(x+1)", "2 * (x + 1)"),
            ("root(x,3)", "root(x, 3)"),
            ("5+2*3", "11"),
            ("x/4", "x / 4"),
            ("0.5y", "0.5y"),
        ],
    )
    def test_render(self, text, rendered):
        """Test str() of parsed expressions."""
        assert str(MathExpression(text)) == rendered

    def test_rendered_text_reparses_to_same_value(self):
        """Test that rendered text evaluates the same."""
        expr = MathExpression("2*(x+1) - root(y, 2)^2")
        expr.set_variable("x", 3.0)
        expr.set_variable("y", 4.0)
        again = MathExpression(str(expr))
        again.set_variable("x", 3.0)
        again.set_variable("y", 4.0)
        assert again.value() == pytest.approx(expr.value())
