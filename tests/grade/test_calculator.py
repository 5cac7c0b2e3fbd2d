"""Tests for grades and the weighted average calculators."""

import io

import pytest

from textparse.core.errors import ErrorKind, GradeError, JSONError, ParseError
from textparse.grade import Calculator, ExpressionCalculator, Grade, GradeJSONFactory
from textparse.json import JSONArray, JSONObject


def weightings(calculator: Calculator) -> dict[str, int]:
    return {grade.name: grade.weighting for grade in calculator.grades}


class TestGrade:
    """Test the Grade model."""

    def test_unset_by_default(self):
        """Test that a new grade has no value."""
        grade = Grade(name="a", weighting=2)
        assert not grade.is_set
        assert grade.value is None

    def test_set_and_reset(self):
        """Test setting and clearing a grade."""
        grade = Grade(name="a")
        grade.set_grade(7)
        assert grade.is_set
        assert grade.value == 7.0
        grade.reset()
        assert not grade.is_set

    def test_str_is_json(self):
        """Test the JSON string form."""
        grade = Grade(name="a", weighting=2)
        assert str(grade) == '{"name":"a","weighting":2,"value":null}'
        grade.set_grade(7.5)
        assert str(grade) == '{"name":"a","weighting":2,"value":7.5}'


class TestGradeJSONFactory:
    """Test converting grades to and from JSON."""

    def test_create_instance(self):
        """Test reading a set grade."""
        json = JSONObject('{"name": "exam", "weighting": 3, "value": 6.5}')
        grade = GradeJSONFactory().create_instance(json)
        assert grade.name == "exam"
        assert grade.weighting == 3
        assert grade.value == 6.5

    def test_create_instance_null_value(self):
        """Test that a null value leaves the grade unset."""
        json = JSONObject('{"name": "exam", "weighting": 3, "value": null}')
        assert not GradeJSONFactory().create_instance(json).is_set

    def test_round_trip(self):
        """Test that a grade survives conversion to JSON and back."""
        factory = GradeJSONFactory()
        grade = Grade(name="a", weighting=4, value=8.0)
        assert factory.create_instance(factory.create_json(grade)) == grade

    def test_array_rejected(self):
        """Test that only objects convert to grades."""
        with pytest.raises(JSONError) as exc_info:
            GradeJSONFactory().create_instance(JSONArray())
        assert exc_info.value.kind is ErrorKind.WRONG_TYPE

    def test_missing_name(self):
        """Test that a missing name is reported."""
        with pytest.raises(JSONError) as exc_info:
            GradeJSONFactory().create_instance(JSONObject('{"weighting": 1}'))
        assert exc_info.value.kind is ErrorKind.MISSING_KEY


class TestCalculator:
    """Test averages over a list of grades."""

    @pytest.fixture
    def calculator(self):
        return Calculator([Grade(name="a", weighting=2), Grade(name="b", weighting=3)])

    def test_get_grade(self, calculator):
        """Test looking grades up by name."""
        assert calculator.get_grade("a").weighting == 2
        assert calculator.get_grade("z") is None

    def test_average_nothing_set(self, calculator):
        """Test that no set grades average to zero."""
        assert calculator.calculate_average() == 0.0

    def test_weighted_average(self, calculator):
        """Test the weighted mean of set grades."""
        calculator.get_grade("a").set_grade(8.0)
        calculator.get_grade("b").set_grade(6.0)
        assert calculator.calculate_average() == pytest.approx(6.8)

    def test_average_ignores_unset(self, calculator):
        """Test that unset grades do not count."""
        calculator.get_grade("a").set_grade(8.0)
        assert calculator.calculate_average() == 8.0

    def test_calculate_grade(self, calculator):
        """Test the grade needed to reach an average."""
        calculator.get_grade("a").set_grade(8.0)
        needed = calculator.calculate_grade("b", 7.0)
        assert needed == pytest.approx(19 / 3)
        calculator.get_grade("b").set_grade(needed)
        assert calculator.calculate_average() == pytest.approx(7.0)

    def test_calculate_grade_excludes_own_value(self, calculator):
        """Test that a target grade that is already set is not counted twice."""
        calculator.get_grade("a").set_grade(8.0)
        calculator.get_grade("b").set_grade(1.0)
        assert calculator.calculate_grade("b", 7.0) == pytest.approx(19 / 3)

    def test_calculate_grade_by_object(self, calculator):
        """Test passing the grade itself."""
        grade = calculator.get_grade("a")
        assert calculator.calculate_grade(grade, 5.0) == 5.0

    def test_unknown_grade(self, calculator):
        """Test that an unknown name raises INVALID_GRADE."""
        with pytest.raises(GradeError) as exc_info:
            calculator.calculate_grade("z", 5.0)
        assert exc_info.value.kind is ErrorKind.INVALID_GRADE


class TestExpressionCalculator:
    """Test grades derived from weighting expressions."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("(2a + 3b)/5", {"a": 2, "b": 3}),
            ("(a + b/2 + c/2)/2", {"a": 2, "b": 1, "c": 1}),
            ("(a + b)/2", {"a": 1, "b": 1}),
            ("(2*3a + 4b)/10", {"a": 3, "b": 2}),
            ("(a + b)2/4", {"a": 1, "b": 1}),
            ("((a + b)/2 + c)/2", {"a": 1, "b": 1, "c": 2}),
            ("(SE1 + 2 SE2)/3", {"SE1": 1, "SE2": 2}),
            ("exam", {"exam": 1}),
        ],
    )
    def test_weightings(self, text, expected):
        """Test the integer weightings found for each grade."""
        assert weightings(ExpressionCalculator(text)) == expected

    def test_repeated_names_merged(self):
        """Test that a name used twice gets the summed weighting."""
        assert weightings(ExpressionCalculator("(a + a + b)/3")) == {"a": 2, "b": 1}

    def test_grade_order(self):
        """Test that grades keep the order they appear in."""
        calculator = ExpressionCalculator("(c + a + b)/3")
        assert [grade.name for grade in calculator.grades] == ["c", "a", "b"]

    @pytest.mark.parametrize("text", ["(a + b)", "(a + b)/3", "2a"])
    def test_not_an_average(self, text):
        """Test that weightings must add up to one."""
        with pytest.raises(GradeError) as exc_info:
            ExpressionCalculator(text)
        assert exc_info.value.kind is ErrorKind.INVALID_AVERAGE_EXPRESSION

    def test_missing_variable(self):
        """Test that a term without a grade name is rejected."""
        with pytest.raises(GradeError) as exc_info:
            ExpressionCalculator("(a + 3)/2")
        assert exc_info.value.kind is ErrorKind.EXPECTED_VARIABLE

    def test_missing_bracket(self):
        """Test that an unclosed group is rejected."""
        with pytest.raises(GradeError) as exc_info:
            ExpressionCalculator("(a + b/2")
        assert exc_info.value.kind is ErrorKind.EXPECTED_CHAR

    def test_trailing_input(self):
        """Test that text after the expression is rejected."""
        with pytest.raises(ParseError) as exc_info:
            ExpressionCalculator("a b")
        assert exc_info.value.kind is ErrorKind.UNEXPECTED_CHARACTER

    @pytest.mark.parametrize("text", ["(a + 3)/2 rest", "(a + b c", "a b", "(a + b)1.2.3"])
    def test_stream_closed_on_error(self, text):
        """Test that a stream is released when the expression is malformed."""
        stream = io.StringIO(text)
        with pytest.raises(ParseError):
            ExpressionCalculator(stream)
        assert stream.closed

    def test_solve(self):
        """Test solving for a grade from an expression."""
        calculator = ExpressionCalculator("(2a + 3b)/5")
        calculator.get_grade("a").set_grade(8.0)
        assert calculator.calculate_grade("b", 7.0) == pytest.approx(19 / 3)
