"""Named, weighted grades and their JSON form."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ..core.errors import ErrorKind, JSONError
from ..json import JSON, JSONObject

NAME = "name"
WEIGHTING = "weighting"
VALUE = "value"


class Grade(BaseModel):
    """
    A grade that counts `weighting` times towards an average.

    Attributes:
        name: Identifier used in the weighting expression
        weighting: Integer weight relative to the other grades
        value: The grade obtained, or None while unknown
    """

    model_config = ConfigDict(validate_assignment=True)

    name: str
    weighting: int = Field(default=1, ge=0)
    value: float | None = None

    @property
    def is_set(self) -> bool:
        return self.value is not None

    def set_grade(self, value: float) -> None:
        self.value = value

    def reset(self) -> None:
        self.value = None

    def __str__(self) -> str:
        return str(GradeJSONFactory().create_json(self))


class GradeJSONFactory:
    """Converts grades to and from {"name": ..., "weighting": ..., "value": ...}."""

    def create_json(self, grade: Grade) -> JSONObject:
        obj = JSONObject().set(NAME, grade.name).set(WEIGHTING, grade.weighting)
        if grade.is_set:
            obj.set(VALUE, grade.value)
        else:
            obj.set_null(VALUE)
        return obj

    def create_instance(self, json: JSON) -> Grade:
        """
        Raises:
            JSONError: If json is not an object with a name and a weighting
        """
        if not isinstance(json, JSONObject):
            raise JSONError(ErrorKind.WRONG_TYPE, "A grade must be a JSON object")

        grade = Grade(name=json.get_string(NAME), weighting=json.get_int(WEIGHTING))
        if json.has(VALUE) and not json.is_null(VALUE):
            grade.set_grade(json.get_float(VALUE))
        return grade
