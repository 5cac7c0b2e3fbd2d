"""
Grade solver: weighted averages and the grade needed to reach one.
"""

from .calculator import Calculator, ExpressionCalculator, WeightedTerm, WeightingParser
from .fraction import ONE, Fraction
from .grade import Grade, GradeJSONFactory

__all__ = [
    "Calculator",
    "ExpressionCalculator",
    "WeightedTerm",
    "WeightingParser",
    "Fraction",
    "ONE",
    "Grade",
    "GradeJSONFactory",
]
