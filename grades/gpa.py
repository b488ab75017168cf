"""
GPA calculation over a student's exam records.

Records are grouped by (semester, year) in order of first appearance; no
sorting is applied, so callers control the output order through the order
of the records they pass in. Sums are kept as exact Decimals and only the
final division is rounded (half-up, 2 places).

Records with zero or negative credit hours still open or extend their
semester group and count as a course, but add nothing to either the
credit-hour total or the grade-point total. A group (or a whole report)
without credit hours has a GPA of 0.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Tuple, Union

TWO_PLACES = Decimal('0.01')
ZERO = Decimal('0')

Number = Union[Decimal, int, float, str]


@dataclass(frozen=True)
class ExamRecordInput:
    semester: str
    year: int
    grade_points: Optional[Number]
    credit_hours: int


@dataclass(frozen=True)
class GPASemesterSummary:
    semester: str
    year: int
    total_credit_hours: int
    total_grade_points: Decimal
    semester_gpa: Decimal
    course_count: int

    def as_dict(self):
        return {
            'semester': self.semester,
            'year': self.year,
            'total_credit_hours': self.total_credit_hours,
            'total_grade_points': _round(self.total_grade_points),
            'semester_gpa': self.semester_gpa,
            'course_count': self.course_count,
        }


@dataclass(frozen=True)
class GPAReport:
    semesters: Tuple[GPASemesterSummary, ...]
    cumulative_credit_hours: int
    cumulative_grade_points: Decimal
    cumulative_gpa: Decimal

    def as_dict(self):
        return {
            'semesters': [summary.as_dict() for summary in self.semesters],
            'cumulative_credit_hours': self.cumulative_credit_hours,
            'cumulative_grade_points': _round(self.cumulative_grade_points),
            'cumulative_gpa': self.cumulative_gpa,
        }


def _round(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def _to_decimal(value: Optional[Number]) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _gpa(points: Decimal, credits: int) -> Decimal:
    if credits <= 0:
        return _round(ZERO)
    return _round(points / Decimal(credits))


def calculate_gpa(records: Iterable[ExamRecordInput]) -> GPAReport:
    # key -> [credit hours, grade points, course count]
    groups = {}
    for record in records:
        key = (record.semester, record.year)
        totals = groups.setdefault(key, [0, ZERO, 0])
        totals[2] += 1
        if record.credit_hours <= 0:
            continue
        totals[0] += record.credit_hours
        totals[1] += _to_decimal(record.grade_points) * record.credit_hours

    summaries = []
    cumulative_credits = 0
    cumulative_points = ZERO
    for (semester, year), (credits, points, count) in groups.items():
        summaries.append(GPASemesterSummary(
            semester=semester,
            year=year,
            total_credit_hours=credits,
            total_grade_points=points,
            semester_gpa=_gpa(points, credits),
            course_count=count,
        ))
        cumulative_credits += credits
        cumulative_points += points

    return GPAReport(
        semesters=tuple(summaries),
        cumulative_credit_hours=cumulative_credits,
        cumulative_grade_points=cumulative_points,
        cumulative_gpa=_gpa(cumulative_points, cumulative_credits),
    )
