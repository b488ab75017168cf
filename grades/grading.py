"""
Grading scale: mark components, totals and letter grades.
"""
from collections import namedtuple
from decimal import Decimal

MarkComponent = namedtuple('MarkComponent', ['key', 'label', 'max_marks'])
GradeInfo = namedtuple('GradeInfo', ['grade', 'grade_points'])

MARK_COMPONENTS = (
    MarkComponent('mid_exam', 'Mid Exam', 20),
    MarkComponent('final_exam', 'Final Exam', 40),
    MarkComponent('assessment', 'Assessment', 10),
    MarkComponent('project', 'Project', 10),
    MarkComponent('assignment', 'Assignment', 10),
    MarkComponent('presentation', 'Presentation', 10),
)

# (minimum total, letter, grade points), highest first
GRADE_SCALE = (
    (90, 'A', Decimal('4.0')),
    (85, 'A-', Decimal('3.7')),
    (80, 'B+', Decimal('3.3')),
    (75, 'B', Decimal('3.0')),
    (70, 'B-', Decimal('2.7')),
    (65, 'C+', Decimal('2.3')),
    (60, 'C', Decimal('2.0')),
    (50, 'D', Decimal('1.0')),
    (0, 'F', Decimal('0.0')),
)


def _as_decimal(value):
    if value is None or value == '':
        return Decimal('0')
    return Decimal(str(value))


def calculate_total(marks):
    """
    Sum the mark components found in `marks` (a dict keyed by component);
    missing or empty components count as 0.
    """
    return sum(
        (_as_decimal(marks.get(component.key)) for component in MARK_COMPONENTS),
        Decimal('0')
    )


def get_grade_info(total):
    total = _as_decimal(total)
    for minimum, grade, points in GRADE_SCALE:
        if total >= minimum:
            return GradeInfo(grade, points)
    return GradeInfo('F', Decimal('0.0'))
