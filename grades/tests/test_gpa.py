from decimal import Decimal

from django.test import SimpleTestCase

from grades.gpa import ExamRecordInput, GPAReport, calculate_gpa


def record(semester, year, grade_points, credit_hours):
    return ExamRecordInput(semester=semester, year=year, grade_points=grade_points, credit_hours=credit_hours)


class CalculateGPATests(SimpleTestCase):
    def test_empty_input(self):
        report = calculate_gpa([])
        self.assertEqual(report.semesters, ())
        self.assertEqual(report.cumulative_gpa, Decimal('0'))
        self.assertEqual(report.cumulative_credit_hours, 0)
        self.assertEqual(report.cumulative_grade_points, Decimal('0'))

    def test_single_semester(self):
        report = calculate_gpa([
            record('Fall', 2025, Decimal('4.0'), 3),
            record('Fall', 2025, Decimal('3.0'), 2),
        ])
        self.assertEqual(len(report.semesters), 1)
        summary = report.semesters[0]
        self.assertEqual(summary.total_credit_hours, 5)
        self.assertEqual(summary.total_grade_points, Decimal('18'))
        self.assertEqual(summary.semester_gpa, Decimal('3.60'))
        self.assertEqual(summary.course_count, 2)
        self.assertEqual(report.cumulative_gpa, Decimal('3.60'))

    def test_cumulative_rounds_only_final_division(self):
        report = calculate_gpa([
            record('Fall', 2025, Decimal('4.0'), 3),
            record('Fall', 2025, Decimal('3.0'), 2),
            record('Spring', 2025, Decimal('3.0'), 4),
        ])
        self.assertEqual(report.cumulative_credit_hours, 9)
        self.assertEqual(report.cumulative_grade_points, Decimal('30'))
        self.assertEqual(report.cumulative_gpa, Decimal('3.33'))

    def test_rounds_half_up(self):
        # (8.1 + 2.6) / 4 == 2.675
        report = calculate_gpa([
            record('Fall', 2025, Decimal('2.7'), 3),
            record('Fall', 2025, Decimal('2.6'), 1),
        ])
        self.assertEqual(report.semesters[0].semester_gpa, Decimal('2.68'))

    def test_groups_in_order_of_first_appearance(self):
        report = calculate_gpa([
            record('Spring', 2026, Decimal('3.0'), 3),
            record('Fall', 2025, Decimal('4.0'), 3),
            record('Spring', 2026, Decimal('2.0'), 3),
            record('Summer', 2025, Decimal('1.0'), 2),
        ])
        keys = [(s.semester, s.year) for s in report.semesters]
        self.assertEqual(keys, [('Spring', 2026), ('Fall', 2025), ('Summer', 2025)])
        self.assertEqual(report.semesters[0].course_count, 2)
        self.assertEqual(report.semesters[0].semester_gpa, Decimal('2.50'))

    def test_same_label_different_year_is_separate_group(self):
        report = calculate_gpa([
            record('Fall', 2024, Decimal('4.0'), 3),
            record('Fall', 2025, Decimal('2.0'), 3),
        ])
        self.assertEqual(len(report.semesters), 2)

    def test_zero_credit_record_contributes_nothing(self):
        report = calculate_gpa([
            record('Fall', 2025, Decimal('4.0'), 0),
            record('Fall', 2025, Decimal('2.0'), 3),
        ])
        summary = report.semesters[0]
        self.assertEqual(summary.total_credit_hours, 3)
        self.assertEqual(summary.total_grade_points, Decimal('6.0'))
        self.assertEqual(summary.semester_gpa, Decimal('2.00'))
        self.assertEqual(summary.course_count, 2)

    def test_group_without_credits_has_zero_gpa(self):
        report = calculate_gpa([
            record('Summer', 2025, Decimal('4.0'), 0),
            record('Summer', 2025, Decimal('3.0'), -2),
        ])
        summary = report.semesters[0]
        self.assertEqual(summary.total_credit_hours, 0)
        self.assertEqual(summary.semester_gpa, Decimal('0'))
        self.assertEqual(report.cumulative_gpa, Decimal('0'))

    def test_missing_grade_points_count_as_zero(self):
        report = calculate_gpa([
            record('Fall', 2025, None, 3),
            record('Fall', 2025, Decimal('4.0'), 3),
        ])
        self.assertEqual(report.semesters[0].semester_gpa, Decimal('2.00'))

    def test_accepts_float_and_string_points(self):
        report = calculate_gpa([
            record('Fall', 2025, 3.7, 3),
            record('Fall', 2025, '3.3', 3),
        ])
        self.assertEqual(report.semesters[0].semester_gpa, Decimal('3.50'))

    def test_is_deterministic(self):
        records = [
            record('Fall', 2025, Decimal('3.7'), 3),
            record('Spring', 2025, Decimal('2.3'), 4),
        ]
        first = calculate_gpa(records)
        second = calculate_gpa(records)
        self.assertIsInstance(first, GPAReport)
        self.assertEqual(first, second)
        self.assertEqual(first.as_dict(), second.as_dict())

    def test_accepts_generator(self):
        report = calculate_gpa(record('Fall', 2025, Decimal('4.0'), 3) for _ in range(2))
        self.assertEqual(report.semesters[0].course_count, 2)

    def test_as_dict(self):
        report = calculate_gpa([record('Fall', 2025, Decimal('3.0'), 3)])
        self.assertEqual(report.as_dict(), {
            'semesters': [{
                'semester': 'Fall',
                'year': 2025,
                'total_credit_hours': 3,
                'total_grade_points': Decimal('9.00'),
                'semester_gpa': Decimal('3.00'),
                'course_count': 1,
            }],
            'cumulative_credit_hours': 3,
            'cumulative_grade_points': Decimal('9.00'),
            'cumulative_gpa': Decimal('3.00'),
        })
