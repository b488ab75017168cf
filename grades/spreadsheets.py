"""
Exam mark spreadsheets: the downloadable template and row parsing for the
bulk upload.
"""
import re
from collections import namedtuple
from decimal import Decimal, InvalidOperation
from zipfile import BadZipFile

from openpyxl import Workbook, load_workbook
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import InvalidFileException

from .grading import MARK_COMPONENTS

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

IDENTITY_HEADERS = ['Student ID', 'First Name', 'Last Name']

STUDENT_ID_HEADER = re.compile(r'student\s*id', re.IGNORECASE)

# Characters Excel rejects in sheet titles
INVALID_TITLE_CHARS = re.compile(r'[\\/?*\[\]:]')

ExamSheetRow = namedtuple('ExamSheetRow', ['number', 'student_id', 'marks', 'error'])


class SpreadsheetError(ValueError):
    """The uploaded file is not a usable exam sheet."""


def template_headers():
    return IDENTITY_HEADERS + [
        f'{component.label} (/{component.max_marks})' for component in MARK_COMPONENTS
    ]


def build_template(students, title):
    """
    Workbook with the header row and one blank mark row per student
    """
    wb = Workbook()
    ws = wb.active
    ws.title = INVALID_TITLE_CHARS.sub(' ', title)[:31]

    headers = template_headers()
    ws.append(headers)
    for student in students:
        ws.append([student.student_id, student.first_name, student.last_name] + [None] * len(MARK_COMPONENTS))

    for index, header in enumerate(headers, start=1):
        ws.column_dimensions[get_column_letter(index)].width = max(len(header) + 2, 14)

    return wb


def _column_index(headers, matches):
    for index, header in enumerate(headers):
        if matches(header):
            return index
    return None


def _component_columns(headers):
    """Column index of each mark component, matched on the label's first word"""
    columns = {}
    for component in MARK_COMPONENTS:
        keyword = component.label.split()[0].lower()
        columns[component.key] = _column_index(headers, lambda header: keyword in header.lower())
    return columns


def _cell(row, index):
    if index is None or index >= len(row):
        return None
    return row[index]


def _parse_mark(value):
    if value is None or (isinstance(value, str) and not value.strip()):
        return Decimal('0')
    if isinstance(value, bool):
        raise InvalidOperation(value)
    mark = Decimal(str(value).strip())
    if not mark.is_finite():
        raise InvalidOperation(value)
    return mark


def _parse_row(number, row, student_column, mark_columns):
    student_id = str(_cell(row, student_column) or '').strip()
    marks = {}
    for component in MARK_COMPONENTS:
        try:
            value = _parse_mark(_cell(row, mark_columns[component.key]))
        except InvalidOperation:
            return ExamSheetRow(number, student_id, None, f'Row {number}: {component.label} must be a number')
        if value < 0 or value > component.max_marks:
            return ExamSheetRow(
                number, student_id, None,
                f'Row {number}: {component.label} must be 0-{component.max_marks}'
            )
        marks[component.key] = value
    return ExamSheetRow(number, student_id, marks, None)


def read_exam_sheet(uploaded_file):
    """
    Parse the first sheet of an uploaded .xlsx file into ExamSheetRow
    tuples. Row numbers match the spreadsheet (the header is row 1); rows
    without a student ID are skipped. Missing mark cells count as 0.
    """
    try:
        wb = load_workbook(uploaded_file, read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, KeyError):
        raise SpreadsheetError('Could not read the spreadsheet. Upload an .xlsx file.')

    try:
        rows = [tuple(row) for row in wb.active.iter_rows(values_only=True)]
    finally:
        wb.close()

    if len(rows) < 2:
        raise SpreadsheetError('Excel file must have a header row and at least one student row')

    headers = [str(header or '').strip() for header in rows[0]]
    student_column = _column_index(headers, STUDENT_ID_HEADER.search)
    if student_column is None:
        raise SpreadsheetError("Excel must contain a 'Student ID' column")
    mark_columns = _component_columns(headers)

    parsed = []
    for number, row in enumerate(rows[1:], start=2):
        if not any(value not in (None, '') for value in row):
            continue
        sheet_row = _parse_row(number, row, student_column, mark_columns)
        if sheet_row.student_id:
            parsed.append(sheet_row)
    return parsed
