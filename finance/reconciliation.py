"""
Tuition reconciliation: which semesters of a target year a student has paid.

A semester is identified by its key "{semester}-{year}". Keys are compared as
exact, case-sensitive strings. Paid keys come from every payment passed in,
whatever its year; the amount total is likewise unfiltered, so callers that
want a year-bounded view filter the payments before calling `reconcile`.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Tuple, Union

ZERO = Decimal('0')

Number = Union[Decimal, int, float, str]


@dataclass(frozen=True)
class TuitionPaymentInput:
    semester: str
    year: int
    amount: Number


@dataclass(frozen=True)
class SemesterReconciliation:
    paid_semester_keys: Tuple[str, ...]
    all_semester_keys_for_year: Tuple[str, ...]
    unpaid_semester_keys: Tuple[str, ...]
    total_paid_amount: Decimal

    def as_dict(self):
        return {
            'paid_semesters': list(self.paid_semester_keys),
            'all_semesters_for_year': list(self.all_semester_keys_for_year),
            'unpaid_semesters': list(self.unpaid_semester_keys),
            'total_paid': self.total_paid_amount,
        }


def semester_key(semester: str, year: int) -> str:
    return f"{semester}-{year}"


def _unique(keys: Iterable[str]) -> Tuple[str, ...]:
    # dict keeps first-seen order
    return tuple(dict.fromkeys(keys))


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def reconcile(payments: Iterable[TuitionPaymentInput],
              active_semester_names: Iterable[str],
              target_year: int) -> SemesterReconciliation:
    payments = list(payments)

    paid = _unique(semester_key(p.semester, p.year) for p in payments)
    owed = _unique(semester_key(name, target_year) for name in active_semester_names)
    paid_lookup = set(paid)
    unpaid = tuple(key for key in owed if key not in paid_lookup)
    total = sum((_to_decimal(p.amount) for p in payments), ZERO)

    return SemesterReconciliation(
        paid_semester_keys=paid,
        all_semester_keys_for_year=owed,
        unpaid_semester_keys=unpaid,
        total_paid_amount=total,
    )
