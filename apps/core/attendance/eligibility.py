"""
Certificate eligibility rules.

Everything here is a pure function of its arguments: no ORM access, no
settings lookups, no module state. Services load rows, convert them into the
records below and call these functions, so every screen that needs an
eligibility answer gets the same one.

Two modalities exist:

- videoconference: live sessions with per-session attendance. A student is
  eligible when the attended percentage reaches ``ATTENDANCE_THRESHOLD``.
  Exceptional (mid-cycle) enrollment rebases the denominator to the classes
  held on or after the enrollment date.
- ead: self-paced access. A student is eligible with three recorded accesses
  falling in three distinct calendar months.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Union

from django.core.exceptions import ValidationError
from django.utils.dateparse import parse_date


MODALITY_VIDEOCONFERENCE = 'videoconference'
MODALITY_EAD = 'ead'
MODALITIES = (MODALITY_VIDEOCONFERENCE, MODALITY_EAD)

ENROLLMENT_REGULAR = 'regular'
ENROLLMENT_EXCEPTIONAL = 'exceptional'
ENROLLMENT_TYPES = (ENROLLMENT_REGULAR, ENROLLMENT_EXCEPTIONAL)

ATTENDANCE_THRESHOLD = Decimal('60')
REQUIRED_EAD_ACCESSES = 3
EAD_ELIGIBLE_PERCENTAGE = Decimal('100')

DateLike = Union[date, datetime, str, None]


class InvalidInput(ValidationError):
    """A value could not be interpreted (bad date string, unknown modality)."""


class InvalidEnrollment(ValidationError):
    """An enrollment record violates its own invariants."""


def to_date(value: DateLike, field: str = 'date') -> Optional[date]:
    """Normalize a date-like value; ``None`` and ``''`` mean absent."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            parsed = parse_date(value.strip())
        except ValueError:
            parsed = None
        if parsed is None:
            raise InvalidInput(f'Invalid {field}: {value!r}. Expected YYYY-MM-DD.')
        return parsed
    raise InvalidInput(f'Invalid {field}: {value!r}.')


@dataclass(frozen=True)
class EnrollmentRecord:
    student_id: object
    class_id: object
    enrollment_type: str = ENROLLMENT_REGULAR
    enrollment_date: Optional[date] = None

    def __post_init__(self):
        if self.enrollment_type not in ENROLLMENT_TYPES:
            raise InvalidEnrollment(f'Unknown enrollment type: {self.enrollment_type!r}.')
        object.__setattr__(self, 'enrollment_date', to_date(self.enrollment_date, 'enrollment date'))
        if self.is_exceptional and self.enrollment_date is None:
            raise InvalidEnrollment('Exceptional enrollment requires an enrollment date.')

    @property
    def is_exceptional(self) -> bool:
        return self.enrollment_type == ENROLLMENT_EXCEPTIONAL

    def effective_start(self, cohort_start: DateLike = None) -> Optional[date]:
        if self.is_exceptional:
            return self.enrollment_date
        return to_date(cohort_start, 'cohort start')


@dataclass(frozen=True)
class AttendanceEntry:
    class_id: object
    student_id: object
    class_number: int
    class_date: date
    present: bool

    def __post_init__(self):
        object.__setattr__(self, 'class_date', to_date(self.class_date, 'class date'))
        if self.class_date is None:
            raise InvalidInput('Attendance entry requires a class date.')


@dataclass(frozen=True)
class AttendanceAggregate:
    attended_count: int
    effective_total: int
    percentage: Decimal


@dataclass(frozen=True)
class EligibilityResult:
    attended_count: int
    effective_total: int
    percentage: Decimal
    is_eligible: bool

    @property
    def rounded_percentage(self) -> Decimal:
        return self.percentage.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


def access_months(*access_dates: DateLike) -> set:
    return {(value.year, value.month) for value in map(to_date, access_dates) if value is not None}


def is_ead_eligible(date1: DateLike, date2: DateLike, date3: DateLike) -> bool:
    present = [value for value in (date1, date2, date3) if value is not None and value != '']
    if len(present) < REQUIRED_EAD_ACCESSES:
        return False
    return len(access_months(*present)) == REQUIRED_EAD_ACCESSES


def _percentage(attended: int, total: int) -> Decimal:
    if total <= 0:
        return Decimal('0')
    return Decimal(attended) / Decimal(total) * Decimal('100')


def aggregate_attendance(
    cohort_total: int,
    enrollment: EnrollmentRecord,
    entries: Iterable[AttendanceEntry],
    session_dates: Optional[Iterable[DateLike]] = None,
) -> AttendanceAggregate:
    """
    Count attended sessions against the student's effective total.

    ``entries`` are the student's own rows. ``session_dates`` are the dates of
    every session held for the whole class; an exceptional enrollment is
    measured against those held on or after its enrollment date, so sessions
    the student never got a row for still count as missed. Without
    ``session_dates`` only the student's own rows are known.
    """
    entries = list(entries)

    if enrollment.is_exceptional:
        start = enrollment.enrollment_date
        considered = [entry for entry in entries if entry.class_date >= start]
        held = {entry.class_date for entry in considered}
        for value in session_dates or ():
            value = to_date(value, 'session date')
            if value is not None and value >= start:
                held.add(value)
        effective_total = len(held)
    else:
        considered = entries
        effective_total = int(cohort_total or 0)

    attended_count = sum(1 for entry in considered if entry.present)
    return AttendanceAggregate(
        attended_count=attended_count,
        effective_total=effective_total,
        percentage=_percentage(attended_count, effective_total),
    )


def decide(modality: str, outcome, threshold: Decimal = ATTENDANCE_THRESHOLD) -> bool:
    """
    Map an aggregator or access-validator outcome to the certify/deny gate.

    ``outcome`` is an ``AttendanceAggregate`` for videoconference and the
    boolean returned by ``is_ead_eligible`` for EAD.
    """
    if modality == MODALITY_VIDEOCONFERENCE:
        return outcome.percentage >= Decimal(str(threshold))
    if modality == MODALITY_EAD:
        return bool(outcome)
    raise InvalidInput(f'Unknown modality: {modality!r}.')


def evaluate_videoconference(
    cohort_total: int,
    enrollment: EnrollmentRecord,
    entries: Iterable[AttendanceEntry],
    threshold: Decimal = ATTENDANCE_THRESHOLD,
    session_dates: Optional[Iterable[DateLike]] = None,
) -> EligibilityResult:
    aggregate = aggregate_attendance(cohort_total, enrollment, entries, session_dates)
    return EligibilityResult(
        attended_count=aggregate.attended_count,
        effective_total=aggregate.effective_total,
        percentage=aggregate.percentage,
        is_eligible=decide(MODALITY_VIDEOCONFERENCE, aggregate, threshold),
    )


def evaluate_ead(date1: DateLike, date2: DateLike, date3: DateLike) -> EligibilityResult:
    # No percentage concept for access-based pass/fail: 100 when eligible.
    eligible = decide(MODALITY_EAD, is_ead_eligible(date1, date2, date3))
    return EligibilityResult(
        attended_count=len(access_months(date1, date2, date3)),
        effective_total=REQUIRED_EAD_ACCESSES,
        percentage=EAD_ELIGIBLE_PERCENTAGE if eligible else Decimal('0'),
        is_eligible=eligible,
    )
