# services/lifecycle.py
import calendar
import datetime as dt
import logging
from typing import Iterable, List, Optional

from dateutil.relativedelta import relativedelta

from config import LOG_LEVEL
from models.student import Student, StudentStatus, utc_today
from services.student_store import StudentStore

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)


def next_status(status: StudentStatus) -> StudentStatus:
    if status == StudentStatus.ACTIVE:
        return StudentStatus.INACTIVE
    return StudentStatus.ACTIVE


async def set_status(store: StudentStore, student_id: str, status: StudentStatus) -> Student:
    """Persist an operator-chosen status. Progress and payments are untouched."""
    return await store.update_status(student_id, status)


async def toggle_status(store: StudentStore, student_id: str) -> Student:
    student = await store.get_by_id(student_id)
    new_status = next_status(student.status)
    logger.info(f"Toggling student {student_id}: {student.status.value} -> {new_status.value}")
    return await store.update_status(student_id, new_status)


async def extend_subscription(store: StudentStore, student_id: str, months: int) -> Student:
    logger.info(f"Extending subscription for student: {student_id} by {months} months")
    student = await store.get_by_id(student_id)
    # relativedelta clamps to the end of shorter months (Jan 31 + 1 -> Feb 28/29)
    new_expiry = student.subscription_expiry + relativedelta(months=months)
    return await store.set_subscription_expiry(student_id, new_expiry)


async def expiring_subscriptions(store: StudentStore, days: int, today: Optional[dt.date] = None) -> List[Student]:
    today = today or utc_today()
    return await store.find_expiring(today + dt.timedelta(days=days))


def is_expired(student: Student, today: Optional[dt.date] = None) -> bool:
    # Informational only: an expired subscription does not change status
    today = today or utc_today()
    return student.subscription_expiry < today


def due_day(payment_day: int, on: dt.date) -> int:
    """Payment day for the month of `on`, moved to the month's last day when it overflows."""
    last_day = calendar.monthrange(on.year, on.month)[1]
    return min(payment_day, last_day)


def is_payment_due(student: Student, on: dt.date) -> bool:
    return due_day(student.payment_day, on) == on.day


def payment_reminders(students: Iterable[Student], today: Optional[dt.date] = None) -> List[Student]:
    """Active students whose payment falls due today or tomorrow."""
    today = today or utc_today()
    tomorrow = today + dt.timedelta(days=1)
    return [
        s for s in students
        if s.status == StudentStatus.ACTIVE and (is_payment_due(s, today) or is_payment_due(s, tomorrow))
    ]
