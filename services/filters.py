# services/filters.py
from typing import Iterable, List

from models.dashboard import Dashboard, StudentFilter, StudentStats
from models.student import StudentStatus, StudentSummary


def matches(student, criteria: StudentFilter) -> bool:
    term = criteria.search_term.lower()
    matches_search = term in student.name.lower() or term in student.email.lower()
    matches_status = criteria.status == "all" or student.status == criteria.status
    # Course names are case-sensitive
    matches_course = criteria.course == "all" or student.course == criteria.course
    return matches_search and matches_status and matches_course


def filter_students(students: Iterable, criteria: StudentFilter) -> List:
    """Students matching every criterion, in their original order."""
    return [s for s in students if matches(s, criteria)]


def unique_courses(students: Iterable) -> List[str]:
    return list(dict.fromkeys(s.course for s in students))


def compute_stats(students: Iterable) -> StudentStats:
    students = list(students)
    active = sum(1 for s in students if s.status == StudentStatus.ACTIVE)
    inactive = sum(1 for s in students if s.status == StudentStatus.INACTIVE)
    return StudentStats(
        total=len(students),
        active=active,
        inactive=inactive,
        uniqueCourses=unique_courses(students),
    )


def build_dashboard(students: Iterable, criteria: StudentFilter) -> Dashboard:
    # Filtered list and stats come from the same snapshot
    snapshot = list(students)
    return Dashboard(
        students=[StudentSummary.from_student(s) for s in filter_students(snapshot, criteria)],
        stats=compute_stats(snapshot),
    )
