# routes/students.py
from fastapi import APIRouter, HTTPException, Depends, Query
from pydantic import ValidationError
from typing import List
import logging

from config import EXPIRY_DAYS_BEFORE, LOG_LEVEL
from database import get_db
from errors import DuplicateEmail, InvalidStudentData, StudentNotFound
from models.dashboard import Dashboard, StudentFilter
from models.student import (
    PaymentCreate,
    ProgressCreate,
    Student,
    StudentCreate,
    StudentStatus,
    StudentSummary,
    StudentUpdate,
    SubscriptionExtend,
    SubscriptionUpdate,
)
from services import lifecycle
from services.filters import build_dashboard
from services.student_store import StudentStore

# Set up logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/students", tags=["students"])


async def get_store(db=Depends(get_db)) -> StudentStore:
    return StudentStore(db)


@router.get("", response_model=List[StudentSummary])
async def get_students(store: StudentStore = Depends(get_store)):
    students = await store.get_all()
    return [StudentSummary.from_student(s) for s in students]


@router.get("/dashboard", response_model=Dashboard)
async def get_dashboard(
    search: str = "",
    status: str = "all",
    course: str = "all",
    store: StudentStore = Depends(get_store),
):
    logger.info(f"Building dashboard with search={search}, status={status}, course={course}")
    try:
        criteria = StudentFilter(search_term=search, status=status, course=course)
    except ValidationError:
        raise HTTPException(status_code=422, detail=f"Invalid status filter: {status}")
    students = await store.get_all()
    return build_dashboard(students, criteria)


@router.get("/expiring", response_model=List[Student])
async def get_expiring_students(
    days: int = Query(EXPIRY_DAYS_BEFORE, ge=0, le=3650),
    store: StudentStore = Depends(get_store),
):
    return await lifecycle.expiring_subscriptions(store, days)


@router.get("/payment-reminders", response_model=List[Student])
async def get_payment_reminders(store: StudentStore = Depends(get_store)):
    students = await store.find_by_status(StudentStatus.ACTIVE)
    return lifecycle.payment_reminders(students)


@router.get("/status/{status}", response_model=List[Student])
async def get_students_by_status(status: StudentStatus, store: StudentStore = Depends(get_store)):
    return await store.find_by_status(status)


@router.get("/{id}", response_model=Student)
async def get_student(id: str, store: StudentStore = Depends(get_store)):
    try:
        return await store.get_by_id(id)
    except StudentNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("", response_model=Student, status_code=201)
async def create_student(student: StudentCreate, store: StudentStore = Depends(get_store)):
    try:
        return await store.create(student)
    except DuplicateEmail as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.put("/{id}", response_model=Student)
async def update_student(id: str, student: StudentUpdate, store: StudentStore = Depends(get_store)):
    try:
        return await store.update(id, student)
    except StudentNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DuplicateEmail as e:
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidStudentData as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.put("/{id}/subscription", response_model=Student)
async def update_subscription(id: str, request: SubscriptionUpdate, store: StudentStore = Depends(get_store)):
    try:
        return await lifecycle.set_status(store, id, request.status)
    except StudentNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{id}/subscription/toggle", response_model=Student)
async def toggle_subscription(id: str, store: StudentStore = Depends(get_store)):
    try:
        return await lifecycle.toggle_status(store, id)
    except StudentNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{id}/subscription/extend", response_model=Student)
async def extend_subscription(id: str, request: SubscriptionExtend, store: StudentStore = Depends(get_store)):
    try:
        return await lifecycle.extend_subscription(store, id, request.months)
    except StudentNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidStudentData as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/{id}/progress", response_model=Student, status_code=201)
async def add_progress_entry(id: str, entry: ProgressCreate, store: StudentStore = Depends(get_store)):
    try:
        return await store.add_progress(id, entry)
    except StudentNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{id}/payments", response_model=Student, status_code=201)
async def add_payment_entry(id: str, entry: PaymentCreate, store: StudentStore = Depends(get_store)):
    try:
        return await store.add_payment(id, entry)
    except StudentNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{id}", status_code=204)
async def delete_student(id: str, store: StudentStore = Depends(get_store)):
    try:
        await store.delete(id)
    except StudentNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
