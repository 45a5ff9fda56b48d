# services/student_store.py
import datetime as dt
import logging
import uuid
from typing import List

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from config import LOG_LEVEL
from errors import DuplicateEmail, InvalidStudentData, StudentNotFound
from models.student import (
    PaymentCreate,
    ProgressCreate,
    Student,
    StudentCreate,
    StudentStatus,
    StudentUpdate,
    utc_now,
)

# Set up logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

# Never expose MongoDB's internal _id
PROJECTION = {"_id": 0}

INDEXED_FIELDS = ["status", "course", "subscription_expiry", "payment_day", "start_date", "created_at"]

# _id breaks ties between students created in the same clock tick.
# Sorted finds keep _id in the result; the Student model ignores it.
INSERTION_ORDER = [("created_at", ASCENDING), ("_id", ASCENDING)]


class StudentStore:
    """Persistence for Student documents in the `students` collection.

    Dates are stored as ISO strings (YYYY-MM-DD) and timestamps as ISO UTC
    strings. Every write is a single-document MongoDB operation.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db.students

    async def ensure_indexes(self):
        await self.collection.create_index("id", unique=True)
        await self.collection.create_index("email", unique=True)
        for field in INDEXED_FIELDS:
            await self.collection.create_index(field)
        await self.collection.create_index([("status", ASCENDING), ("subscription_expiry", ASCENDING)])

    async def create(self, data: StudentCreate) -> Student:
        logger.info(f"Creating new student: {data.name}")
        now = utc_now().isoformat()
        student_dict = data.model_dump(mode="json")
        student_dict["id"] = str(uuid.uuid4())
        student_dict["progress"] = []
        student_dict["payments"] = []
        student_dict["created_at"] = now
        student_dict["updated_at"] = now
        try:
            await self.collection.insert_one(student_dict)
        except DuplicateKeyError:
            logger.warning(f"Email already registered: {data.email}")
            raise DuplicateEmail(data.email)
        student_dict.pop("_id", None)
        return Student(**student_dict)

    async def get_all(self) -> List[Student]:
        logger.info("Fetching all students")
        students = await self.collection.find({}).sort(INSERTION_ORDER).to_list(None)
        return [Student(**s) for s in students]

    async def get_by_id(self, student_id: str) -> Student:
        logger.info(f"Fetching student with id: {student_id}")
        student = await self.collection.find_one({"id": student_id}, PROJECTION)
        if not student:
            logger.warning(f"Student not found for id: {student_id}")
            raise StudentNotFound(student_id)
        return Student(**student)

    async def find_by_status(self, status: StudentStatus) -> List[Student]:
        logger.info(f"Fetching students with status: {status.value}")
        students = await self.collection.find({"status": status.value}).sort(INSERTION_ORDER).to_list(None)
        return [Student(**s) for s in students]

    async def find_expiring(self, until: dt.date) -> List[Student]:
        """Active students whose subscription expires on or before `until`."""
        logger.info(f"Fetching active students with subscription expiring by {until}")
        query = {
            "status": StudentStatus.ACTIVE.value,
            "subscription_expiry": {"$lte": until.isoformat()},
        }
        students = await self.collection.find(query, PROJECTION).sort("subscription_expiry", ASCENDING).to_list(None)
        return [Student(**s) for s in students]

    async def update(self, student_id: str, data: StudentUpdate) -> Student:
        logger.info(f"Updating student with id: {student_id}")
        changes = data.changes()
        if "start_date" in changes or "subscription_expiry" in changes:
            current = await self.get_by_id(student_id)
            start_date = data.start_date or current.start_date
            expiry = data.subscription_expiry or current.subscription_expiry
            if expiry < start_date:
                raise InvalidStudentData("subscription_expiry cannot be before start_date")
        try:
            return await self._update_one(student_id, {"$set": changes})
        except DuplicateKeyError:
            logger.warning(f"Email already registered: {data.email}")
            raise DuplicateEmail(data.email)

    async def update_status(self, student_id: str, status: StudentStatus) -> Student:
        logger.info(f"Updating status for student {student_id} to {status.value}")
        return await self._update_one(student_id, {"$set": {"status": status.value}})

    async def set_subscription_expiry(self, student_id: str, expiry: dt.date) -> Student:
        logger.info(f"Setting subscription expiry for student {student_id} to {expiry}")
        now = utc_now().isoformat()
        student = await self.collection.find_one_and_update(
            {"id": student_id, "start_date": {"$lte": expiry.isoformat()}},
            {"$set": {"subscription_expiry": expiry.isoformat(), "updated_at": now}},
            projection=PROJECTION,
            return_document=ReturnDocument.AFTER,
        )
        if student is None:
            if await self.collection.count_documents({"id": student_id}) == 0:
                logger.warning(f"Student not found for id: {student_id}")
                raise StudentNotFound(student_id)
            raise InvalidStudentData("subscription_expiry cannot be before start_date")
        return Student(**student)

    async def add_progress(self, student_id: str, entry: ProgressCreate) -> Student:
        logger.info(f"Adding progress entry for student: {student_id}")
        entry_dict = entry.model_dump(mode="json")
        entry_dict["created_at"] = utc_now().isoformat()
        return await self._update_one(student_id, {"$push": {"progress": entry_dict}})

    async def add_payment(self, student_id: str, entry: PaymentCreate) -> Student:
        logger.info(f"Recording payment of {entry.amount} for student: {student_id}")
        entry_dict = entry.model_dump(mode="json")
        entry_dict["created_at"] = utc_now().isoformat()
        return await self._update_one(student_id, {"$push": {"payments": entry_dict}})

    async def delete(self, student_id: str):
        logger.info(f"Deleting student with id: {student_id}")
        result = await self.collection.delete_one({"id": student_id})
        if result.deleted_count == 0:
            logger.warning(f"Student not found for id: {student_id}")
            raise StudentNotFound(student_id)

    async def _update_one(self, student_id: str, update: dict) -> Student:
        update.setdefault("$set", {})["updated_at"] = utc_now().isoformat()
        student = await self.collection.find_one_and_update(
            {"id": student_id},
            update,
            projection=PROJECTION,
            return_document=ReturnDocument.AFTER,
        )
        if student is None:
            logger.warning(f"Student not found for id: {student_id}")
            raise StudentNotFound(student_id)
        return Student(**student)
