# models/student.py
import datetime as dt
from enum import Enum
from typing import List, Optional

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator


def utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def utc_today() -> dt.date:
    return utc_now().date()


class StudentStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class PaymentMethod(str, Enum):
    CREDIT_CARD = "CREDIT_CARD"
    DEBIT_CARD = "DEBIT_CARD"
    BANK_TRANSFER = "BANK_TRANSFER"
    PIX = "PIX"
    CASH = "CASH"


class PaymentStatus(str, Enum):
    COMPLETED = "COMPLETED"
    PENDING = "PENDING"
    FAILED = "FAILED"


class ProgressBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    date: dt.date = Field(default_factory=utc_today)
    topic: str = Field(min_length=1)
    description: str = ""
    grade: float = Field(ge=0)
    max_grade: float = Field(default=100.0, gt=0)
    comments: str = ""

    @model_validator(mode="after")
    def check_grade(self):
        if self.grade > self.max_grade:
            raise ValueError("grade cannot exceed max_grade")
        return self


class ProgressCreate(ProgressBase):
    model_config = ConfigDict(extra="forbid")


class ProgressEntry(ProgressBase):
    """One evaluated learning milestone. Never edited once recorded."""
    model_config = ConfigDict(frozen=True)

    created_at: dt.datetime


class PaymentBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    date: dt.date = Field(default_factory=utc_today)
    amount: float = Field(gt=0)
    method: PaymentMethod
    reference: str = ""
    status: PaymentStatus = PaymentStatus.COMPLETED
    month: Optional[int] = Field(default=None, ge=1, le=12)
    year: Optional[int] = Field(default=None, ge=1900)
    notes: str = ""


class PaymentCreate(PaymentBase):
    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def fill_period(self):
        # Billing period defaults to the month of the payment date
        if self.month is None:
            self.month = self.date.month
        if self.year is None:
            self.year = self.date.year
        return self


class PaymentEntry(PaymentBase):
    """A recorded payment transaction. Never edited once recorded."""
    model_config = ConfigDict(frozen=True)

    month: int = Field(ge=1, le=12)
    year: int
    created_at: dt.datetime


class StudentCreate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=1)
    course: str = Field(min_length=1)
    level: Optional[str] = None
    status: StudentStatus = StudentStatus.ACTIVE
    monthly_fee: float = Field(default=0.0, ge=0)
    payment_day: int = Field(default=1, ge=1, le=31)
    start_date: Optional[dt.date] = None
    subscription_expiry: Optional[dt.date] = None
    notes: str = ""

    @model_validator(mode="after")
    def fill_subscription_dates(self):
        if self.start_date is None:
            self.start_date = utc_today()
        if self.subscription_expiry is None:
            self.subscription_expiry = self.start_date + relativedelta(months=1)
        if self.subscription_expiry < self.start_date:
            raise ValueError("subscription_expiry cannot be before start_date")
        return self


class StudentUpdate(BaseModel):
    """Full update of a student's profile fields.

    Status changes only through the subscription endpoints, and history
    (progress, payments) and server-assigned fields (id, created_at) are
    never part of an update. Optional fields left out of the body keep
    their stored values.
    """
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=1)
    course: str = Field(min_length=1)
    level: Optional[str] = None
    monthly_fee: float = Field(default=0.0, ge=0)
    payment_day: int = Field(default=1, ge=1, le=31)
    start_date: Optional[dt.date] = None
    subscription_expiry: Optional[dt.date] = None
    notes: str = ""

    @model_validator(mode="after")
    def check_subscription_dates(self):
        if self.start_date and self.subscription_expiry and self.subscription_expiry < self.start_date:
            raise ValueError("subscription_expiry cannot be before start_date")
        return self

    def changes(self) -> dict:
        """Fields sent by the client, in their stored form."""
        changes = self.model_dump(mode="json", exclude_unset=True)
        # An explicit null keeps the stored subscription dates
        for field in ("start_date", "subscription_expiry"):
            if field in changes and changes[field] is None:
                del changes[field]
        return changes


class SubscriptionUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    status: StudentStatus


class SubscriptionExtend(BaseModel):
    model_config = ConfigDict(extra="forbid")

    months: int = Field(default=1, ge=1, le=120)


class Student(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    course: str
    level: Optional[str] = None
    status: StudentStatus = StudentStatus.ACTIVE
    monthly_fee: float = 0.0
    payment_day: int = 1
    start_date: dt.date
    subscription_expiry: dt.date
    progress: List[ProgressEntry] = []
    payments: List[PaymentEntry] = []
    notes: str = ""
    created_at: dt.datetime
    updated_at: dt.datetime


class StudentSummary(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    course: str
    status: StudentStatus
    progressEntries: List[ProgressEntry] = []

    @classmethod
    def from_student(cls, student: Student) -> "StudentSummary":
        return cls(
            id=student.id,
            name=student.name,
            email=student.email,
            phone=student.phone,
            course=student.course,
            status=student.status,
            progressEntries=student.progress,
        )
