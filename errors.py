# errors.py


class TutorDeskError(Exception):
    """Base class for domain errors raised below the HTTP layer."""


class StudentNotFound(TutorDeskError):
    def __init__(self, student_id: str):
        self.student_id = student_id
        super().__init__(f"Student not found with id: {student_id}")


class DuplicateEmail(TutorDeskError):
    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Student with email {email} already exists")


class InvalidStudentData(TutorDeskError):
    pass
