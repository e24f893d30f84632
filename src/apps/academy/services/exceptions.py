# src/apps/academy/services/exceptions.py
"""
Academy Exceptions
"""

from typing import Optional, Dict, Any


class AcademyError(Exception):
    """Base exception for training, exams and recruitment."""

    def __init__(
        self,
        message: str,
        code: str = "ACADEMY_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ExamNotAvailableError(AcademyError):
    def __init__(self, exam_id=None):
        super().__init__(
            message="Exam is not available",
            code="EXAM_NOT_AVAILABLE",
            details={"exam_id": str(exam_id) if exam_id else None}
        )


class ExamAttemptsExhaustedError(AcademyError):
    """Raised when a user has used every allowed attempt."""

    def __init__(self, max_attempts: int):
        super().__init__(
            message=f"Maximum attempts ({max_attempts}) reached for this exam",
            code="EXAM_ATTEMPTS_EXHAUSTED",
            details={"max_attempts": max_attempts}
        )


class RecruitmentError(AcademyError):
    """Recruitment step refused; ``message`` is shown to the recruit as is."""

    def __init__(self, message: str, code: str = "RECRUITMENT_ERROR", details=None):
        super().__init__(message=message, code=code, details=details)


class RecruitmentSessionNotFoundError(RecruitmentError):
    def __init__(self, message: str = "Recruitment session not found"):
        super().__init__(message=message, code="RECRUITMENT_SESSION_NOT_FOUND")


class CallsignTakenError(RecruitmentError):
    def __init__(self, pid: str):
        super().__init__(
            message="This callsign is already taken. Please click Continue and choose another callsign.",
            code="CALLSIGN_TAKEN",
            details={"pid": pid}
        )


class PracticalNotFoundError(AcademyError):
    def __init__(self, practical_id=None):
        super().__init__(
            message="Practical not found",
            code="PRACTICAL_NOT_FOUND",
            details={"practical_id": str(practical_id) if practical_id else None}
        )
