from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Program:
    program_id: int
    name: str
    duration: str
    description: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "program_id": self.program_id,
            "name": self.name,
            "duration": self.duration,
            "description": self.description,
        }


@dataclass(frozen=True)
class Batch:
    """A cohort of one program running between two dates (inclusive)."""

    batch_id: int
    batch_number: str
    program_id: int
    start_date: date
    end_date: date
    program_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "batch_id": self.batch_id,
            "batch_number": self.batch_number,
            "program_id": self.program_id,
            "program_name": self.program_name,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
        }


@dataclass(frozen=True)
class TrainingSession:
    session_id: int
    batch_id: Optional[int]
    session_date: date
    day_number: Optional[int] = None
    session_time: Optional[str] = None
    meeting_link: Optional[str] = None
    assigned_tutor: Optional[str] = None
    assigned_counselor: Optional[str] = None
    quiz_link: Optional[str] = None
    counseling_link: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "batch_id": self.batch_id,
            "session_date": self.session_date.isoformat(),
            "day_number": self.day_number,
            "session_time": self.session_time,
            "meeting_link": self.meeting_link,
            "assigned_tutor": self.assigned_tutor,
            "assigned_counselor": self.assigned_counselor,
            "quiz_link": self.quiz_link,
            "counseling_link": self.counseling_link,
        }
