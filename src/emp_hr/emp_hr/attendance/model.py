from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import iso_or_none


@dataclass(frozen=True)
class Location:
    lat: Optional[float] = None
    lng: Optional[float] = None
    address: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Optional[dict]) -> "Location":
        payload = payload or {}
        lat = payload.get("lat")
        lng = payload.get("lng")
        return cls(
            lat=float(lat) if lat is not None else None,
            lng=float(lng) if lng is not None else None,
            address=payload.get("address") or None,
        )

    def to_dict(self) -> dict:
        return {"lat": self.lat, "lng": self.lng, "address": self.address}


@dataclass(frozen=True)
class AttendancePunch:
    """Domain entity: one employee's check-in/check-out pair for one day.

    Created at check-in, mutated once at check-out. An owner-submitted
    correction is kept beside the recorded instants and wins when present.
    """

    punch_id: int
    employee_id: int
    work_date: date
    check_in: datetime
    check_out: Optional[datetime] = None
    check_in_location: Location = field(default_factory=Location)
    check_out_location: Location = field(default_factory=Location)
    remarks: Optional[str] = None
    corrected_check_in: Optional[datetime] = None
    corrected_check_out: Optional[datetime] = None
    corrected_at: Optional[datetime] = None
    corrected_by: Optional[int] = None

    @property
    def effective_check_in(self) -> datetime:
        return self.corrected_check_in or self.check_in

    @property
    def effective_check_out(self) -> Optional[datetime]:
        return self.corrected_check_out or self.check_out

    @property
    def in_progress(self) -> bool:
        return self.effective_check_out is None

    def to_dict(self) -> dict:
        return {
            "punch_id": self.punch_id,
            "employee_id": self.employee_id,
            "date": self.work_date.isoformat(),
            "check_in": iso_or_none(self.effective_check_in),
            "check_out": iso_or_none(self.effective_check_out),
            "check_in_location": self.check_in_location.to_dict(),
            "check_out_location": self.check_out_location.to_dict(),
            "remarks": self.remarks,
            "corrected_check_in": iso_or_none(self.corrected_check_in),
            "corrected_check_out": iso_or_none(self.corrected_check_out),
            "corrected_at": iso_or_none(self.corrected_at),
            "corrected_by": self.corrected_by,
        }
