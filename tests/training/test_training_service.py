from __future__ import annotations

from datetime import date

import pytest

from src.emp_hr.emp_hr.core.enums import Role
from src.emp_hr.emp_hr.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from src.emp_hr.emp_hr.training.service import TrainingService
from tests.fakes import InMemoryTraining

ADMIN = Role.ADMIN


def build():
    svc = TrainingService(InMemoryTraining())
    program = svc.create_program(current_role=ADMIN, name="Python Basics", duration="6 weeks")
    return svc, program


def test_batch_requires_existing_program_and_ordered_dates():
    svc, program = build()
    with pytest.raises(NotFoundError):
        svc.create_batch(
            current_role=ADMIN, batch_number="B1", program_id=404, start_date=date(2026, 3, 1), end_date=date(2026, 4, 1)
        )
    with pytest.raises(ValidationError):
        svc.create_batch(
            current_role=ADMIN,
            batch_number="B1",
            program_id=program.program_id,
            start_date=date(2026, 4, 1),
            end_date=date(2026, 3, 1),
        )

    batch = svc.create_batch(
        current_role=ADMIN,
        batch_number="B1",
        program_id=program.program_id,
        start_date=date(2026, 3, 1),
        end_date=date(2026, 3, 1),
    )
    assert batch.batch_number == "B1"

    with pytest.raises(ConflictError):
        svc.create_batch(
            current_role=ADMIN,
            batch_number="B1",
            program_id=program.program_id,
            start_date=date(2026, 5, 1),
            end_date=date(2026, 6, 1),
        )


def test_update_batch_checks_dates_against_current_values():
    svc, program = build()
    batch = svc.create_batch(
        current_role=ADMIN,
        batch_number="B2",
        program_id=program.program_id,
        start_date=date(2026, 3, 1),
        end_date=date(2026, 3, 31),
    )
    with pytest.raises(ValidationError):
        svc.update_batch(current_role=ADMIN, batch_id=batch.batch_id, changes={"end_date": date(2026, 2, 1)})


def test_sessions_by_batch():
    svc, program = build()
    batch = svc.create_batch(
        current_role=ADMIN,
        batch_number="B3",
        program_id=program.program_id,
        start_date=date(2026, 3, 1),
        end_date=date(2026, 3, 31),
    )
    svc.create_session(current_role=ADMIN, session_date=date(2026, 3, 2), batch_id=batch.batch_id, day_number=1)
    svc.create_session(current_role=ADMIN, session_date=date(2026, 3, 3))

    assert len(svc.list_sessions()) == 2
    assert [s.day_number for s in svc.list_sessions(batch_id=batch.batch_id)] == [1]
    with pytest.raises(NotFoundError):
        svc.create_session(current_role=ADMIN, session_date=date(2026, 3, 4), batch_id=999)


def test_writes_are_admin_only():
    svc, program = build()
    with pytest.raises(AuthorizationError):
        svc.create_program(current_role=Role.EMPLOYEE, name="X", duration="1 day")
    with pytest.raises(AuthorizationError):
        svc.delete_program(current_role=Role.TEAMLEADER, program_id=program.program_id)
    assert [p.name for p in svc.list_programs()] == ["Python Basics"]
