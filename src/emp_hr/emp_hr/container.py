from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .attendance.classifier import AttendanceThresholds
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_JWT_EXPIRES_MINUTES, DEFAULT_SHIFT_LABEL
from .database.connection import DBConfig, DatabaseConnection
from .days.service import DayResolutionService
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveService
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .reports.service import AttendanceReportService
from .shifts.calendar import ShiftCalendar
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .shifts.repository import ShiftRepository
from .training.mysql_training_repository import MySQLTrainingRepository
from .training.repository import TrainingRepository
from .training.service import TrainingService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService
from .weekoffs.mysql_weekoff_repository import MySQLWeekOffRepository
from .weekoffs.repository import WeekOffRepository
from .weekoffs.service import WeekOffService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    shifts_repo: ShiftRepository
    attendance_repo: AttendanceRepository
    leaves_repo: LeaveRepository
    weekoffs_repo: WeekOffRepository
    notifications_repo: NotificationRepository
    training_repo: TrainingRepository

    shift_calendar: ShiftCalendar
    auth_service: AuthService
    user_service: UserService
    day_service: DayResolutionService
    attendance_service: AttendanceService
    leave_service: LeaveService
    weekoff_service: WeekOffService
    notification_service: NotificationService
    training_service: TrainingService
    report_service: AttendanceReportService


def assemble_container(
    *,
    users_repo: UserRepository,
    shifts_repo: ShiftRepository,
    attendance_repo: AttendanceRepository,
    leaves_repo: LeaveRepository,
    weekoffs_repo: WeekOffRepository,
    notifications_repo: NotificationRepository,
    training_repo: TrainingRepository,
    settings: Any = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services on top of the given repositories.

    The shift table is read once here; a default shift label missing from it
    raises ConfigurationError so the app refuses to start.
    """

    shift_calendar = ShiftCalendar(
        shifts_repo.list_all(),
        users_repo,
        default_label=getattr(settings, "DEFAULT_SHIFT", DEFAULT_SHIFT_LABEL),
    )
    thresholds = AttendanceThresholds.from_settings(settings)

    notification_service = NotificationService(notifications_repo, users_repo)
    day_service = DayResolutionService(
        attendance_repo,
        leaves_repo,
        weekoffs_repo,
        users_repo,
        shift_calendar,
        thresholds=thresholds,
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        shifts_repo=shifts_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        weekoffs_repo=weekoffs_repo,
        notifications_repo=notifications_repo,
        training_repo=training_repo,
        shift_calendar=shift_calendar,
        auth_service=AuthService(
            users_repo,
            shift_calendar,
            secret_key=str(getattr(settings, "SECRET_KEY", "dev-secret-key")),
            expires_minutes=int(getattr(settings, "JWT_EXPIRES_MINUTES", DEFAULT_JWT_EXPIRES_MINUTES)),
        ),
        user_service=UserService(users_repo, shift_calendar),
        day_service=day_service,
        attendance_service=AttendanceService(attendance_repo, users_repo, day_service),
        leave_service=LeaveService(leaves_repo, users_repo, notification_service),
        weekoff_service=WeekOffService(weekoffs_repo, users_repo),
        notification_service=notification_service,
        training_service=TrainingService(training_repo),
        report_service=AttendanceReportService(day_service, users_repo),
    )


def build_container(*, db_config: dict, settings: Any = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return assemble_container(
        users_repo=MySQLUserRepository(conn),
        shifts_repo=MySQLShiftRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        weekoffs_repo=MySQLWeekOffRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        training_repo=MySQLTrainingRepository(conn),
        settings=settings,
        conn=conn,
    )
