from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .auth.mysql_account_repository import MySQLStaffAccountRepository
from .auth.repository import StaffAccountRepository
from .auth.service import AuthService
from .auth.session_provider import SessionProvider
from .children.mysql_child_repository import MySQLChildRepository
from .children.repository import ChildRepository
from .children.service import ChildService
from .contracts.mysql_contract_repository import MySQLContractRepository
from .contracts.repository import ContractRepository
from .contracts.service import ContractService
from .daily_records.mysql_daily_record_repository import MySQLDailyRecordRepository
from .daily_records.repository import DailyRecordRepository
from .daily_records.service import DailyRecordService
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .messaging.mysql_message_repository import MySQLMessageRepository
from .messaging.repository import MessageRepository
from .messaging.service import MessageService
from .state import ChildcareState
from .storage.photo_storage import LocalPhotoStorage


@dataclass(frozen=True)
class Container:
    accounts_repo: StaffAccountRepository
    children_repo: ChildRepository
    contracts_repo: ContractRepository
    attendance_repo: AttendanceRepository
    daily_records_repo: DailyRecordRepository
    messages_repo: MessageRepository

    auth_service: AuthService
    sessions: SessionProvider
    child_service: ChildService
    contract_service: ContractService
    attendance_service: AttendanceService
    daily_record_service: DailyRecordService
    message_service: MessageService
    photo_storage: LocalPhotoStorage
    state: ChildcareState
    dashboard_service: DashboardService


def assemble_container(
    *,
    accounts_repo: StaffAccountRepository,
    children_repo: ChildRepository,
    contracts_repo: ContractRepository,
    attendance_repo: AttendanceRepository,
    daily_records_repo: DailyRecordRepository,
    messages_repo: MessageRepository,
    photo_storage: LocalPhotoStorage,
) -> Container:
    """Wire services on top of the given repositories."""
    child_service = ChildService(children_repo)
    contract_service = ContractService(contracts_repo)
    attendance_service = AttendanceService(attendance_repo, children_repo)
    daily_record_service = DailyRecordService(daily_records_repo, children_repo)
    state = ChildcareState(
        child_service=child_service,
        contract_service=contract_service,
        attendance_service=attendance_service,
        daily_record_service=daily_record_service,
    )
    sessions = SessionProvider()

    return Container(
        accounts_repo=accounts_repo,
        children_repo=children_repo,
        contracts_repo=contracts_repo,
        attendance_repo=attendance_repo,
        daily_records_repo=daily_records_repo,
        messages_repo=messages_repo,
        auth_service=AuthService(accounts_repo),
        sessions=sessions,
        child_service=child_service,
        contract_service=contract_service,
        attendance_service=attendance_service,
        daily_record_service=daily_record_service,
        message_service=MessageService(messages_repo, children_repo),
        photo_storage=photo_storage,
        state=state,
        dashboard_service=DashboardService(state),
    )


def build_container(*, db_config: dict, upload_root: str, public_base_url: str = "") -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    container = assemble_container(
        accounts_repo=MySQLStaffAccountRepository(conn),
        children_repo=MySQLChildRepository(conn),
        contracts_repo=MySQLContractRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        daily_records_repo=MySQLDailyRecordRepository(conn),
        messages_repo=MySQLMessageRepository(conn),
        photo_storage=LocalPhotoStorage(upload_root, public_base_url),
    )
    return container
