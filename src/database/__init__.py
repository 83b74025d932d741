from .db import engine, SessionLocal, Base, get_db, init_db
from .models import (
    AgreementDB,
    EmployeeDB,
    OvertimeTypeDB,
    HolidayDB,
    BonusTypeDB,
    DeductionTypeDB,
    VacationPolicyDB,
    LeaveTypeDB,
    AgreementDeductionDB,
    AgreementLeaveDB,
    EmployeeOvertimeDB,
    EmployeeBonusDB,
    EmployeeDeductionDB,
    SettlementDB
)
from .repository import PayrollRepository

__all__ = [
    'engine',
    'SessionLocal',
    'Base',
    'get_db',
    'init_db',
    'AgreementDB',
    'EmployeeDB',
    'OvertimeTypeDB',
    'HolidayDB',
    'BonusTypeDB',
    'DeductionTypeDB',
    'VacationPolicyDB',
    'LeaveTypeDB',
    'AgreementDeductionDB',
    'AgreementLeaveDB',
    'EmployeeOvertimeDB',
    'EmployeeBonusDB',
    'EmployeeDeductionDB',
    'SettlementDB',
    'PayrollRepository'
]
