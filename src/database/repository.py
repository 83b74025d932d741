from sqlalchemy.orm import Session
from sqlalchemy import Date, Integer, Numeric, and_
from typing import Any, Dict, List, Optional, Type
from datetime import date
from decimal import Decimal
import json
import logging
from .models import (
    AgreementDB, EmployeeDB, OvertimeTypeDB, HolidayDB, BonusTypeDB,
    DeductionTypeDB, VacationPolicyDB, LeaveTypeDB, AgreementDeductionDB,
    AgreementLeaveDB, EmployeeOvertimeDB, EmployeeBonusDB,
    EmployeeDeductionDB, SettlementDB
)
from models.activity import BonusRecord, DeductionRecord, OvertimeRecord
from models.employee import Agreement, Contribution, Employee
from models.errors import NotFoundError, ValidationError
from models.period import Period
from models.settlement import Settlement
from utils.formatters import to_cents
from utils.validators import validate_amount, validate_national_id, validate_rate
from config.settings import STATUTORY_CONTRIBUTIONS

logger = logging.getLogger(__name__)


class PayrollRepository:
    """Repository for catalogs, employees, period activity and settlements"""

    CATALOG_MODELS = {
        'overtime_types': OvertimeTypeDB,
        'holidays': HolidayDB,
        'bonus_types': BonusTypeDB,
        'deduction_types': DeductionTypeDB,
        'vacation_policies': VacationPolicyDB,
        'leave_types': LeaveTypeDB,
    }

    def __init__(self, db_session: Session):
        self.db = db_session

    # ========== Agreement Operations ==========

    def create_agreement(self, **fields) -> AgreementDB:
        """Create a labor agreement"""
        self._check_rates(fields)
        agreement = AgreementDB()
        self._apply_fields(agreement, fields)
        self.db.add(agreement)
        self.db.commit()
        self.db.refresh(agreement)
        return agreement

    def update_agreement(self, agreement_id: int, **fields) -> AgreementDB:
        self._check_rates(fields)
        agreement = self._require(AgreementDB, agreement_id, "Agreement")
        self._apply_fields(agreement, fields)
        self.db.commit()
        self.db.refresh(agreement)
        return agreement

    def get_agreement(self, agreement_id: int) -> Optional[AgreementDB]:
        """Get active agreement by ID"""
        return self.db.query(AgreementDB).filter_by(id=agreement_id, active=True).first()

    def list_agreements(self) -> List[AgreementDB]:
        return self.db.query(AgreementDB).filter_by(active=True).order_by(AgreementDB.id.desc()).all()

    def deactivate_agreement(self, agreement_id: int) -> AgreementDB:
        return self._deactivate(AgreementDB, agreement_id, "Agreement")

    def resolve_agreement(self, agreement_id: int) -> Agreement:
        """Agreement with its statutory contributions, in pay-slip order"""
        db_agreement = self.get_agreement(agreement_id)
        if not db_agreement:
            raise NotFoundError("Agreement", agreement_id)
        contributions = [
            Contribution(label=label, rate=Decimal(getattr(db_agreement, column) or 0))
            for column, label in STATUTORY_CONTRIBUTIONS
        ]
        return Agreement(
            agreement_id=db_agreement.id,
            name=db_agreement.name,
            number=db_agreement.number,
            contributions=contributions
        )

    def link_agreement_deduction(self, agreement_id: int, deduction_type_id: int,
                                 valid_from: Optional[date] = None,
                                 valid_to: Optional[date] = None) -> AgreementDeductionDB:
        """Make a deduction type applicable to an agreement"""
        self._require(AgreementDB, agreement_id, "Agreement")
        self._require(DeductionTypeDB, deduction_type_id, "Deduction type")
        link = AgreementDeductionDB(
            agreement_id=agreement_id,
            deduction_type_id=deduction_type_id,
            valid_from=valid_from,
            valid_to=valid_to
        )
        self.db.add(link)
        self.db.commit()
        self.db.refresh(link)
        return link

    def get_agreement_deductions(self, agreement_id: int) -> List[AgreementDeductionDB]:
        return self.db.query(AgreementDeductionDB).join(DeductionTypeDB).filter(
            and_(
                AgreementDeductionDB.agreement_id == agreement_id,
                AgreementDeductionDB.active.is_(True),
                DeductionTypeDB.active.is_(True)
            )
        ).order_by(DeductionTypeDB.name).all()

    def link_agreement_leave(self, agreement_id: int, leave_type_id: int) -> AgreementLeaveDB:
        """Grant a leave type through an agreement"""
        self._require(AgreementDB, agreement_id, "Agreement")
        self._require(LeaveTypeDB, leave_type_id, "Leave type")
        link = AgreementLeaveDB(agreement_id=agreement_id, leave_type_id=leave_type_id)
        self.db.add(link)
        self.db.commit()
        self.db.refresh(link)
        return link

    def get_agreement_leaves(self, agreement_id: int) -> List[AgreementLeaveDB]:
        return self.db.query(AgreementLeaveDB).join(LeaveTypeDB).filter(
            and_(
                AgreementLeaveDB.agreement_id == agreement_id,
                AgreementLeaveDB.active.is_(True),
                LeaveTypeDB.active.is_(True)
            )
        ).order_by(LeaveTypeDB.name).all()

    # ========== Catalog Operations ==========

    def list_catalog(self, catalog: str) -> List[Any]:
        model = self._catalog_model(catalog)
        return self.db.query(model).filter_by(active=True).order_by(model.id.desc()).all()

    def get_catalog_item(self, catalog: str, item_id: int) -> Any:
        return self._require(self._catalog_model(catalog), item_id, catalog)

    def create_catalog_item(self, catalog: str, **fields) -> Any:
        item = self._catalog_model(catalog)()
        self._apply_fields(item, fields)
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def update_catalog_item(self, catalog: str, item_id: int, **fields) -> Any:
        item = self.get_catalog_item(catalog, item_id)
        self._apply_fields(item, fields)
        self.db.commit()
        self.db.refresh(item)
        return item

    def deactivate_catalog_item(self, catalog: str, item_id: int) -> Any:
        return self._deactivate(self._catalog_model(catalog), item_id, catalog)

    # ========== Employee Operations ==========

    def create_employee(self, **fields) -> EmployeeDB:
        """Create employee"""
        self._check_employee_fields(fields)
        employee = EmployeeDB()
        self._apply_fields(employee, fields)
        self.db.add(employee)
        self.db.commit()
        self.db.refresh(employee)
        return employee

    def update_employee(self, employee_id: int, **fields) -> EmployeeDB:
        self._check_employee_fields(fields)
        employee = self._require(EmployeeDB, employee_id, "Employee")
        self._apply_fields(employee, fields)
        self.db.commit()
        self.db.refresh(employee)
        return employee

    def get_employee(self, employee_id: int) -> Optional[EmployeeDB]:
        """Get active employee by ID"""
        return self.db.query(EmployeeDB).filter_by(id=employee_id, active=True).first()

    def get_active_employees(self) -> List[EmployeeDB]:
        """Get all active employees ordered by last name, first name"""
        return self.db.query(EmployeeDB).filter_by(active=True).order_by(
            EmployeeDB.last_name, EmployeeDB.first_name
        ).all()

    def deactivate_employee(self, employee_id: int) -> EmployeeDB:
        return self._deactivate(EmployeeDB, employee_id, "Employee")

    def load_employee(self, employee_id: int) -> Employee:
        """Active employee as a domain object"""
        db_employee = self.get_employee(employee_id)
        if not db_employee:
            raise NotFoundError("Employee", employee_id)
        return Employee(
            employee_id=db_employee.id,
            badge_id=db_employee.badge_id,
            first_name=db_employee.first_name,
            last_name=db_employee.last_name,
            base_salary=Decimal(db_employee.base_salary or 0),
            agreement_id=db_employee.agreement_id,
            national_id=db_employee.national_id,
            hire_date=db_employee.hire_date,
            birth_date=db_employee.birth_date,
            email=db_employee.email,
            phone=db_employee.phone,
            address=db_employee.address,
            agreement_name=db_employee.agreement.name if db_employee.agreement else None,
            active=db_employee.active
        )

    # ========== Period Activity Operations ==========

    def add_overtime(self, employee_id: int, overtime_type_id: int, quantity: Decimal,
                     entry_date: date, description: Optional[str] = None) -> EmployeeOvertimeDB:
        """Record overtime hours"""
        self._require(EmployeeDB, employee_id, "Employee")
        self._require(OvertimeTypeDB, overtime_type_id, "Overtime type")
        if not validate_amount(quantity):
            raise ValidationError("Overtime quantity cannot be negative")
        return self._add_entry(EmployeeOvertimeDB(
            employee_id=employee_id,
            overtime_type_id=overtime_type_id,
            quantity=Decimal(quantity),
            date=entry_date,
            description=description
        ))

    def add_bonus(self, employee_id: int, bonus_type_id: int, amount: Decimal,
                  entry_date: date, description: Optional[str] = None) -> EmployeeBonusDB:
        """Record a bonus"""
        self._require(EmployeeDB, employee_id, "Employee")
        self._require(BonusTypeDB, bonus_type_id, "Bonus type")
        if not validate_amount(amount):
            raise ValidationError("Bonus amount cannot be negative")
        return self._add_entry(EmployeeBonusDB(
            employee_id=employee_id,
            bonus_type_id=bonus_type_id,
            amount=Decimal(amount),
            date=entry_date,
            description=description
        ))

    def add_deduction(self, employee_id: int, deduction_type_id: int, amount: Decimal,
                      entry_date: date, description: Optional[str] = None) -> EmployeeDeductionDB:
        """Record a fixed deduction"""
        self._require(EmployeeDB, employee_id, "Employee")
        self._require(DeductionTypeDB, deduction_type_id, "Deduction type")
        if not validate_amount(amount):
            raise ValidationError("Deduction amount cannot be negative")
        return self._add_entry(EmployeeDeductionDB(
            employee_id=employee_id,
            deduction_type_id=deduction_type_id,
            amount=Decimal(amount),
            date=entry_date,
            description=description
        ))

    def get_overtime_entries(self, employee_id: int, period: Optional[Period] = None) -> List[EmployeeOvertimeDB]:
        return self._entries(EmployeeOvertimeDB, employee_id, period)

    def get_bonus_entries(self, employee_id: int, period: Optional[Period] = None) -> List[EmployeeBonusDB]:
        return self._entries(EmployeeBonusDB, employee_id, period)

    def get_deduction_entries(self, employee_id: int, period: Optional[Period] = None) -> List[EmployeeDeductionDB]:
        return self._entries(EmployeeDeductionDB, employee_id, period)

    def get_overtime_records(self, employee_id: int, period: Period) -> List[OvertimeRecord]:
        """Overtime of the period as engine input"""
        return [
            OvertimeRecord(
                multiplier=Decimal(entry.overtime_type.multiplier),
                quantity=Decimal(entry.quantity),
                date=entry.date,
                type_label=entry.overtime_type.name,
                description=entry.description
            )
            for entry in self.get_overtime_entries(employee_id, period)
        ]

    def get_bonus_records(self, employee_id: int, period: Period) -> List[BonusRecord]:
        return [
            BonusRecord(amount=Decimal(entry.amount), date=entry.date, description=entry.description)
            for entry in self.get_bonus_entries(employee_id, period)
        ]

    def get_deduction_records(self, employee_id: int, period: Period) -> List[DeductionRecord]:
        return [
            DeductionRecord(
                amount=Decimal(entry.amount),
                date=entry.date,
                deduction_type=entry.deduction_type.kind,
                description=entry.description
            )
            for entry in self.get_deduction_entries(employee_id, period)
        ]

    # ========== Settlement Operations ==========

    def save_settlement(self, settlement: Settlement) -> SettlementDB:
        """Store a settlement; earlier rows for the same period are kept"""
        record = SettlementDB(
            employee_id=settlement.employee.employee_id,
            period=str(settlement.period),
            base_salary=to_cents(settlement.base_salary),
            gross_total=to_cents(settlement.gross_pay),
            deductions_total=to_cents(settlement.total_deductions),
            net_pay=to_cents(settlement.net_pay),
            detail_json=json.dumps(settlement.to_dict())
        )
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        logger.info("Saved settlement %s for employee %s, period %s",
                    record.id, record.employee_id, record.period)
        return record

    def get_settlements(self, employee_id: int) -> List[SettlementDB]:
        """Settlement history, newest period first"""
        return self.db.query(SettlementDB).filter_by(employee_id=employee_id, active=True).order_by(
            SettlementDB.period.desc(), SettlementDB.id.desc()
        ).all()

    # ========== Form Options ==========

    def get_form_options(self) -> Dict[str, List[Dict[str, Any]]]:
        """Active agreements and catalogs for selection lists"""
        def options(model, *extra):
            rows = self.db.query(model).filter_by(active=True).order_by(model.name).all()
            return [
                dict({'id': row.id, 'nombre': row.name},
                     **{name: self._json_value(getattr(row, name)) for name in extra})
                for row in rows
            ]

        return {
            'convenios': options(AgreementDB),
            'horasExtras': options(OvertimeTypeDB, 'multiplier'),
            'adicionales': options(BonusTypeDB),
            'descuentos': options(DeductionTypeDB),
        }

    def rollback(self):
        """Discard the pending transaction after a failed operation"""
        self.db.rollback()

    # ========== Helper Methods ==========

    def _catalog_model(self, catalog: str) -> Type:
        model = self.CATALOG_MODELS.get(catalog)
        if model is None:
            raise ValidationError(f"Unknown catalog '{catalog}'")
        return model

    def _require(self, model, item_id: int, entity: str):
        item = self.db.query(model).filter_by(id=item_id, active=True).first()
        if not item:
            raise NotFoundError(entity, item_id)
        return item

    def _deactivate(self, model, item_id: int, entity: str):
        item = self._require(model, item_id, entity)
        item.active = False
        self.db.commit()
        return item

    def _apply_fields(self, item, fields: Dict[str, Any]):
        columns = item.__table__.columns
        for name, value in fields.items():
            if name not in columns or name in ('id', 'active', 'created_at', 'updated_at'):
                raise ValidationError(f"Unknown field '{name}' for {item.__tablename__}")
            setattr(item, name, self._coerce(columns[name], value))

    @staticmethod
    def _coerce(column, value):
        """Convert JSON-ish input to the column's Python type"""
        if value is None or value == '':
            return None
        try:
            if isinstance(column.type, Date) and isinstance(value, str):
                return date.fromisoformat(value)
            if isinstance(column.type, Numeric):
                return Decimal(str(value))
            if isinstance(column.type, Integer) and not isinstance(value, bool):
                return int(value)
        except (ValueError, ArithmeticError) as e:
            raise ValidationError(f"Invalid value '{value}' for {column.name}") from e
        return value

    def _check_rates(self, fields: Dict[str, Any]):
        columns = AgreementDB.__table__.columns
        for column, label in STATUTORY_CONTRIBUTIONS:
            rate = self._coerce(columns[column], fields.get(column))
            if rate is not None and not validate_rate(rate):
                raise ValidationError(f"{label}: rate must be between 0 and 100")

    def _check_employee_fields(self, fields: Dict[str, Any]):
        national_id = fields.get('national_id')
        if national_id and not validate_national_id(str(national_id)):
            raise ValidationError(f"Invalid national id '{national_id}'")
        salary = self._coerce(EmployeeDB.__table__.columns['base_salary'], fields.get('base_salary'))
        if salary is not None and not validate_amount(salary):
            raise ValidationError("Base salary cannot be negative")

    def _add_entry(self, entry):
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)
        return entry

    def _entries(self, model, employee_id: int, period: Optional[Period]) -> List[Any]:
        query = self.db.query(model).filter_by(employee_id=employee_id, active=True)
        if period:
            query = query.filter(model.date.between(period.first_day, period.last_day))
        return query.order_by(model.date.desc(), model.id).all()

    @staticmethod
    def _json_value(value):
        return str(value) if isinstance(value, Decimal) else value
