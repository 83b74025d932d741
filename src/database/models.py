from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship
from datetime import datetime
from .db import Base


class AgreementDB(Base):
    """Labor agreement (convenio) with statutory contribution rates"""
    __tablename__ = "agreements"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    number = Column(String(50), unique=True)
    basic_salary = Column(Numeric(12, 2))
    description = Column(Text)

    # Contribution percentages over gross pay
    retirement_rate = Column(Numeric(5, 2), nullable=False, default=0)
    health_insurance_rate = Column(Numeric(5, 2), nullable=False, default=0)
    union_rate = Column(Numeric(5, 2), nullable=False, default=0)
    pami_rate = Column(Numeric(5, 2), nullable=False, default=0)

    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    employees = relationship("EmployeeDB", back_populates="agreement")
    deduction_links = relationship("AgreementDeductionDB", back_populates="agreement")
    leave_links = relationship("AgreementLeaveDB", back_populates="agreement")

    def __repr__(self):
        return f"<Agreement(id={self.id}, name={self.name})>"


class EmployeeDB(Base):
    """Employee database model"""
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, autoincrement=True)
    badge_id = Column(String(20), unique=True, nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    national_id = Column(String(20), unique=True)
    birth_date = Column(Date)
    hire_date = Column(Date)
    email = Column(String(255))
    phone = Column(String(50))
    address = Column(String(255))
    base_salary = Column(Numeric(12, 2), nullable=False, default=0)
    agreement_id = Column(Integer, ForeignKey('agreements.id'))

    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    agreement = relationship("AgreementDB", back_populates="employees")
    overtime_entries = relationship("EmployeeOvertimeDB", back_populates="employee")
    bonus_entries = relationship("EmployeeBonusDB", back_populates="employee")
    deduction_entries = relationship("EmployeeDeductionDB", back_populates="employee")
    settlements = relationship("SettlementDB", back_populates="employee")

    def __repr__(self):
        return f"<Employee(id={self.id}, badge={self.badge_id}, name={self.last_name}, {self.first_name})>"


# ========== Catalogs ==========

class OvertimeTypeDB(Base):
    """Overtime type with its pay multiplier (50%, 100%...)"""
    __tablename__ = "overtime_types"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    multiplier = Column(Numeric(4, 2), nullable=False)
    description = Column(Text)
    active = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<OvertimeType(name={self.name}, multiplier={self.multiplier})>"


class HolidayDB(Base):
    """Holiday calendar entry"""
    __tablename__ = "holidays"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    date = Column(Date, nullable=False)
    holiday_type = Column(String(30))  # 'inamovible', 'trasladable', 'no_laborable'
    description = Column(Text)
    active = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<Holiday(name={self.name}, date={self.date})>"


class BonusTypeDB(Base):
    """Bonus (adicional) catalog entry"""
    __tablename__ = "bonus_types"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    kind = Column(String(20))  # 'fijo', 'porcentaje'
    value = Column(Numeric(12, 2))
    description = Column(Text)
    active = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<BonusType(name={self.name}, kind={self.kind})>"


class DeductionTypeDB(Base):
    """Deduction (descuento) catalog entry"""
    __tablename__ = "deduction_types"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    kind = Column(String(20), nullable=False)  # 'fijo', 'porcentaje'
    value = Column(Numeric(12, 2))
    applies_contributions = Column(Boolean, default=False)
    description = Column(Text)
    active = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<DeductionType(name={self.name}, kind={self.kind})>"


class VacationPolicyDB(Base):
    """Vacation days by seniority"""
    __tablename__ = "vacation_policies"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    min_years = Column(Integer, nullable=False, default=0)
    max_years = Column(Integer)
    days = Column(Integer, nullable=False)
    description = Column(Text)
    active = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<VacationPolicy(name={self.name}, days={self.days})>"


class LeaveTypeDB(Base):
    """Leave (licencia) type"""
    __tablename__ = "leave_types"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    paid = Column(Boolean, nullable=False, default=True)
    day_limit = Column(Integer)
    requires_certificate = Column(Boolean, nullable=False, default=False)
    description = Column(Text)
    active = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<LeaveType(name={self.name}, paid={self.paid})>"


class AgreementDeductionDB(Base):
    """Deduction type applicable to an agreement"""
    __tablename__ = "agreement_deductions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    agreement_id = Column(Integer, ForeignKey('agreements.id'), nullable=False)
    deduction_type_id = Column(Integer, ForeignKey('deduction_types.id'), nullable=False)
    valid_from = Column(Date)
    valid_to = Column(Date)
    active = Column(Boolean, nullable=False, default=True)

    agreement = relationship("AgreementDB", back_populates="deduction_links")
    deduction_type = relationship("DeductionTypeDB")


class AgreementLeaveDB(Base):
    """Leave type granted by an agreement"""
    __tablename__ = "agreement_leaves"

    id = Column(Integer, primary_key=True, autoincrement=True)
    agreement_id = Column(Integer, ForeignKey('agreements.id'), nullable=False)
    leave_type_id = Column(Integer, ForeignKey('leave_types.id'), nullable=False)
    active = Column(Boolean, nullable=False, default=True)

    agreement = relationship("AgreementDB", back_populates="leave_links")
    leave_type = relationship("LeaveTypeDB")


# ========== Period activity ==========

class EmployeeOvertimeDB(Base):
    """Overtime hours worked by an employee"""
    __tablename__ = "employee_overtime"

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey('employees.id'), nullable=False, index=True)
    overtime_type_id = Column(Integer, ForeignKey('overtime_types.id'), nullable=False)
    quantity = Column(Numeric(8, 2), nullable=False)
    date = Column(Date, nullable=False, index=True)
    description = Column(Text)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    employee = relationship("EmployeeDB", back_populates="overtime_entries")
    overtime_type = relationship("OvertimeTypeDB")


class EmployeeBonusDB(Base):
    """Bonus granted to an employee"""
    __tablename__ = "employee_bonuses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey('employees.id'), nullable=False, index=True)
    bonus_type_id = Column(Integer, ForeignKey('bonus_types.id'), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    date = Column(Date, nullable=False, index=True)
    description = Column(Text)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    employee = relationship("EmployeeDB", back_populates="bonus_entries")
    bonus_type = relationship("BonusTypeDB")


class EmployeeDeductionDB(Base):
    """Fixed deduction applied to an employee"""
    __tablename__ = "employee_deductions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey('employees.id'), nullable=False, index=True)
    deduction_type_id = Column(Integer, ForeignKey('deduction_types.id'), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    date = Column(Date, nullable=False, index=True)
    description = Column(Text)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    employee = relationship("EmployeeDB", back_populates="deduction_entries")
    deduction_type = relationship("DeductionTypeDB")


# ========== Settlements ==========

class SettlementDB(Base):
    """Stored settlement; every save appends a new row"""
    __tablename__ = "settlements"

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey('employees.id'), nullable=False, index=True)
    period = Column(String(7), nullable=False, index=True)  # YYYY-MM
    settlement_date = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Financial totals
    base_salary = Column(Numeric(12, 2), nullable=False)
    gross_total = Column(Numeric(12, 2), nullable=False)
    deductions_total = Column(Numeric(12, 2), nullable=False)
    net_pay = Column(Numeric(12, 2), nullable=False)

    # Full settlement as JSON
    detail_json = Column(Text, nullable=False)

    active = Column(Boolean, nullable=False, default=True)

    employee = relationship("EmployeeDB", back_populates="settlements")

    def __repr__(self):
        return f"<Settlement(id={self.id}, employee={self.employee_id}, period={self.period})>"
