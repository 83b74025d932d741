import os
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add src and the project root to path
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))
sys.path.insert(0, str(ROOT / 'src'))

# Keep the configured database untouched
os.environ.setdefault("DATABASE_URL", "sqlite://")

from database.db import Base, init_db
from database.repository import PayrollRepository

# In-memory test database
engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Fresh schema per test"""
    init_db(bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def repo(db_session):
    return PayrollRepository(db_session)


@pytest.fixture
def agreement(repo):
    return repo.create_agreement(
        name="Empleados de Comercio",
        number="130/75",
        retirement_rate=Decimal('11'),
        health_insurance_rate=Decimal('3'),
        union_rate=Decimal('2'),
        pami_rate=Decimal('1.5')
    )


@pytest.fixture
def overtime_type(repo):
    return repo.create_catalog_item('overtime_types', name="Horas extras al 50%", multiplier=Decimal('1.5'))


@pytest.fixture
def bonus_type(repo):
    return repo.create_catalog_item('bonus_types', name="Presentismo", kind="fijo")


@pytest.fixture
def deduction_type(repo):
    return repo.create_catalog_item('deduction_types', name="Adelanto de sueldo", kind="fijo")


@pytest.fixture
def employee(repo, agreement):
    return repo.create_employee(
        badge_id="EMP-001",
        first_name="Juan",
        last_name="Pérez",
        national_id="12345678",
        hire_date=date(2020, 1, 15),
        base_salary=Decimal('300000.00'),
        agreement_id=agreement.id
    )
