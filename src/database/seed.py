import logging
from datetime import date
from decimal import Decimal
from .repository import PayrollRepository

logger = logging.getLogger(__name__)

SAMPLE_AGREEMENT = {
    "name": "Empleados de Comercio",
    "number": "130/75",
    "retirement_rate": Decimal('11'),
    "health_insurance_rate": Decimal('3'),
    "union_rate": Decimal('2'),
    "pami_rate": Decimal('3'),
}

SAMPLE_EMPLOYEES = [
    {
        "badge_id": "EMP-001",
        "first_name": "Juan",
        "last_name": "Pérez",
        "national_id": "12345678",
        "hire_date": date(2020, 1, 15),
        "base_salary": Decimal('300000.00'),
        "with_agreement": True
    },
    {
        "badge_id": "EMP-002",
        "first_name": "María",
        "last_name": "Gómez",
        "national_id": "23456789",
        "hire_date": date(2021, 3, 20),
        "base_salary": Decimal('280000.00'),
        "with_agreement": True
    },
    {
        "badge_id": "EMP-003",
        "first_name": "Carlos",
        "last_name": "López",
        "national_id": "34567890",
        "hire_date": date(2022, 6, 10),
        "base_salary": Decimal('250000.00'),
        "with_agreement": False
    }
]


def seed_sample_data(repo: PayrollRepository) -> bool:
    """Create demo catalogs and employees on an empty database"""
    if repo.get_active_employees():
        return False

    agreement = repo.create_agreement(**SAMPLE_AGREEMENT)
    repo.create_catalog_item('overtime_types', name="Horas extras al 50%", multiplier=Decimal('1.5'))
    repo.create_catalog_item('overtime_types', name="Horas extras al 100%", multiplier=Decimal('2.0'))
    repo.create_catalog_item('bonus_types', name="Presentismo", kind="fijo", value=Decimal('8000'))
    repo.create_catalog_item('deduction_types', name="Adelanto de sueldo", kind="fijo")

    for sample in SAMPLE_EMPLOYEES:
        fields = {key: value for key, value in sample.items() if key != "with_agreement"}
        if sample["with_agreement"]:
            fields["agreement_id"] = agreement.id
        repo.create_employee(**fields)

    logger.info("Sample data created: %d employees", len(SAMPLE_EMPLOYEES))
    return True
