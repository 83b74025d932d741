from flask import Flask, g, jsonify, request, send_file
from pathlib import Path
from datetime import date, datetime
from decimal import Decimal
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException
import io
import json
import logging
import sys

sys.path.insert(0, str(Path(__file__).parent / 'src'))

from database.db import init_db, SessionLocal
from database.repository import PayrollRepository
from models.errors import NotFoundError, ValidationError
from models.period import Period
from processors.settlement_service import SettlementService
from processors.payroll_report import PayrollReportBuilder
from processors.payslip_generator import PayslipGenerator
from processors.payslip_pdf_generator import PayslipPDFGenerator
from processors.payroll_report_generator import PayrollReportGenerator
from config.settings import DEBUG, LOG_LEVEL, PORT, SECRET_KEY

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config['SECRET_KEY'] = SECRET_KEY
app.config['DEBUG'] = DEBUG

init_db()

# URL segment -> repository catalog
CATALOGS = {
    'horas-extras': 'overtime_types',
    'feriados': 'holidays',
    'adicionales': 'bonus_types',
    'descuentos': 'deduction_types',
    'politicas-vacaciones': 'vacation_policies',
    'tipos-licencias': 'leave_types',
}

# Request field names accepted in Spanish
FIELD_ALIASES = {
    'nombre': 'name',
    'numero': 'number',
    'descripcion': 'description',
    'salario_basico': 'basic_salary',
    'aporte_jubilacion': 'retirement_rate',
    'aporte_obra_social': 'health_insurance_rate',
    'aporte_sindical': 'union_rate',
    'aporte_pami': 'pami_rate',
    'multiplicador': 'multiplier',
    'fecha': 'date',
    'tipo': 'kind',
    'valor': 'value',
    'aplica_aportes': 'applies_contributions',
    'tipo_feriado': 'holiday_type',
    'antiguedad_minima': 'min_years',
    'antiguedad_maxima': 'max_years',
    'dias': 'days',
    'con_goce_sueldo': 'paid',
    'limite_dias': 'day_limit',
    'requiere_certificado': 'requires_certificate',
    'legajo': 'badge_id',
    'apellido': 'last_name',
    'dni': 'national_id',
    'fecha_nacimiento': 'birth_date',
    'fecha_ingreso': 'hire_date',
    'telefono': 'phone',
    'direccion': 'address',
    'salario_base': 'base_salary',
    'convenio_id': 'agreement_id',
    'empleadosIds': 'empleados_ids',
}

EMPLOYEE_NAME_ALIASES = {'nombre': 'first_name'}

ACTIVITIES = {
    'horas-extras': ('tipo_hora_extra_id', 'cantidad'),
    'adicionales': ('adicional_id', 'monto'),
    'descuentos': ('descuento_id', 'monto'),
}


def get_repository() -> PayrollRepository:
    """Repository bound to the request's session"""
    if 'db' not in g:
        g.db = SessionLocal()
    return PayrollRepository(g.db)


@app.teardown_appcontext
def close_db(exception):
    db = g.pop('db', None)
    if db is not None:
        db.close()


def to_json(row) -> dict:
    """Serialize an ORM row"""
    data = {}
    for column in row.__table__.columns:
        value = getattr(row, column.name)
        if isinstance(value, Decimal):
            value = str(value)
        elif isinstance(value, (date, datetime)):
            value = value.isoformat()
        data[column.name] = value
    return data


def request_fields(aliases=None) -> dict:
    """Request body with Spanish field names translated"""
    aliases = dict(FIELD_ALIASES, **(aliases or {}))
    payload = request.get_json(silent=True) or {}
    return {aliases.get(key, key): value for key, value in payload.items()}


def settlement_json(record) -> dict:
    data = to_json(record)
    data['detalle'] = json.loads(data.pop('detail_json'))
    return data


# ============================================================================
# Error handling
# ============================================================================

@app.errorhandler(ValidationError)
def handle_validation_error(e):
    return jsonify({'error': str(e)}), 400


@app.errorhandler(NotFoundError)
def handle_not_found(e):
    return jsonify({'error': str(e)}), 404


@app.errorhandler(IntegrityError)
def handle_integrity_error(e):
    logger.warning("Integrity error: %s", e.orig)
    return jsonify({'error': 'Registro duplicado o incompleto'}), 400


@app.errorhandler(Exception)
def handle_unexpected_error(e):
    if isinstance(e, HTTPException):
        return e
    logger.exception("Unhandled error on %s %s", request.method, request.path)
    return jsonify({'error': str(e)}), 500


# ============================================================================
# Agreements (convenios)
# ============================================================================

@app.route('/api/convenios', methods=['GET'])
def list_agreements():
    return jsonify([to_json(a) for a in get_repository().list_agreements()])


@app.route('/api/convenios', methods=['POST'])
def create_agreement():
    agreement = get_repository().create_agreement(**request_fields())
    return jsonify(to_json(agreement)), 201


@app.route('/api/convenios/<int:agreement_id>', methods=['GET'])
def get_agreement(agreement_id):
    agreement = get_repository().get_agreement(agreement_id)
    if not agreement:
        raise NotFoundError("Agreement", agreement_id)
    return jsonify(to_json(agreement))


@app.route('/api/convenios/<int:agreement_id>', methods=['PUT'])
def update_agreement(agreement_id):
    agreement = get_repository().update_agreement(agreement_id, **request_fields())
    return jsonify(to_json(agreement))


@app.route('/api/convenios/<int:agreement_id>', methods=['DELETE'])
def delete_agreement(agreement_id):
    get_repository().deactivate_agreement(agreement_id)
    return jsonify({'message': 'Convenio eliminado exitosamente'})


@app.route('/api/convenios/<int:agreement_id>/descuentos', methods=['POST'])
def link_agreement_deduction(agreement_id):
    fields = request_fields()
    link = get_repository().link_agreement_deduction(
        agreement_id,
        _int(fields.get('descuento_id'), 'descuento_id'),
        valid_from=_optional_date(fields.get('fecha_desde')),
        valid_to=_optional_date(fields.get('fecha_hasta'))
    )
    return jsonify(to_json(link)), 201


@app.route('/api/convenios/<int:agreement_id>/descuentos', methods=['GET'])
def list_agreement_deductions(agreement_id):
    links = get_repository().get_agreement_deductions(agreement_id)
    return jsonify([dict(to_json(link), deduction_type=to_json(link.deduction_type)) for link in links])


@app.route('/api/convenios/<int:agreement_id>/licencias', methods=['POST'])
def link_agreement_leave(agreement_id):
    leave_type_id = _int(request_fields().get('licencia_id'), 'licencia_id')
    link = get_repository().link_agreement_leave(agreement_id, leave_type_id)
    return jsonify(to_json(link)), 201


@app.route('/api/convenios/<int:agreement_id>/licencias', methods=['GET'])
def list_agreement_leaves(agreement_id):
    links = get_repository().get_agreement_leaves(agreement_id)
    return jsonify([dict(to_json(link), leave_type=to_json(link.leave_type)) for link in links])


# ============================================================================
# Catalogs
# ============================================================================

def _catalog_kind(catalog: str) -> str:
    if catalog not in CATALOGS:
        raise NotFoundError("Catalog", catalog)
    return CATALOGS[catalog]


@app.route('/api/<catalog>', methods=['GET'])
def list_catalog(catalog):
    items = get_repository().list_catalog(_catalog_kind(catalog))
    return jsonify([to_json(item) for item in items])


@app.route('/api/<catalog>', methods=['POST'])
def create_catalog_item(catalog):
    item = get_repository().create_catalog_item(_catalog_kind(catalog), **request_fields())
    return jsonify(to_json(item)), 201


@app.route('/api/<catalog>/<int:item_id>', methods=['GET'])
def get_catalog_item(catalog, item_id):
    return jsonify(to_json(get_repository().get_catalog_item(_catalog_kind(catalog), item_id)))


@app.route('/api/<catalog>/<int:item_id>', methods=['PUT'])
def update_catalog_item(catalog, item_id):
    item = get_repository().update_catalog_item(_catalog_kind(catalog), item_id, **request_fields())
    return jsonify(to_json(item))


@app.route('/api/<catalog>/<int:item_id>', methods=['DELETE'])
def delete_catalog_item(catalog, item_id):
    get_repository().deactivate_catalog_item(_catalog_kind(catalog), item_id)
    return jsonify({'message': 'Eliminado exitosamente'})


@app.route('/api/datos-formularios')
def form_options():
    return jsonify(get_repository().get_form_options())


# ============================================================================
# Employees
# ============================================================================

@app.route('/api/empleados', methods=['GET'])
def list_employees():
    employees = get_repository().get_active_employees()
    return jsonify([
        dict(to_json(e), convenio_nombre=e.agreement.name if e.agreement else None)
        for e in employees
    ])


@app.route('/api/empleados', methods=['POST'])
def create_employee():
    employee = get_repository().create_employee(**request_fields(EMPLOYEE_NAME_ALIASES))
    return jsonify(to_json(employee)), 201


@app.route('/api/empleados/<int:employee_id>', methods=['GET'])
def get_employee(employee_id):
    employee = get_repository().get_employee(employee_id)
    if not employee:
        raise NotFoundError("Employee", employee_id)
    return jsonify(dict(to_json(employee), convenio_nombre=employee.agreement.name if employee.agreement else None))


@app.route('/api/empleados/<int:employee_id>', methods=['PUT'])
def update_employee(employee_id):
    employee = get_repository().update_employee(employee_id, **request_fields(EMPLOYEE_NAME_ALIASES))
    return jsonify(to_json(employee))


@app.route('/api/empleados/<int:employee_id>', methods=['DELETE'])
def delete_employee(employee_id):
    get_repository().deactivate_employee(employee_id)
    return jsonify({'message': 'Empleado eliminado exitosamente'})


@app.route('/api/empleados/<int:employee_id>/<activity>', methods=['GET'])
def list_employee_activity(employee_id, activity):
    repo = get_repository()
    periodo = request.args.get('periodo')
    period = Period.parse(periodo) if periodo else None
    if activity == 'horas-extras':
        entries = repo.get_overtime_entries(employee_id, period)
        return jsonify([dict(to_json(e), tipo_nombre=e.overtime_type.name,
                             multiplicador=str(e.overtime_type.multiplier)) for e in entries])
    if activity == 'adicionales':
        entries = repo.get_bonus_entries(employee_id, period)
        return jsonify([dict(to_json(e), adicional_nombre=e.bonus_type.name) for e in entries])
    if activity == 'descuentos':
        entries = repo.get_deduction_entries(employee_id, period)
        return jsonify([dict(to_json(e), descuento_nombre=e.deduction_type.name,
                             descuento_tipo=e.deduction_type.kind) for e in entries])
    if activity == 'liquidaciones':
        return jsonify([settlement_json(s) for s in SettlementService(repo).history(employee_id)])
    raise NotFoundError("Resource", activity)


@app.route('/api/empleados/<int:employee_id>/<activity>', methods=['POST'])
def add_employee_activity(employee_id, activity):
    repo = get_repository()
    if activity == 'liquidaciones':
        record = SettlementService(repo).save(employee_id, request_fields().get('periodo'))
        return jsonify(settlement_json(record)), 201
    if activity == 'calcular-liquidacion':
        settlement = SettlementService(repo).calculate(employee_id, request_fields().get('periodo'))
        return jsonify(settlement.to_dict())
    if activity not in ACTIVITIES:
        raise NotFoundError("Resource", activity)

    fields = request_fields()
    type_field, amount_field = ACTIVITIES[activity]
    if not fields.get(type_field) or fields.get(amount_field) in (None, '') or not fields.get('date'):
        raise ValidationError(f"{type_field}, {amount_field} y fecha son requeridos")
    args = (
        employee_id,
        _int(fields[type_field], type_field),
        _decimal(fields[amount_field]),
        _date(fields['date'])
    )
    description = fields.get('description')
    if activity == 'horas-extras':
        entry = repo.add_overtime(*args, description=description)
    elif activity == 'adicionales':
        entry = repo.add_bonus(*args, description=description)
    else:
        entry = repo.add_deduction(*args, description=description)
    return jsonify(to_json(entry)), 201


# ============================================================================
# Pay slips (recibos)
# ============================================================================

@app.route('/api/recibos/<int:employee_id>/<periodo>')
def get_payslip(employee_id, periodo):
    payslip = SettlementService(get_repository()).payslip(employee_id, periodo)
    return jsonify(payslip.to_dict())


@app.route('/api/recibos/<int:employee_id>/<periodo>/pdf')
def download_payslip_pdf(employee_id, periodo):
    payslip = SettlementService(get_repository()).payslip(employee_id, periodo)
    pdf_bytes = PayslipPDFGenerator().render(payslip)
    return send_file(
        io.BytesIO(pdf_bytes),
        mimetype='application/pdf',
        as_attachment=True,
        download_name=f"{payslip.filename_stem}.pdf"
    )


@app.route('/api/recibos/<int:employee_id>/<periodo>/xlsx')
def download_payslip_xlsx(employee_id, periodo):
    payslip = SettlementService(get_repository()).payslip(employee_id, periodo)
    filepath = PayslipGenerator().generate(payslip)
    return send_file(filepath, as_attachment=True)


# ============================================================================
# Payroll reports (nómina)
# ============================================================================

@app.route('/api/nomina/<periodo>')
def payroll_report(periodo):
    report = PayrollReportBuilder(get_repository()).build(periodo)
    if request.args.get('formato') == 'xlsx':
        return send_file(PayrollReportGenerator().generate(report), as_attachment=True)
    return jsonify(report.to_dict())


@app.route('/api/nomina/<periodo>/empleados', methods=['POST'])
def payroll_report_for_employees(periodo):
    employee_ids = request_fields().get('empleados_ids')
    if not isinstance(employee_ids, list):
        raise ValidationError('Se requiere un array de IDs de empleados')
    report = PayrollReportBuilder(get_repository()).build_for_employees(periodo, employee_ids)
    return jsonify(report.to_dict())


def _int(value, field: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid {field} '{value}'") from e


def _date(value) -> date:
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid date '{value}', expected YYYY-MM-DD") from e


def _optional_date(value):
    return _date(value) if value else None


def _decimal(value) -> Decimal:
    try:
        return Decimal(str(value))
    except ArithmeticError as e:
        raise ValidationError(f"Invalid amount '{value}'") from e


if __name__ == '__main__':
    app.run(host='0.0.0.0', port=PORT, debug=DEBUG)
