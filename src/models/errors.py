class PayrollError(Exception):
    """Base class for payroll errors"""


class ValidationError(PayrollError, ValueError):
    """Missing or malformed input; nothing was computed"""


class NotFoundError(PayrollError, LookupError):
    """Employee or catalog entity does not exist (or is inactive)"""

    def __init__(self, entity: str, identifier):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} {identifier} not found")
