# ph_payroll/payroll/errors.py


class InvalidParameter(ValueError):
    """Raised when a payroll input fails validation before computation."""

    def __init__(self, field, message):
        self.field = field
        self.message = message
        super().__init__(f'{field}: {message}')
