# ph_payroll/payroll/records.py

import logging
from collections import namedtuple
from datetime import date, datetime

from .contributions import ZERO, to_decimal
from .errors import InvalidParameter

logger = logging.getLogger(__name__)

RECORD_STATUSES = ('pending', 'processed', 'completed')

# (attribute, record key)
_AMOUNT_FIELDS = [
    ('basic_salary', 'basicSalary'),
    ('worked_hours', 'workedHours'),
    ('overtime_hours', 'overtimeHours'),
    ('holiday_pay', 'holidayPay'),
    ('night_differential', 'nightDifferential'),
    ('salary_adjustment', 'salaryAdjustment'),
    ('absences', 'absences'),
    ('late_deductions', 'lateDeductions'),
    ('sss_contribution', 'sssContribution'),
    ('philhealth_contribution', 'philhealthContribution'),
    ('pagibig_contribution', 'pagibigContribution'),
    ('withholding_tax', 'withholdingTax'),
    ('gross_pay', 'grossPay'),
    ('total_deductions', 'totalDeductions'),
    ('net_pay', 'netPay'),
]


def _to_date(value, field):
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise InvalidParameter(field, f'{value!r} is not an ISO date') from None


class PayrollRecord:
    """
    A payroll record for one employee and cutoff period, as kept by the
    record store.

    The component fields (holiday pay, night differential, adjustments) are
    trusted as already populated, e.g. from an imported spreadsheet row.
    calculate_all() recomputes only the totals from them.
    """

    def __init__(self, employee_id=None, cutoff_start=None, cutoff_end=None,
                 employee_name=None, status='pending', **amounts):
        unknown = set(amounts) - {name for name, _ in _AMOUNT_FIELDS}
        if unknown:
            raise TypeError(f'Unexpected payroll record fields: {", ".join(sorted(unknown))}')

        self.employee_id = employee_id
        self.employee_name = employee_name
        self.cutoff_start = _to_date(cutoff_start, 'cutoff_start')
        self.cutoff_end = _to_date(cutoff_end, 'cutoff_end')
        self.status = status or 'pending'
        for name, _ in _AMOUNT_FIELDS:
            value = amounts.get(name)
            if value is None:
                setattr(self, name, ZERO)
            else:
                setattr(self, name, to_decimal(value, name, allow_negative=True))

    @classmethod
    def from_dict(cls, data):
        """Builds a record from its stored camelCase form. Extra keys are ignored."""
        amounts = {name: data.get(key) for name, key in _AMOUNT_FIELDS}
        return cls(
            employee_id=data.get('employeeId'),
            employee_name=data.get('employeeName'),
            cutoff_start=data.get('cutoffStart'),
            cutoff_end=data.get('cutoffEnd'),
            status=data.get('status'),
            **amounts
        )

    @classmethod
    def from_calculation(cls, employee_id, cutoff_start, cutoff_end, result,
                         employee_name=None, worked_hours=0, overtime_hours=0):
        """
        Stores a PayrollCalculationResult as a record.

        The totals are copied from the result. Overtime pay and allowances have
        no record field, so calling calculate_all() on the new record applies
        the record formula and may give a lower gross pay than the result.
        """
        return cls(
            employee_id=employee_id,
            employee_name=employee_name,
            cutoff_start=cutoff_start,
            cutoff_end=cutoff_end,
            basic_salary=result.basic_salary,
            worked_hours=worked_hours,
            overtime_hours=overtime_hours,
            holiday_pay=result.holiday_pay,
            night_differential=result.night_differential,
            sss_contribution=result.sss_contribution,
            philhealth_contribution=result.philhealth_contribution,
            pagibig_contribution=result.pagibig_contribution,
            withholding_tax=result.withholding_tax,
            gross_pay=result.gross_pay,
            total_deductions=result.total_deductions,
            net_pay=result.net_pay,
        )

    def to_dict(self):
        data = {
            'employeeId': self.employee_id,
            'employeeName': self.employee_name,
            'cutoffStart': self.cutoff_start.isoformat() if self.cutoff_start else None,
            'cutoffEnd': self.cutoff_end.isoformat() if self.cutoff_end else None,
            'status': self.status,
        }
        for name, key in _AMOUNT_FIELDS:
            data[key] = getattr(self, name)
        return data

    @property
    def key(self):
        """Identity in the record store: employee plus cutoff period."""
        return (self.employee_id, self.cutoff_start, self.cutoff_end)

    def validate(self):
        """Returns a list of validation error messages (empty when valid)."""
        errors = []

        if not self.employee_id:
            errors.append('Employee ID is required')

        if not self.cutoff_start or not self.cutoff_end:
            errors.append('Cutoff dates are required')
        elif self.cutoff_end < self.cutoff_start:
            errors.append('Cutoff end date must be on or after cutoff start date')

        if self.basic_salary < 0:
            errors.append('Basic salary cannot be negative')

        if self.worked_hours < 0:
            errors.append('Worked hours cannot be negative')

        if self.status not in RECORD_STATUSES:
            errors.append(f'Unknown status {self.status!r}')

        return errors

    # --- RECOMPUTATION FROM POPULATED FIELDS ---
    def calculate_gross_pay(self):
        # No overtime pay or allowances here; only the stored components
        self.gross_pay = (self.basic_salary
                          + self.holiday_pay
                          + self.night_differential
                          + self.salary_adjustment
                          - self.absences
                          - self.late_deductions)
        return self.gross_pay

    def calculate_total_deductions(self):
        self.total_deductions = (self.sss_contribution
                                 + self.philhealth_contribution
                                 + self.pagibig_contribution
                                 + self.withholding_tax)
        return self.total_deductions

    def calculate_net_pay(self):
        self.net_pay = self.gross_pay - self.total_deductions
        return self.net_pay

    def calculate_all(self):
        self.calculate_gross_pay()
        self.calculate_total_deductions()
        self.calculate_net_pay()
        return {
            'grossPay': self.gross_pay,
            'totalDeductions': self.total_deductions,
            'netPay': self.net_pay,
        }

    # --- STATUS ---
    def _advance(self, expected, new_status):
        if self.status != expected:
            raise InvalidParameter('status', f'cannot move from {self.status!r} to {new_status!r}')
        logger.info('Payroll record %s moved from %s to %s', self.key, self.status, new_status)
        self.status = new_status

    def mark_processed(self):
        self._advance('pending', 'processed')

    def mark_completed(self):
        self._advance('processed', 'completed')

    def __repr__(self):
        return f'<PayrollRecord {self.employee_id} {self.cutoff_start}..{self.cutoff_end}>'


PayrollRunTotals = namedtuple('PayrollRunTotals', [
    'employee_count', 'total_gross_pay', 'total_deductions', 'total_net_pay'])


def summarize_payroll_run(records):
    """Sums gross, deductions and net pay over the records of one payroll run."""
    employee_count = 0
    total_gross = ZERO
    total_deduct = ZERO
    total_net = ZERO

    for record in records:
        employee_count += 1
        total_gross += record.gross_pay
        total_deduct += record.total_deductions
        total_net += record.net_pay

    return PayrollRunTotals(employee_count, total_gross, total_deduct, total_net)
