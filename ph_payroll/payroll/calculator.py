# ph_payroll/payroll/calculator.py

import logging
from collections import namedtuple
from collections.abc import Mapping
from decimal import Decimal

from .contributions import (
    ZERO,
    calculate_pagibig,
    calculate_philhealth,
    calculate_sss,
    calculate_withholding_tax,
    round_money,
    to_decimal,
)
from .errors import InvalidParameter

logger = logging.getLogger(__name__)

# 8 hours/day, 22 working days/month
DEFAULT_WORKING_HOURS_PER_MONTH = Decimal('176')
DEFAULT_WORKING_DAYS_PER_MONTH = Decimal('22')

OVERTIME_MULTIPLIER = Decimal('1.25')
NIGHT_DIFFERENTIAL_RATE = Decimal('0.10')
HOLIDAY_PAY_MULTIPLIERS = {
    'regular': Decimal('2.0'),
    'special': Decimal('1.3'),
}


def _to_divisor(value, field):
    divisor = to_decimal(value, field)
    if divisor == 0:
        raise InvalidParameter(field, 'must be greater than zero')
    return divisor


def _to_holiday_type(value):
    holiday_type = value.lower() if isinstance(value, str) else None
    if holiday_type not in HOLIDAY_PAY_MULTIPLIERS:
        raise InvalidParameter(
            'holiday_type',
            f'{value!r} is not one of {", ".join(HOLIDAY_PAY_MULTIPLIERS)}'
        )
    return holiday_type


# --- RATES ---
def get_hourly_rate(monthly_salary, working_hours_per_month=DEFAULT_WORKING_HOURS_PER_MONTH):
    salary = to_decimal(monthly_salary, 'monthly_salary')
    return salary / _to_divisor(working_hours_per_month, 'working_hours_per_month')


def get_daily_rate(monthly_salary, working_days_per_month=DEFAULT_WORKING_DAYS_PER_MONTH):
    salary = to_decimal(monthly_salary, 'monthly_salary')
    return salary / _to_divisor(working_days_per_month, 'working_days_per_month')


# --- PAY COMPONENTS ---
def calculate_overtime_pay(hourly_rate, overtime_hours, multiplier=OVERTIME_MULTIPLIER):
    """
    Overtime pay, rounded to centavos.

    The default 1.25 factor is regular-day overtime; pass the factor for
    rest-day or holiday overtime explicitly.
    """
    rate = to_decimal(hourly_rate, 'hourly_rate')
    hours = to_decimal(overtime_hours, 'overtime_hours')
    factor = to_decimal(multiplier, 'overtime_multiplier')
    return round_money(rate * hours * factor)


def calculate_night_differential(hourly_rate, night_hours):
    """10% premium on hours already known to fall between 10 PM and 6 AM."""
    rate = to_decimal(hourly_rate, 'hourly_rate')
    hours = to_decimal(night_hours, 'night_hours')
    return round_money(rate * hours * NIGHT_DIFFERENTIAL_RATE)


def calculate_holiday_pay(daily_rate, holiday_type='regular'):
    """200% of the daily rate for regular holidays, 130% for special ones. Not rounded."""
    rate = to_decimal(daily_rate, 'daily_rate')
    return rate * HOLIDAY_PAY_MULTIPLIERS[_to_holiday_type(holiday_type)]


# --- INPUT / RESULT ---
class PayrollCalculationInput:
    """
    Every option accepted by calculate_complete_payroll, with its default.

    Values are converted to Decimal and validated on construction, so an
    instance that exists is always safe to compute with.
    """

    # camelCase keys used by stored employee/payroll records
    FIELD_ALIASES = {
        'basicSalary': 'basic_salary',
        'overtimeHours': 'overtime_hours',
        'nightHours': 'night_hours',
        'holidayDays': 'holiday_days',
        'holidayType': 'holiday_type',
        'otherAllowances': 'other_allowances',
        'absences': 'absences',
        'lateDeductions': 'late_deductions',
        'workingHoursPerMonth': 'working_hours_per_month',
        'workingDaysPerMonth': 'working_days_per_month',
        'overtimeMultiplier': 'overtime_multiplier',
    }

    def __init__(self, basic_salary, overtime_hours=0, night_hours=0, holiday_days=0,
                 holiday_type='regular', other_allowances=0, absences=0, late_deductions=0,
                 working_hours_per_month=DEFAULT_WORKING_HOURS_PER_MONTH,
                 working_days_per_month=DEFAULT_WORKING_DAYS_PER_MONTH,
                 overtime_multiplier=OVERTIME_MULTIPLIER):
        if basic_salary is None:
            raise InvalidParameter('basic_salary', 'is required')
        self.basic_salary = to_decimal(basic_salary, 'basic_salary')
        self.overtime_hours = to_decimal(overtime_hours, 'overtime_hours')
        self.night_hours = to_decimal(night_hours, 'night_hours')
        self.holiday_days = to_decimal(holiday_days, 'holiday_days')
        self.holiday_type = _to_holiday_type(holiday_type)
        self.other_allowances = to_decimal(other_allowances, 'other_allowances')
        self.absences = to_decimal(absences, 'absences')
        self.late_deductions = to_decimal(late_deductions, 'late_deductions')
        self.working_hours_per_month = _to_divisor(working_hours_per_month, 'working_hours_per_month')
        self.working_days_per_month = _to_divisor(working_days_per_month, 'working_days_per_month')
        self.overtime_multiplier = to_decimal(overtime_multiplier, 'overtime_multiplier')

    @classmethod
    def from_dict(cls, data):
        """Builds an input from a record-like mapping; None counts as omitted."""
        options = {}
        for key, value in data.items():
            field = cls.FIELD_ALIASES.get(key, key)
            if field in cls.FIELD_ALIASES.values() and value is not None:
                options[field] = value
        if 'basic_salary' not in options:
            raise InvalidParameter('basic_salary', 'is required')
        return cls(**options)

    def __repr__(self):
        return f'<PayrollCalculationInput basic_salary={self.basic_salary}>'


_RESULT_FIELDS = [
    ('basic_salary', 'basicSalary'),
    ('overtime_pay', 'overtimePay'),
    ('holiday_pay', 'holidayPay'),
    ('night_differential', 'nightDifferential'),
    ('gross_pay', 'grossPay'),
    ('sss_contribution', 'sssContribution'),
    ('philhealth_contribution', 'philhealthContribution'),
    ('pagibig_contribution', 'pagibigContribution'),
    ('withholding_tax', 'withholdingTax'),
    ('total_deductions', 'totalDeductions'),
    ('net_pay', 'netPay'),
]


class PayrollCalculationResult(namedtuple('PayrollCalculationResult',
                                          [name for name, _ in _RESULT_FIELDS])):
    __slots__ = ()

    def to_dict(self):
        """camelCase mapping in the shape the payroll record store keeps."""
        return {key: getattr(self, name) for name, key in _RESULT_FIELDS}


# --- MAIN CALCULATOR FUNCTION ---
def calculate_complete_payroll(params):
    """
    Computes a payroll from scratch for one employee and cutoff.

    Args:
        params (PayrollCalculationInput | Mapping): The payroll inputs. A
            mapping is validated through PayrollCalculationInput.from_dict.

    Returns:
        PayrollCalculationResult. Contributions, totals and gross/net pay are
        rounded to centavos; the earnings components keep their own precision.

    This is the computation path for raw hours and allowances. Records whose
    components are already populated are recomputed with
    PayrollRecord.calculate_all, which uses a different gross pay formula.
    """
    if isinstance(params, Mapping):
        params = PayrollCalculationInput.from_dict(params)
    elif not isinstance(params, PayrollCalculationInput):
        raise InvalidParameter('params', 'expected PayrollCalculationInput or a mapping')

    basic_salary = params.basic_salary

    # 1. Rates
    hourly_rate = get_hourly_rate(basic_salary, params.working_hours_per_month)
    daily_rate = get_daily_rate(basic_salary, params.working_days_per_month)

    # 2. Earnings
    overtime_pay = calculate_overtime_pay(hourly_rate, params.overtime_hours, params.overtime_multiplier)
    night_differential = calculate_night_differential(hourly_rate, params.night_hours)
    if params.holiday_days > 0:
        holiday_pay = calculate_holiday_pay(daily_rate, params.holiday_type) * params.holiday_days
    else:
        holiday_pay = ZERO

    gross_pay = (basic_salary + overtime_pay + night_differential + holiday_pay
                 + params.other_allowances - params.absences - params.late_deductions)

    # 3. Statutory deductions (based on basic salary only, as required by law)
    sss = calculate_sss(basic_salary)
    philhealth = calculate_philhealth(basic_salary)
    pagibig = calculate_pagibig(basic_salary)

    # Contributions are non-taxable; the remainder is fed in as the monthly basis
    taxable_income = gross_pay - sss - philhealth - pagibig
    withholding_tax = calculate_withholding_tax(basic_salary, taxable_income / 12)

    # 4. Totals
    sss = round_money(sss)
    philhealth = round_money(philhealth)
    pagibig = round_money(pagibig)
    total_deductions = sss + philhealth + pagibig + withholding_tax
    net_pay = max(ZERO, gross_pay - total_deductions)

    logger.debug('Computed payroll for basic salary %s: gross=%s deductions=%s net=%s',
                 basic_salary, gross_pay, total_deductions, net_pay)

    return PayrollCalculationResult(
        basic_salary=basic_salary,
        overtime_pay=overtime_pay,
        holiday_pay=holiday_pay,
        night_differential=night_differential,
        gross_pay=round_money(gross_pay),
        sss_contribution=sss,
        philhealth_contribution=philhealth,
        pagibig_contribution=pagibig,
        withholding_tax=withholding_tax,
        total_deductions=total_deductions,
        net_pay=round_money(net_pay),
    )
