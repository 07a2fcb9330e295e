# ph_payroll/payroll/contributions.py

import logging
from collections import namedtuple
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from .errors import InvalidParameter

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')
ZERO = Decimal('0.00')


# --- HELPERS ---
def to_decimal(value, field, allow_negative=False):
    """Converts a caller-supplied number to Decimal, rejecting NaN/Infinity."""
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value))
        except InvalidOperation:
            raise InvalidParameter(field, f'{value!r} is not a number') from None

    if not amount.is_finite():
        raise InvalidParameter(field, 'must be a finite number')
    if not allow_negative and amount < 0:
        raise InvalidParameter(field, 'cannot be negative')
    return amount


def round_money(amount):
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


# --- SSS CONTRIBUTION TABLE (2024) ---
# max_salary is inclusive; None marks the unbounded top bracket.
class SalaryBracket(namedtuple('SalaryBracket', [
        'min_salary', 'max_salary', 'employee_share', 'employer_share', 'total'])):
    __slots__ = ()

    def matches(self, salary):
        if salary < self.min_salary:
            return False
        return self.max_salary is None or salary <= self.max_salary


SSS_TABLE = (
    SalaryBracket(Decimal('0.00'), Decimal('4249.99'), Decimal('180.00'), Decimal('630.00'), Decimal('810.00')),
    SalaryBracket(Decimal('4250.00'), Decimal('4749.99'), Decimal('202.50'), Decimal('708.75'), Decimal('911.25')),
    SalaryBracket(Decimal('4750.00'), Decimal('5249.99'), Decimal('225.00'), Decimal('787.50'), Decimal('1012.50')),
    SalaryBracket(Decimal('5250.00'), Decimal('5749.99'), Decimal('247.50'), Decimal('866.25'), Decimal('1113.75')),
    SalaryBracket(Decimal('5750.00'), Decimal('6249.99'), Decimal('270.00'), Decimal('945.00'), Decimal('1215.00')),
    SalaryBracket(Decimal('6250.00'), Decimal('6749.99'), Decimal('292.50'), Decimal('1023.75'), Decimal('1316.25')),
    SalaryBracket(Decimal('6750.00'), Decimal('7249.99'), Decimal('315.00'), Decimal('1102.50'), Decimal('1417.50')),
    SalaryBracket(Decimal('7250.00'), Decimal('7749.99'), Decimal('337.50'), Decimal('1181.25'), Decimal('1518.75')),
    SalaryBracket(Decimal('7750.00'), Decimal('8249.99'), Decimal('360.00'), Decimal('1260.00'), Decimal('1620.00')),
    SalaryBracket(Decimal('8250.00'), Decimal('8749.99'), Decimal('382.50'), Decimal('1338.75'), Decimal('1721.25')),
    SalaryBracket(Decimal('8750.00'), Decimal('9249.99'), Decimal('405.00'), Decimal('1417.50'), Decimal('1822.50')),
    SalaryBracket(Decimal('9250.00'), Decimal('9749.99'), Decimal('427.50'), Decimal('1496.25'), Decimal('1923.75')),
    SalaryBracket(Decimal('9750.00'), Decimal('10249.99'), Decimal('450.00'), Decimal('1575.00'), Decimal('2025.00')),
    SalaryBracket(Decimal('10250.00'), Decimal('10749.99'), Decimal('472.50'), Decimal('1653.75'), Decimal('2126.25')),
    SalaryBracket(Decimal('10750.00'), Decimal('11249.99'), Decimal('495.00'), Decimal('1732.50'), Decimal('2227.50')),
    SalaryBracket(Decimal('11250.00'), Decimal('11749.99'), Decimal('517.50'), Decimal('1811.25'), Decimal('2328.75')),
    SalaryBracket(Decimal('11750.00'), Decimal('12249.99'), Decimal('540.00'), Decimal('1890.00'), Decimal('2430.00')),
    SalaryBracket(Decimal('12250.00'), Decimal('12749.99'), Decimal('562.50'), Decimal('1968.75'), Decimal('2531.25')),
    SalaryBracket(Decimal('12750.00'), Decimal('13249.99'), Decimal('585.00'), Decimal('2047.50'), Decimal('2632.50')),
    SalaryBracket(Decimal('13250.00'), Decimal('13749.99'), Decimal('607.50'), Decimal('2126.25'), Decimal('2733.75')),
    SalaryBracket(Decimal('13750.00'), Decimal('14249.99'), Decimal('630.00'), Decimal('2205.00'), Decimal('2835.00')),
    SalaryBracket(Decimal('14250.00'), Decimal('14749.99'), Decimal('652.50'), Decimal('2283.75'), Decimal('2936.25')),
    SalaryBracket(Decimal('14750.00'), Decimal('15249.99'), Decimal('675.00'), Decimal('2362.50'), Decimal('3037.50')),
    SalaryBracket(Decimal('15250.00'), Decimal('15749.99'), Decimal('697.50'), Decimal('2441.25'), Decimal('3138.75')),
    SalaryBracket(Decimal('15750.00'), Decimal('16249.99'), Decimal('720.00'), Decimal('2520.00'), Decimal('3240.00')),
    SalaryBracket(Decimal('16250.00'), Decimal('16749.99'), Decimal('742.50'), Decimal('2598.75'), Decimal('3341.25')),
    SalaryBracket(Decimal('16750.00'), Decimal('17249.99'), Decimal('765.00'), Decimal('2677.50'), Decimal('3442.50')),
    SalaryBracket(Decimal('17250.00'), Decimal('17749.99'), Decimal('787.50'), Decimal('2756.25'), Decimal('3543.75')),
    SalaryBracket(Decimal('17750.00'), Decimal('18249.99'), Decimal('810.00'), Decimal('2835.00'), Decimal('3645.00')),
    SalaryBracket(Decimal('18250.00'), Decimal('18749.99'), Decimal('832.50'), Decimal('2913.75'), Decimal('3746.25')),
    SalaryBracket(Decimal('18750.00'), Decimal('19249.99'), Decimal('855.00'), Decimal('2992.50'), Decimal('3847.50')),
    SalaryBracket(Decimal('19250.00'), Decimal('19749.99'), Decimal('877.50'), Decimal('3071.25'), Decimal('3948.75')),
    SalaryBracket(Decimal('19750.00'), Decimal('20249.99'), Decimal('900.00'), Decimal('3150.00'), Decimal('4050.00')),
    SalaryBracket(Decimal('20250.00'), Decimal('20749.99'), Decimal('922.50'), Decimal('3228.75'), Decimal('4151.25')),
    SalaryBracket(Decimal('20750.00'), Decimal('21249.99'), Decimal('945.00'), Decimal('3307.50'), Decimal('4252.50')),
    SalaryBracket(Decimal('21250.00'), Decimal('21749.99'), Decimal('967.50'), Decimal('3386.25'), Decimal('4353.75')),
    SalaryBracket(Decimal('21750.00'), Decimal('22249.99'), Decimal('990.00'), Decimal('3465.00'), Decimal('4455.00')),
    SalaryBracket(Decimal('22250.00'), Decimal('22749.99'), Decimal('1012.50'), Decimal('3543.75'), Decimal('4556.25')),
    SalaryBracket(Decimal('22750.00'), Decimal('23249.99'), Decimal('1035.00'), Decimal('3622.50'), Decimal('4657.50')),
    SalaryBracket(Decimal('23250.00'), Decimal('23749.99'), Decimal('1057.50'), Decimal('3701.25'), Decimal('4758.75')),
    SalaryBracket(Decimal('23750.00'), Decimal('24249.99'), Decimal('1080.00'), Decimal('3780.00'), Decimal('4860.00')),
    SalaryBracket(Decimal('24250.00'), Decimal('24749.99'), Decimal('1102.50'), Decimal('3858.75'), Decimal('4961.25')),
    SalaryBracket(Decimal('24750.00'), Decimal('29999.99'), Decimal('1125.00'), Decimal('3937.50'), Decimal('5062.50')),
    SalaryBracket(Decimal('30000.00'), None, Decimal('1350.00'), Decimal('4725.00'), Decimal('6075.00')),
)

SSS_MAX_CONTRIBUTION = Decimal('1350.00')


def find_sss_bracket(monthly_salary):
    """Returns the SSS bracket covering the salary, or None if the table has no match."""
    salary = to_decimal(monthly_salary, 'monthly_salary')
    for bracket in SSS_TABLE:
        if bracket.matches(salary):
            return bracket
    return None


def calculate_sss(monthly_salary):
    """Calculates the employee's share of SSS contribution from the table."""
    bracket = find_sss_bracket(monthly_salary)
    if bracket is None:
        logger.warning('No SSS bracket matched salary %s; using maximum contribution', monthly_salary)
        return SSS_MAX_CONTRIBUTION
    return bracket.employee_share


# --- PHILHEALTH CONTRIBUTION (2024) ---
# 5% premium split 50/50; salary floor 10,000 and ceiling 100,000.
PHILHEALTH_RATE = Decimal('0.05')
PHILHEALTH_FLOOR = Decimal('10000.00')
PHILHEALTH_CEILING = Decimal('99999.99')
PHILHEALTH_MIN_SHARE = Decimal('250.00')
PHILHEALTH_MAX_SHARE = Decimal('2500.00')


def calculate_philhealth(monthly_salary):
    """Calculates the employee's share of PhilHealth contribution."""
    salary = to_decimal(monthly_salary, 'monthly_salary')

    if salary <= PHILHEALTH_FLOOR:
        return PHILHEALTH_MIN_SHARE
    elif salary <= PHILHEALTH_CEILING:
        return min(salary * PHILHEALTH_RATE / 2, PHILHEALTH_MAX_SHARE)
    return PHILHEALTH_MAX_SHARE


# --- PAG-IBIG (HDMF) CONTRIBUTION ---
PAGIBIG_LOW_INCOME_CEILING = Decimal('1500.00')
PAGIBIG_LOW_RATE = Decimal('0.01')
PAGIBIG_RATE = Decimal('0.02')
PAGIBIG_MAX_SHARE = Decimal('100.00')


def calculate_pagibig(monthly_salary):
    """Calculates the employee's share of Pag-IBIG contribution."""
    salary = to_decimal(monthly_salary, 'monthly_salary')

    # 1% if salary is 1,500 or less, otherwise 2% capped at P100.00
    if salary <= PAGIBIG_LOW_INCOME_CEILING:
        return salary * PAGIBIG_LOW_RATE
    return min(salary * PAGIBIG_RATE, PAGIBIG_MAX_SHARE)


# --- WITHHOLDING TAX (TRAIN LAW, ANNUAL BRACKETS) ---
# (upper_bound, base_tax, excess_over, rate); None marks the top bracket
TAX_TABLE = [
    (Decimal('250000'), Decimal('0'), Decimal('0'), Decimal('0')),
    (Decimal('400000'), Decimal('0'), Decimal('250000'), Decimal('0.15')),
    (Decimal('800000'), Decimal('22500'), Decimal('400000'), Decimal('0.20')),
    (Decimal('2000000'), Decimal('102500'), Decimal('800000'), Decimal('0.25')),
    (Decimal('8000000'), Decimal('402500'), Decimal('2000000'), Decimal('0.30')),
    (None, Decimal('2202500'), Decimal('8000000'), Decimal('0.35')),
]


def calculate_annual_tax(annual_taxable):
    annual_taxable = to_decimal(annual_taxable, 'annual_taxable', allow_negative=True)

    if annual_taxable <= TAX_TABLE[0][0]:
        return ZERO
    for upper_bound, base_tax, excess_over, rate in TAX_TABLE[1:]:
        if upper_bound is None or annual_taxable <= upper_bound:
            return base_tax + (annual_taxable - excess_over) * rate


def calculate_withholding_tax(monthly_salary, taxable_income=None):
    """
    Calculates the monthly withholding tax.

    The annual tax is computed on ``taxable_income`` (a monthly figure) when
    given, otherwise on ``monthly_salary``, and spread evenly over 12 months.
    """
    if taxable_income is None:
        monthly_taxable = to_decimal(monthly_salary, 'monthly_salary')
    else:
        monthly_taxable = to_decimal(taxable_income, 'taxable_income', allow_negative=True)

    annual_tax = calculate_annual_tax(monthly_taxable * 12)
    return round_money(annual_tax / 12)


def calculate_statutory_contributions(monthly_salary):
    """Employee shares of the three fixed-rate contributions for one salary."""
    return {
        'sss': calculate_sss(monthly_salary),
        'philhealth': calculate_philhealth(monthly_salary),
        'pagibig': calculate_pagibig(monthly_salary),
    }
