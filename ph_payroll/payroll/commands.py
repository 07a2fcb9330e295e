# ph_payroll/payroll/commands.py

import json
from decimal import Decimal

import click
from flask import current_app

from ph_payroll.payroll import bp
from .calculator import HOLIDAY_PAY_MULTIPLIERS, PayrollCalculationInput, calculate_complete_payroll
from .contributions import (
    SSS_MAX_CONTRIBUTION,
    calculate_pagibig,
    calculate_philhealth,
    calculate_withholding_tax,
    find_sss_bracket,
    round_money,
    to_decimal,
)
from .errors import InvalidParameter
from .records import PayrollRecord


class DecimalAmount(click.ParamType):
    """Click type parsing a command-line number straight into a Decimal."""
    name = 'amount'

    def __init__(self, allow_negative=False):
        self.allow_negative = allow_negative

    def convert(self, value, param, ctx):
        if isinstance(value, Decimal):
            return value
        field = param.name if param else 'value'
        try:
            return to_decimal(value, field, allow_negative=self.allow_negative)
        except InvalidParameter as e:
            self.fail(e.message, param, ctx)


AMOUNT = DecimalAmount()
SIGNED_AMOUNT = DecimalAmount(allow_negative=True)

RESULT_LABELS = [
    ('basic_salary', 'Basic Salary'),
    ('overtime_pay', 'Overtime Pay'),
    ('night_differential', 'Night Differential'),
    ('holiday_pay', 'Holiday Pay'),
    ('gross_pay', 'Gross Pay'),
    ('sss_contribution', 'SSS'),
    ('philhealth_contribution', 'PhilHealth'),
    ('pagibig_contribution', 'Pag-IBIG'),
    ('withholding_tax', 'Withholding Tax'),
    ('total_deductions', 'Total Deductions'),
    ('net_pay', 'Net Pay'),
]


def _echo_amount(label, amount):
    click.echo(f'{label + ":":<22}{round_money(amount):>14}')


@bp.cli.command('calculate')
@click.option('--basic-salary', type=AMOUNT, required=True, help='Monthly basic salary.')
@click.option('--overtime-hours', type=AMOUNT, default='0', show_default=True)
@click.option('--night-hours', type=AMOUNT, default='0', show_default=True,
              help='Hours worked between 10 PM and 6 AM.')
@click.option('--holiday-days', type=AMOUNT, default='0', show_default=True)
@click.option('--holiday-type', type=click.Choice(list(HOLIDAY_PAY_MULTIPLIERS)),
              default='regular', show_default=True)
@click.option('--other-allowances', type=AMOUNT, default='0', show_default=True)
@click.option('--absences', type=AMOUNT, default='0', show_default=True)
@click.option('--late-deductions', type=AMOUNT, default='0', show_default=True)
@click.option('--working-hours-per-month', type=AMOUNT, default=None,
              help='Defaults to PAYROLL_WORKING_HOURS_PER_MONTH.')
@click.option('--working-days-per-month', type=AMOUNT, default=None,
              help='Defaults to PAYROLL_WORKING_DAYS_PER_MONTH.')
@click.option('--overtime-multiplier', type=AMOUNT, default=None,
              help='Defaults to PAYROLL_OVERTIME_MULTIPLIER.')
@click.option('--json', 'as_json', is_flag=True, help='Print the result as JSON.')
def calculate(as_json, working_hours_per_month, working_days_per_month, overtime_multiplier, **options):
    """Compute a complete payroll from salary, hours and allowances."""
    if working_hours_per_month is None:
        working_hours_per_month = current_app.config['PAYROLL_WORKING_HOURS_PER_MONTH']
    if working_days_per_month is None:
        working_days_per_month = current_app.config['PAYROLL_WORKING_DAYS_PER_MONTH']
    if overtime_multiplier is None:
        overtime_multiplier = current_app.config['PAYROLL_OVERTIME_MULTIPLIER']

    try:
        params = PayrollCalculationInput(
            working_hours_per_month=working_hours_per_month,
            working_days_per_month=working_days_per_month,
            overtime_multiplier=overtime_multiplier,
            **options
        )
    except InvalidParameter as e:
        raise click.UsageError(str(e))

    result = calculate_complete_payroll(params)
    current_app.logger.info('Payroll calculated: basic=%s gross=%s net=%s',
                            result.basic_salary, result.gross_pay, result.net_pay)

    if as_json:
        click.echo(json.dumps({key: str(value) for key, value in result.to_dict().items()}, indent=2))
        return

    for field, label in RESULT_LABELS:
        _echo_amount(label, getattr(result, field))


@bp.cli.command('contributions')
@click.argument('salary', type=AMOUNT)
def contributions(salary):
    """Show the statutory deductions for a monthly SALARY."""
    bracket = find_sss_bracket(salary)
    if bracket is None:
        _echo_amount('SSS', SSS_MAX_CONTRIBUTION)
        click.echo('  (no matching bracket, maximum contribution applied)')
    else:
        upper = bracket.max_salary if bracket.max_salary is not None else 'and above'
        _echo_amount('SSS', bracket.employee_share)
        click.echo(f'  bracket {bracket.min_salary} - {upper}, employer share {bracket.employer_share}')

    _echo_amount('PhilHealth', calculate_philhealth(salary))
    _echo_amount('Pag-IBIG', calculate_pagibig(salary))
    _echo_amount('Withholding Tax', calculate_withholding_tax(salary))


@bp.cli.command('recompute')
@click.option('--basic-salary', type=AMOUNT, default='0')
@click.option('--holiday-pay', type=AMOUNT, default='0')
@click.option('--night-differential', type=AMOUNT, default='0')
@click.option('--salary-adjustment', type=SIGNED_AMOUNT, default='0')
@click.option('--absences', type=AMOUNT, default='0')
@click.option('--late-deductions', type=AMOUNT, default='0')
@click.option('--sss', 'sss_contribution', type=AMOUNT, default='0')
@click.option('--philhealth', 'philhealth_contribution', type=AMOUNT, default='0')
@click.option('--pagibig', 'pagibig_contribution', type=AMOUNT, default='0')
@click.option('--withholding-tax', type=AMOUNT, default='0')
def recompute(**amounts):
    """Recompute totals of a payroll record whose components are already filled in."""
    record = PayrollRecord(**amounts)
    totals = record.calculate_all()

    _echo_amount('Gross Pay', totals['grossPay'])
    _echo_amount('Total Deductions', totals['totalDeductions'])
    _echo_amount('Net Pay', totals['netPay'])
