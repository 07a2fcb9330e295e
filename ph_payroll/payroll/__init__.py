# ph_payroll/payroll/__init__.py

from flask import Blueprint

# CLI-only blueprint: commands live under `flask payroll ...`
bp = Blueprint('payroll', __name__, cli_group='payroll')

from . import commands
