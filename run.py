# run.py

import os
from ph_payroll import create_app
from ph_payroll.payroll.calculator import PayrollCalculationInput, calculate_complete_payroll
from ph_payroll.payroll.records import PayrollRecord, summarize_payroll_run


app = create_app(os.environ.get('FLASK_ENV', 'default'))

@app.shell_context_processor
def make_shell_context():
    """Adds the payroll engine entry points to the Flask shell."""
    return dict(PayrollCalculationInput=PayrollCalculationInput,
                calculate_complete_payroll=calculate_complete_payroll,
                PayrollRecord=PayrollRecord,
                summarize_payroll_run=summarize_payroll_run)
