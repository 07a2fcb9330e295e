"""
Stored payroll record tests: recompute path, validation, status and run totals.
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from ph_payroll.payroll.calculator import PayrollCalculationInput, calculate_complete_payroll
from ph_payroll.payroll.errors import InvalidParameter
from ph_payroll.payroll.records import PayrollRecord, PayrollRunTotals, summarize_payroll_run


@pytest.fixture
def record():
    return PayrollRecord(
        employee_id="EMP-001",
        employee_name="Maria Santos",
        cutoff_start=date(2024, 1, 1),
        cutoff_end=date(2024, 1, 15),
        basic_salary=15000,
        holiday_pay=1000,
        night_differential=200,
        salary_adjustment=500,
        absences=300,
        late_deductions=100,
        sss_contribution=675,
        philhealth_contribution=375,
        pagibig_contribution=100,
        withholding_tax=0,
    )


class TestRecordRecompute:

    def test_calculate_all(self, record):
        totals = record.calculate_all()

        assert totals == {
            "grossPay": Decimal("16300"),
            "totalDeductions": Decimal("1150"),
            "netPay": Decimal("15150"),
        }
        assert record.gross_pay == Decimal("16300")
        assert record.total_deductions == Decimal("1150")
        assert record.net_pay == Decimal("15150")

    def test_gross_pay_ignores_overtime_hours(self, record):
        record.overtime_hours = Decimal("12")
        assert record.calculate_gross_pay() == Decimal("16300")

    def test_net_pay_is_not_clamped(self):
        record = PayrollRecord(basic_salary=1000, absences=900, sss_contribution=180, philhealth_contribution=250)

        totals = record.calculate_all()

        assert totals["grossPay"] == Decimal("100")
        assert totals["netPay"] == Decimal("-330")

    def test_negative_salary_adjustment(self, record):
        record.salary_adjustment = Decimal("-500")
        assert record.calculate_gross_pay() == Decimal("15300")

    def test_missing_amounts_default_to_zero(self):
        record = PayrollRecord(employee_id="EMP-002", basic_salary=12000)

        assert record.holiday_pay == 0
        assert record.withholding_tax == 0
        assert record.calculate_all()["netPay"] == Decimal("12000")

    def test_unknown_field(self):
        with pytest.raises(TypeError):
            PayrollRecord(employee_id="EMP-001", bonus=100)

    def test_non_numeric_amount(self):
        with pytest.raises(InvalidParameter) as exc:
            PayrollRecord(basic_salary="twelve thousand")
        assert exc.value.field == "basic_salary"


class TestRecordConversion:

    def test_from_dict_with_iso_timestamps(self):
        record = PayrollRecord.from_dict({
            "employeeId": "EMP-003",
            "employeeName": "Jose Rizal",
            "cutoffStart": "2024-02-01T00:00:00.000Z",
            "cutoffEnd": "2024-02-15",
            "basicSalary": 18000,
            "holidayPay": 1636.36,
            "status": "processed",
            "_id": "65b0c0ffee",
        })

        assert record.cutoff_start == date(2024, 2, 1)
        assert record.cutoff_end == date(2024, 2, 15)
        assert record.holiday_pay == Decimal("1636.36")
        assert record.status == "processed"
        assert record.key == ("EMP-003", date(2024, 2, 1), date(2024, 2, 15))

    def test_from_dict_defaults_status(self):
        record = PayrollRecord.from_dict({"employeeId": "EMP-004"})
        assert record.status == "pending"

    def test_datetime_cutoffs_become_dates(self):
        record = PayrollRecord(cutoff_start=datetime(2024, 3, 1, 8, 30))
        assert record.cutoff_start == date(2024, 3, 1)

    def test_bad_date(self):
        with pytest.raises(InvalidParameter) as exc:
            PayrollRecord(cutoff_end="03/15/2024")
        assert exc.value.field == "cutoff_end"

    def test_to_dict_round_trip_keys(self, record):
        data = record.to_dict()

        assert data["employeeId"] == "EMP-001"
        assert data["cutoffStart"] == "2024-01-01"
        assert data["salaryAdjustment"] == Decimal("500")
        assert PayrollRecord.from_dict(data).key == record.key

    def test_from_calculation(self):
        result = calculate_complete_payroll(PayrollCalculationInput(
            basic_salary=20000, overtime_hours=10, other_allowances=1000))

        record = PayrollRecord.from_calculation("EMP-005", "2024-04-01", "2024-04-30", result,
                                                employee_name="Ana Reyes", overtime_hours=10)

        assert record.gross_pay == result.gross_pay
        assert record.net_pay == result.net_pay
        assert record.sss_contribution == Decimal("900.00")
        assert record.overtime_hours == Decimal("10")
        assert record.validate() == []
        # the record formula knows nothing of overtime pay or allowances
        assert record.calculate_gross_pay() == Decimal("20000")


class TestRecordValidation:

    def test_valid_record(self, record):
        assert record.validate() == []

    def test_missing_fields(self):
        errors = PayrollRecord().validate()

        assert "Employee ID is required" in errors
        assert "Cutoff dates are required" in errors

    def test_cutoff_order(self, record):
        record.cutoff_end = date(2023, 12, 31)
        assert record.validate() == ["Cutoff end date must be on or after cutoff start date"]

    def test_negative_salary_and_hours(self, record):
        record.basic_salary = Decimal("-1")
        record.worked_hours = Decimal("-8")

        assert record.validate() == [
            "Basic salary cannot be negative",
            "Worked hours cannot be negative",
        ]

    def test_unknown_status(self, record):
        record.status = "archived"
        assert record.validate() == ["Unknown status 'archived'"]


class TestRecordStatus:

    def test_pending_to_processed_to_completed(self, record):
        record.mark_processed()
        assert record.status == "processed"

        record.mark_completed()
        assert record.status == "completed"

    def test_cannot_complete_pending_record(self, record):
        with pytest.raises(InvalidParameter) as exc:
            record.mark_completed()
        assert exc.value.field == "status"

    def test_cannot_process_twice(self, record):
        record.mark_processed()
        with pytest.raises(InvalidParameter):
            record.mark_processed()


class TestPayrollRunTotals:

    def test_summarize(self, record):
        record.calculate_all()
        other = PayrollRecord(employee_id="EMP-002", basic_salary=12000, sss_contribution=540)
        other.calculate_all()

        totals = summarize_payroll_run([record, other])

        assert totals == PayrollRunTotals(
            employee_count=2,
            total_gross_pay=Decimal("28300"),
            total_deductions=Decimal("1690"),
            total_net_pay=Decimal("26610"),
        )

    def test_summarize_calculation_results(self):
        results = [
            calculate_complete_payroll({"basicSalary": 20000}),
            calculate_complete_payroll({"basicSalary": 22000}),
        ]

        totals = summarize_payroll_run(results)

        assert totals.employee_count == 2
        assert totals.total_gross_pay == Decimal("42000.00")

    def test_empty_run(self):
        assert summarize_payroll_run([]) == PayrollRunTotals(0, 0, 0, 0)
