import string
from datetime import date

from hr_payroll.employees.codes import generate_employee_code, generate_temporary_password


def test_employee_code_format():
    code = generate_employee_code("John", "Doe", "Odoo India", date(2022, 5, 1), 1)
    assert code == "ODINJODO20220001"


def test_company_part_is_capped_at_four_letters():
    code = generate_employee_code("al", "X", "Acme Big Corp", date(2025, 1, 1), 123)
    assert code == "ACBIALX20250123"


def test_temporary_password_mixes_character_classes():
    password = generate_temporary_password()

    assert len(password) == 12
    assert any(c in string.ascii_uppercase for c in password)
    assert any(c in string.ascii_lowercase for c in password)
    assert any(c in string.digits for c in password)
    assert any(c in "!@#$%^&*" for c in password)
