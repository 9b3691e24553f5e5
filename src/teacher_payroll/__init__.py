"""Teacher payroll & attendance-deduction engine.

This package is organized by feature modules (schedules, attendance,
deductions, bonuses, payroll, ...) with a thin Flask controller layer on top
of service/repository layers.
"""
