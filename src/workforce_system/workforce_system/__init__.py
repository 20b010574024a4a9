"""Workforce System package.

Feature modules (ladders, deviations, timesheets, payroll) each carry a
model, a repository protocol with a MySQL implementation, a service and a
thin Flask controller.
"""
