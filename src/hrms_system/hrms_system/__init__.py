"""HRMS package.

This package is organized by feature modules (employees, leave, attendance, ...)
with a thin Flask controller layer and service/repository layers underneath.
"""
