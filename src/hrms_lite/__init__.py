"""HRMS Lite package.

Organized by feature modules (attendance, employees) with a thin Flask
controller layer on top of service/repository layers and a pluggable
document store underneath.
"""

__version__ = "1.0.0"
