"""Employee management backend: attendance, sales, materials and payroll cycles."""

__version__ = "0.1.0"
