"""HRMS attendance-to-payroll core.

The package is organized by feature modules (attendance, geofence, payroll, ...)
with Protocol-based repositories and plain service classes. HTTP routing,
authentication and rendering live outside this package.
"""
