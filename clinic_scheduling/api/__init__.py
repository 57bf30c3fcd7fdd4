"""
Clinic Scheduling API

Structure:
    api/
    ├── __init__.py      # This file
    ├── booking.py       # Whitelisted booking endpoints
    └── security.py      # Rate limiting and input validation

Usage:
    frappe.call("clinic_scheduling.api.booking.check_slot", ...)
"""
