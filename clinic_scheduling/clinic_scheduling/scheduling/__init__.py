"""
Scheduling Services Module

This module provides core business logic for appointment scheduling:
- Time arithmetic (time_utils.py)
- Special days and opening hours (special_days.py, availability.py)
- Conflict detection (conflicts.py)
- Slot generation for UI (slots.py)
- Read interface and its Frappe implementation (store.py, frappe_store.py)
"""
