"""
timetabler - bookable time slots for a single service provider.
"""

__version__ = "0.1.0"
