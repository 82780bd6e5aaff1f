"""
Automobile usage tracking.

Records which driver uses which automobile between a start and an end date,
and enforces that a driver holds at most one open usage at a time.
"""
