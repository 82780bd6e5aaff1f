# Application package for automobile usage
"""
Validation of raw payloads and the service that coordinates lookups,
the exclusivity check and store writes.
"""
