"""
Automobile registry.

Keeps the vehicles of the fleet and serves as the automobile lookup for usage
registration.
"""
