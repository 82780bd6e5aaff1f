"""
Driver registry.

Keeps the drivers that can be assigned to automobiles and serves as the
driver lookup for usage registration.
"""
