"""Application packages: one per bounded area of the fleet service."""
