# Storage implementations for drivers
