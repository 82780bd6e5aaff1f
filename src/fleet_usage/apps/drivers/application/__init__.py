# Application package for drivers
