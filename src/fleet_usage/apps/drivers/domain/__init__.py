# Domain package for drivers
