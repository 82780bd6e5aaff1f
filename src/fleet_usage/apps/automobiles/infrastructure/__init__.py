# Storage implementations for automobiles
