"""Foundation layer: error types, configuration, and test doubles."""
