"""Runtime layer: retry driver, strategies, scheduling and logging."""
