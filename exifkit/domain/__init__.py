"""Domain layer: pure Python metadata logic, no process handling."""
