"""Git process driver, state inspection and preflight validation."""
