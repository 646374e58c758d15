"""Core configuration, logging and result types."""
