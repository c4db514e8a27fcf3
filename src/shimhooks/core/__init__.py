"""Core hook execution and configuration for shimhooks."""
