"""Configuration, constants, models and exceptions."""
