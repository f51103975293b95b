"""Core package: data models, enums and exceptions."""
