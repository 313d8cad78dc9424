"""Core building blocks: settings, errors, logging and subprocess helpers."""
