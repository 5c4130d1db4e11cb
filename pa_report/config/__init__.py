"""
Configuration loading and validation for report settings.

Provides a strongly typed settings object loaded from environment variables
(and an optional .env file) with upfront validation.
"""
