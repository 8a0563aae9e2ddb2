"""
Utility functions and helpers.

Modules:
- files: JSON/text writing helpers
- redact: Masking of credentials in error messages
- retry: Exponential backoff for LLM calls
"""
