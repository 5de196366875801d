"""
Licenses module - signed license lifecycle.

This module handles:
- License entity and its canonical signed form
- Issuing, validating and renewing licenses
- Signing backends for the key-management service
"""
