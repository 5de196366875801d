"""
Core module for shared domain infrastructure.

This module contains:
- Domain events and exceptions
- Event bus and audit logging
- Observability middleware, metrics and tracing
"""
