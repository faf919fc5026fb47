"""
Base controller class.

Controllers wire services for one request, resolve tenant settings where a
service needs them, and convert ORM rows into response schemas.
"""

from abc import ABC


class BaseController(ABC):
    """Base class for request-scoped controllers."""
