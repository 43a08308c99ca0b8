"""Bookstore catalog services.

This package contains the book-record lifecycle layer shared by the
single-operation services (create, read, update, delete), the seeding job
and the presentation gateway, together with their storage, configuration
and HTTP infrastructure.
"""

__version__ = "0.1.0"
