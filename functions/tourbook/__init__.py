"""
Backend package for the tour booking site.

This package provides a FastAPI application serving the public tour catalog,
the WhatsApp booking hand-off and the admin back office, on top of storage
and database abstractions that fall back to in-memory implementations for
local runs and tests.
"""
