"""templecloud: multi-tenant temple sites."""

__version__ = "0.3.0"
