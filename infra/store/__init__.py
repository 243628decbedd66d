"""
Progress engine store implementations live here (infra adapters).

- memory_store: in-memory stores for tests and local runs
- sql_store: SQLAlchemy stores over the api.models tables
"""

__all__ = []
