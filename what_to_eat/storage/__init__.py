"""
SQLite storage layer.

Responsibilities:
- Resolve the database location from configuration.
- Open short-lived connections with a busy timeout.
- Create the catalog and decision tables on first start.
"""
