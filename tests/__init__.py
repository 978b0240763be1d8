"""
Starship Commander Test Suite
=============================

Test Organization
-----------------
- tests/unit/          : Policy objects, validation and errors (no database)
- tests/integration/   : Services against in-memory SQLite, plus opt-in PostgreSQL
"""
