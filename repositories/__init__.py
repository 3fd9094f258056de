"""
repositories/ - Data Access Layer
==================================
Each repository encapsulates all SQL queries for a specific table.
Queries always use bound parameters. Repositories return domain model objects
and raise the errors defined in db/errors.py.
"""
