"""
db/ - Database Layer
====================
Handles PostgreSQL connections, schema initialization (tables, constraints and
the average-rating trigger) and the data-layer error taxonomy.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
