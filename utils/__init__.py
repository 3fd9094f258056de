"""
utils/ - Shared helpers
=======================
Logging setup and parsing of `key:value` command arguments.
"""
