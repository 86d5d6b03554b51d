"""
Per-domain repository modules for database access.

Repositories own commits; callers receive ORM instances.
"""
