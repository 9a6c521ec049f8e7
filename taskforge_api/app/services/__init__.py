"""
Service layer.

``TaskStore`` wraps the SQLite table and ``TaskService`` applies the
ownership and update rules on top of it, so API handlers never touch
SQL directly.
"""
