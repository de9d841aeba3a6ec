"""Command entry points and the task scheduler."""
