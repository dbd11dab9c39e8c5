"""
CLI (Command Line Interface) for the Page Difference Tool.

This is a thin wrapper around the core engine. All business logic lives
in the pagediff package to ensure reusability for future API implementations.
"""
