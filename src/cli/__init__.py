"""
CLI (Command Line Interface) for the Multi-Device Site Audit tool.

This is a thin wrapper around the core engine. All business logic lives
in the audit_engine package to ensure reusability for future API implementations.
"""
