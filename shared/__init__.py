"""
Shared Kernel

Framework-light building blocks reused by every app: value objects,
input validation rules and REST API plumbing.
"""
