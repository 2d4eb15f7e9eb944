"""
Application Layer for the workout progress engine.

This package contains:
- ports/: Abstract repository interfaces (what the core needs)
- use_cases/: Workflows that coordinate core services and repositories
- exceptions.py: Typed errors shared by every layer
"""
