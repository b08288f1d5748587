"""
Core Infrastructure for fakeyou-client.

This package provides foundational components:
    - config.py: Configuration loading and validation
    - logging/: Structured logging with numeric levels
"""
