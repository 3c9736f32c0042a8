"""
Shared utilities for services in this repository.
"""
