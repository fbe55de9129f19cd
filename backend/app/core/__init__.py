# app/core/__init__.py
"""
Core application modules.
Contains the dependency-free building blocks of the pipeline:
- errors: Typed error taxonomy shared by services and the HTTP layer
- hashing: Cache key and blob path derivation
- metrics: In-process cache hit/miss counters
"""
