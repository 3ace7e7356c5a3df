"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Store keys, default names, GeoJSON file conventions
- exceptions: Custom exception hierarchy
"""
