# MapConfig Core Module
"""
Core business logic module for MapConfig.

Contains:
- Path and URL resolution
- Layer and map normalization
- Layer configuration lookup on disk
- Map load/export
- Layer configuration builders
"""
