# MapConfig - Source Package
"""
MapConfig: map configuration loading and export for a desktop map editor.

This package provides:
- Normalization of legacy map/layer configuration files
- Base path resolution for local and remote maps
- Portable export of map configurations
- Qt dialogs and workers for interactive load/save
"""

__version__ = "0.1.0"
