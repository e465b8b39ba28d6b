# MapConfig GUI
"""
Qt collaborators for MapConfig.

Modules:
- config: Persistent user settings
- dialogs: Confirmation and file picker dialogs
- workers: Background map read/export workers
"""
