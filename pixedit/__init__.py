"""
PixEdit - A minimal raster image editor with annotation and screen capture.

This package contains the main application modules:
- core: Application core, collaborators (file, clipboard, capture, hotkeys)
- editor: Raster surface, tools, history, viewport and editor widgets
- services: Application services (config, logging)
- ui: Top-level windows
"""

__version__ = "0.1.0"
