"""NISECI and HFBI fish-community ecological quality index engines."""

__version__ = "0.1.0"
