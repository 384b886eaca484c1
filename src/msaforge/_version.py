__version__ = "2026.10.18a1"
