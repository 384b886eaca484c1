__all__ = ["number"]
