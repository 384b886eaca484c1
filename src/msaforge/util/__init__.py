__all__ = ["misc"]
