__all__ = ["rng", "stats", "util"]
