__all__ = [
    "alignment",
    "distance",
    "errors",
    "frame",
    "genetic_code",
    "moltype",
    "partition",
    "profile",
    "seq_storage",
    "simulate",
]
