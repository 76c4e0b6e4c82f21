from .logger import setup_logging
from .hashing import sha256_hash, fingerprint
from .rounding import ComputationError, ensure_finite, round_half_away, round_int

__all__ = [
    "setup_logging",
    "sha256_hash",
    "fingerprint",
    "ComputationError",
    "ensure_finite",
    "round_half_away",
    "round_int",
]
