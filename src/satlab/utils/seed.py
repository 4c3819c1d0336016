"""Seedable random streams for reproducible solver runs."""

import numpy as np


def fresh_seed() -> int:
    """Draw a new seed from OS entropy."""
    return int(np.random.SeedSequence().entropy)


def make_rng(seed: int | None = None) -> np.random.Generator:
    """
    Create a random stream that remembers its seed.

    Args:
        seed: Seed to use, or None to draw one from OS entropy

    Returns:
        A numpy Generator whose seed can be read back with ``rng_seed``
    """
    if seed is None:
        seed = fresh_seed()
    return np.random.default_rng(np.random.SeedSequence(seed))


def rng_seed(rng: np.random.Generator) -> int | None:
    """Return the seed a generator was created from, if it has one."""
    seed_seq = getattr(rng.bit_generator, "seed_seq", None)
    if isinstance(seed_seq, np.random.SeedSequence):
        return int(seed_seq.entropy)
    return None
