"""
Unique identifier generation for metadata entities.

Identifiers are the base64 text of 16 random bytes shaped as a version 4
UUID. The hyphenated hex form is never exposed.
"""

import base64
import random
import uuid
from typing import Optional

from ..config import config


class UniqueIdGenerator:
    """Produces opaque 24-character identifiers from an entropy source."""

    def __init__(self, rng: Optional[random.Random] = None):
        """
        Initialize the generator.

        Args:
            rng: Random source with ``getrandbits``; a seeded
                ``random.Random`` makes identifiers reproducible.
                Defaults to ``random.SystemRandom``.
        """
        self.rng = rng if rng is not None else random.SystemRandom()

    def generate(self) -> str:
        """Generate a new identifier."""
        raw = self.rng.getrandbits(128).to_bytes(16, 'big')
        # version 4, variant 10
        shaped = uuid.UUID(bytes=raw, version=4)
        return base64.b64encode(shaped.bytes).decode('ascii')


def _build_default_generator() -> UniqueIdGenerator:
    """Seeded when SIPREC_ID_SEED is configured, system entropy otherwise."""
    if config.ID_SEED is not None:
        return UniqueIdGenerator(random.Random(config.ID_SEED))
    return UniqueIdGenerator()


# Process default generator
_default_generator = _build_default_generator()


def get_default_generator() -> UniqueIdGenerator:
    """Get the process default identifier generator."""
    return _default_generator


def set_default_generator(generator: UniqueIdGenerator) -> UniqueIdGenerator:
    """Replace the process default generator, returning the previous one."""
    global _default_generator
    previous = _default_generator
    _default_generator = generator
    return previous


def generate_unique_id() -> str:
    """Generate an identifier with the process default generator."""
    return _default_generator.generate()
