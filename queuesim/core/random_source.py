"""Deterministic pseudo-random number source for the simulator."""

from typing import Dict, Optional

# Park-Miller "minimal standard" constants
DEFAULT_MULTIPLIER = 16807
DEFAULT_INCREMENT = 0
DEFAULT_MODULUS = 2147483647
DEFAULT_SEED = 12345


class LinearCongruentialGenerator:
    """Linear congruential generator producing uniforms in [0, 1).

    The sequence is fully determined by ``(multiplier, increment, modulus,
    seed)``, so two generators built with the same parameters yield
    bit-identical draws. Python integers never overflow, so ``a * x + c`` is
    computed exactly before the modulo.
    """

    def __init__(self, multiplier: int = DEFAULT_MULTIPLIER,
                 increment: int = DEFAULT_INCREMENT,
                 modulus: int = DEFAULT_MODULUS,
                 seed: int = DEFAULT_SEED):
        """Initialize generator.

        Args:
            multiplier: LCG multiplier ``a``
            increment: LCG increment ``c``
            modulus: LCG modulus ``m`` (must be positive)
            seed: Initial state, reduced modulo ``m``
        """
        self.multiplier = multiplier
        self.increment = increment
        self.modulus = modulus
        self.state = seed % modulus

    @classmethod
    def from_config(cls, config: Optional[Dict]) -> "LinearCongruentialGenerator":
        """Build a generator from the ``random`` configuration section."""
        config = config or {}
        return cls(
            multiplier=int(config.get('multiplier', DEFAULT_MULTIPLIER)),
            increment=int(config.get('increment', DEFAULT_INCREMENT)),
            modulus=int(config.get('modulus', DEFAULT_MODULUS)),
            seed=int(config.get('seed', DEFAULT_SEED)),
        )

    def next_uniform(self) -> float:
        """Advance the state and return it scaled to [0, 1)."""
        self.state = (self.multiplier * self.state + self.increment) % self.modulus
        return self.state / self.modulus

    def uniform(self, low: float, high: float) -> float:
        """Draw a value in [low, high) from a single uniform."""
        return low + (high - low) * self.next_uniform()

    def __repr__(self) -> str:
        return (f"LinearCongruentialGenerator(a={self.multiplier}, "
                f"c={self.increment}, m={self.modulus}, x={self.state})")
