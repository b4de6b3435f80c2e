# meal_recommender/bandit/sampler.py
"""
Beta / Gamma / Normal sampling for Thompson Sampling.

Beta(a, b) is drawn as G(a) / (G(a) + G(b)) where G is a unit-scale Gamma
draw using Marsaglia and Tsang's method. The Normal variates it needs come
from the Box-Muller transform. Every uniform draw goes through a single
random.Random instance, so a fixed seed reproduces every sample exactly.
"""
import math
import random
from typing import Optional, Union


class BetaSampler:
    """
    Seedable sampler for Beta, Gamma and Normal variates.

    Args:
        rng: A random.Random instance, an int seed, or None for a fresh
            unseeded generator
    """

    def __init__(self, rng: Optional[Union[random.Random, int]] = None):
        if isinstance(rng, random.Random):
            self.rng = rng
        else:
            self.rng = random.Random(rng)

    def reseed(self, seed: int) -> None:
        """Restart the uniform stream from a seed."""
        self.rng.seed(seed)

    def _uniform_open(self) -> float:
        # random() is in [0, 1); log(0) and 0 ** (1/shape) need (0, 1)
        u = self.rng.random()
        while u == 0.0:
            u = self.rng.random()
        return u

    def sample_normal(self, mean: float = 0.0, variance: float = 1.0) -> float:
        """
        Draw from Normal(mean, variance) via Box-Muller.
        """
        u1 = self._uniform_open()
        u2 = self.rng.random()
        z0 = math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)
        return mean + math.sqrt(variance) * z0

    def sample_gamma(self, shape: float) -> float:
        """
        Draw from Gamma(shape, 1) using Marsaglia and Tsang.

        Shapes below 1 draw Gamma(shape + 1) and scale by U ** (1 / shape).

        Raises:
            ValueError: If shape is not positive
        """
        if shape <= 0:
            raise ValueError(f"Gamma shape must be positive, got {shape}")

        if shape < 1:
            sample = self.sample_gamma(shape + 1)
            return sample * math.pow(self._uniform_open(), 1.0 / shape)

        d = shape - 1.0 / 3.0
        c = 1.0 / math.sqrt(9.0 * d)

        while True:
            x = self.sample_normal(0.0, 1.0)
            v = 1.0 + c * x
            while v <= 0:
                x = self.sample_normal(0.0, 1.0)
                v = 1.0 + c * x

            v = v * v * v
            u = self._uniform_open()

            # Squeeze test, then the full log acceptance test
            if u < 1.0 - 0.0331 * x * x * x * x:
                return d * v
            if math.log(u) < 0.5 * x * x + d * (1.0 - v + math.log(v)):
                return d * v

    def sample_beta(self, alpha: float, beta: float) -> float:
        """
        Draw from Beta(alpha, beta) as a ratio of two Gamma draws.

        Returns:
            Sample in [0, 1]
        """
        gamma_alpha = self.sample_gamma(alpha)
        gamma_beta = self.sample_gamma(beta)
        total = gamma_alpha + gamma_beta
        if total <= 0.0:
            # Both draws underflowed; only reachable with tiny shapes
            return 0.5
        return gamma_alpha / total
