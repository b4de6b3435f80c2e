# meal_recommender/models/bandit.py
"""
Bandit arm state models.

An arm is anything whose feedback history is modeled as a Beta(alpha, beta)
belief: a single meal, a cuisine, or a tag. Arm keys are namespaced
strings ("meal:<id>", "cuisine:<name>", "tag:<name>").
"""
from dataclasses import dataclass, field
from typing import Dict, Any, Tuple

# Uninformative prior; alpha and beta never drop below it
PRIOR_FLOOR = 1.0


def meal_arm_key(meal_id: str) -> str:
    return f"meal:{meal_id}"


def cuisine_arm_key(cuisine: str) -> str:
    return f"cuisine:{cuisine}"


def tag_arm_key(tag: str) -> str:
    return f"tag:{tag}"


@dataclass(frozen=True)
class BanditArm:
    """
    Beta(alpha, beta) belief for a single arm.

    Values below the prior floor are lifted to it on construction, so every
    arm is at least as informative as Beta(1, 1).
    """
    alpha: float = PRIOR_FLOOR
    beta: float = PRIOR_FLOOR

    def __post_init__(self):
        object.__setattr__(self, "alpha", max(PRIOR_FLOOR, float(self.alpha)))
        object.__setattr__(self, "beta", max(PRIOR_FLOOR, float(self.beta)))

    @property
    def mean(self) -> float:
        """Posterior mean alpha / (alpha + beta)."""
        return self.alpha / (self.alpha + self.beta)

    @property
    def observations(self) -> float:
        """Pseudo-observations beyond the prior."""
        return self.alpha + self.beta - 2 * PRIOR_FLOOR

    def reinforced(self, alpha_inc: float, beta_inc: float) -> 'BanditArm':
        """
        Return a new arm with the increments added.

        Negative increments are ignored so an arm can never lose evidence.
        """
        return BanditArm(
            alpha=self.alpha + max(0.0, alpha_inc),
            beta=self.beta + max(0.0, beta_inc),
        )

    def to_dict(self) -> Dict[str, float]:
        return {"alpha": self.alpha, "beta": self.beta}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BanditArm':
        return cls(
            alpha=data.get("alpha", PRIOR_FLOOR),
            beta=data.get("beta", PRIOR_FLOOR),
        )


@dataclass(frozen=True)
class BanditState:
    """
    Versioned aggregate of a user's arms, loaded once per request.

    Feedback never mutates a state in place. apply_increments() returns a
    new state with a bumped version and accumulated per-arm deltas; the
    deltas are what gets written back, on top of whatever the store holds
    at persistence time.

    Attributes:
        user_id: Owner of the arms
        arms: Arm key -> BanditArm
        version: Incremented on each change within the request
        deltas: Arm key -> (alpha increment, beta increment) since load
    """
    user_id: str = None
    arms: Dict[str, BanditArm] = field(default_factory=dict)
    version: int = 0
    deltas: Dict[str, Tuple[float, float]] = field(default_factory=dict)

    @property
    def changed(self) -> bool:
        return bool(self.deltas)

    def get(self, arm_key: str) -> BanditArm:
        """Get an arm, defaulting to the uninformative prior."""
        return self.arms.get(arm_key) or BanditArm()

    def apply_increments(self, increments: Dict[str, Tuple[float, float]]) -> 'BanditState':
        """
        Apply a batch of (alpha, beta) increments.

        Missing arms are created at Beta(1, 1) before the increment.

        Args:
            increments: Arm key -> (alpha increment, beta increment)

        Returns:
            New BanditState (self if increments is empty)
        """
        if not increments:
            return self

        arms = dict(self.arms)
        deltas = dict(self.deltas)
        for arm_key, (alpha_inc, beta_inc) in increments.items():
            arms[arm_key] = arms.get(arm_key, BanditArm()).reinforced(alpha_inc, beta_inc)
            prev_a, prev_b = deltas.get(arm_key, (0.0, 0.0))
            deltas[arm_key] = (prev_a + max(0.0, alpha_inc), prev_b + max(0.0, beta_inc))

        return BanditState(
            user_id=self.user_id,
            arms=arms,
            version=self.version + 1,
            deltas=deltas,
        )

    def arms_to_dict(self) -> Dict[str, Dict[str, float]]:
        return {key: arm.to_dict() for key, arm in self.arms.items()}
