import random
from typing import Optional, Protocol, Sequence, TypeVar

DEFAULT_MAX_ATTEMPTS = 1000


class Weighted(Protocol):
    rate: float


W = TypeVar("W", bound=Weighted)


def weighted_pick(
    candidates: Sequence[W],
    rng: Optional[random.Random] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> Optional[W]:
    """
    Accept/reject sampling over candidates.

    Each attempt draws a candidate uniformly (with replacement) and a value
    in [0, 1); the candidate is accepted when its rate is >= the value.
    Candidates with rate <= 0 can never be accepted and are left out, so
    None means there was nothing acceptable to begin with. max_attempts
    only bounds the loop: once spent, the pick is made directly with the
    distribution the loop converges to.
    """
    eligible = [candidate for candidate in candidates if candidate.rate > 0]
    if not eligible:
        return None

    rng = rng or random
    for _ in range(max_attempts):
        candidate = rng.choice(eligible)
        if candidate.rate >= rng.random():
            return candidate

    # Accepted picks are proportional to min(rate, 1).
    return rng.choices(eligible, weights=[min(candidate.rate, 1.0) for candidate in eligible])[0]
