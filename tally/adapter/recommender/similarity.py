"""Collaborative-filtering scoring over like/dislike sets.

Users are compared by how their likes and dislikes agree; candidate posts
are scored by the similarity-weighted opinions of the users who rated them.
"""

from dataclasses import dataclass, field


@dataclass
class Ratings:
    """One user's liked and disliked post IDs."""

    liked: set[str] = field(default_factory=set)
    disliked: set[str] = field(default_factory=set)

    @property
    def rated(self) -> set[str]:
        return self.liked | self.disliked


def similarity(a: Ratings, b: Ratings) -> float:
    """Agreement between two users in [-1, 1]."""
    union = a.rated | b.rated
    if not union:
        return 0.0
    agreements = len(a.liked & b.liked) + len(a.disliked & b.disliked)
    disagreements = len(a.liked & b.disliked) + len(a.disliked & b.liked)
    return (agreements - disagreements) / len(union)


def rank_candidates(
    user: Ratings, neighbours: dict[str, Ratings], count: int
) -> list[str]:
    """Rank posts the user has not rated yet.

    Args:
        user: The user's own ratings
        neighbours: Ratings of other users who rated at least one common post
        count: Maximum number of post IDs to return

    Returns:
        Post IDs, best first (ties broken by ID for a stable order)
    """
    weighted: dict[str, float] = {}
    raters: dict[str, int] = {}

    for ratings in neighbours.values():
        weight = similarity(user, ratings)
        if weight == 0:
            continue
        for post_id in ratings.liked - user.rated:
            weighted[post_id] = weighted.get(post_id, 0.0) + weight
            raters[post_id] = raters.get(post_id, 0) + 1
        for post_id in ratings.disliked - user.rated:
            weighted[post_id] = weighted.get(post_id, 0.0) - weight
            raters[post_id] = raters.get(post_id, 0) + 1

    scores = {pid: weighted[pid] / raters[pid] for pid in weighted}
    ranked = sorted(
        (pid for pid, score in scores.items() if score > 0),
        key=lambda pid: (-scores[pid], pid),
    )
    return ranked[:count]
