"""Vote state machine.

Pure transition rules for a (user, post) vote. Given the stored vote (or
none) and the direction the user just pressed, compute the next vote state,
the score delta that keeps the post aggregate consistent, and the preference
signal to mirror to the recommender. No I/O happens here.

States are derived from (direction, active):

    NO_VOTE --D--> ACTIVE_D
    ACTIVE_D --D--> INACTIVE_D          (toggle off)
    INACTIVE_D --D--> ACTIVE_D          (toggle on)
    ACTIVE_D --E--> ACTIVE_E            (switch, magnitude 2)
    INACTIVE_D --E--> ACTIVE_E          (switch, magnitude 1)
"""

from typing import Optional

from tally.domain.model.vote import Vote
from tally.domain.value import PreferenceKind, VoteDirection, VoteState
from tally.domain.value.common import ValueObject


class VoteTransition(ValueObject):
    """Outcome of pressing a direction on a vote."""

    previous_state: VoteState
    next_state: VoteState
    direction: VoteDirection
    active: bool
    magnitude: int
    score_delta: int
    signal: PreferenceKind


def next_vote_state(
    current: Optional[Vote], requested: VoteDirection
) -> VoteTransition:
    """Compute the transition for pressing ``requested`` on ``current``.

    Args:
        current: The user's stored vote on the post, or None for a first press
        requested: Direction the user pressed

    Returns:
        The next (direction, active) pair, score delta and recommender signal
    """
    if current is None:
        return VoteTransition(
            previous_state=VoteState.NO_VOTE,
            next_state=VoteState.of(requested, True),
            direction=requested,
            active=True,
            magnitude=1,
            score_delta=requested.sign,
            signal=PreferenceKind.for_transition(requested, True),
        )

    switching = current.direction is not requested
    was_active = current.active

    # Leaving an active opposite vote removes its contribution and adds the new one
    magnitude = 2 if switching and was_active else 1

    active = not was_active
    if switching:
        active = True

    if active:
        score_delta = magnitude * requested.sign
    else:
        # Deactivation only happens on a same-direction press
        score_delta = -magnitude * current.direction.sign

    return VoteTransition(
        previous_state=current.state,
        next_state=VoteState.of(requested, active),
        direction=requested,
        active=active,
        magnitude=magnitude,
        score_delta=score_delta,
        signal=PreferenceKind.for_transition(requested, active),
    )
