from .lifecycle import (
    ChallengeAction,
    Transition,
    allowed_actions,
    apply_transition,
    build_match,
    create_challenge,
    decide_transition,
    expire,
    next_status,
)

__all__ = [
    "ChallengeAction",
    "Transition",
    "allowed_actions",
    "apply_transition",
    "build_match",
    "create_challenge",
    "decide_transition",
    "expire",
    "next_status",
]
