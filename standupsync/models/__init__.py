from .standup import Standup

__all__ = [
    "Standup",
]
