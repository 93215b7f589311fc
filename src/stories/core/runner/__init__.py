"""
Story execution: the step runner and its confirmation channel.
"""

from .confirm import Confirmation, ConsoleConfirmation
from .engine import StoryRunner, load_state, merge_state_patch

__all__ = [
    "Confirmation",
    "ConsoleConfirmation",
    "StoryRunner",
    "load_state",
    "merge_state_patch",
]
