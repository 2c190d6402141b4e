"""State management module for tracking managed resources."""

from .manager import StateLockError, StateManager, StateNotFoundError, state_path_for
from .models import Resource, State

__all__ = [
    "Resource",
    "State",
    "StateManager",
    "StateLockError",
    "StateNotFoundError",
    "state_path_for",
]
