"""State manager for loading, saving, and locking workspace state."""

import fcntl
import json
import os
import time
from pathlib import Path
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from neutron_deploy.utils.errors import StateError

from .models import State

DEFAULT_STATE_DIR = ".neutron/state"


class StateLockError(StateError):
    """Exception raised when state file cannot be locked."""

    pass


class StateNotFoundError(StateError):
    """Exception raised when state file does not exist."""

    pass


def state_path_for(workspace: str, state_dir: str = DEFAULT_STATE_DIR) -> Path:
    """Path of the state file for a workspace."""
    return Path(state_dir) / f"{workspace}.json"


class StateManager:
    """Manages workspace state with file locking."""

    def __init__(self, state_path: str):
        """
        Initialize StateManager.

        Args:
            state_path: Path to the state file
        """
        self.state_path = Path(state_path)
        self._lock_file: Optional[int] = None
        self._current_state: Optional[State] = None

    def load(self) -> State:
        """
        Load state from file.

        Returns:
            State object

        Raises:
            StateNotFoundError: If state file does not exist
            StateError: If state file is corrupted or invalid
        """
        if not self.state_path.exists():
            raise StateNotFoundError(f"State file not found: {self.state_path}")

        try:
            with open(self.state_path, "r") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise StateError(f"Failed to parse state file: {e}") from e
        except OSError as e:
            raise StateError(f"Failed to load state file: {e}") from e

        try:
            self._current_state = State.from_dict(data)
        except PydanticValidationError as e:
            raise StateError(f"Invalid state file {self.state_path}: {e}") from e
        return self._current_state

    def save(self, state: State) -> None:
        """
        Save state to file.

        Args:
            state: State object to save

        Raises:
            StateError: If state cannot be saved
        """
        # Ensure directory exists
        self.state_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            # Write to temporary file first
            temp_path = self.state_path.with_suffix(".tmp")
            with open(temp_path, "w") as f:
                json.dump(state.to_dict(), f, indent=2)

            # Atomic rename
            temp_path.replace(self.state_path)
            self._current_state = state
        except OSError as e:
            raise StateError(f"Failed to save state file: {e}") from e

    def initialize(
        self, workspace: str, cloud: Optional[str] = None, region: Optional[str] = None
    ) -> State:
        """
        Initialize a new state file.

        Args:
            workspace: Workspace name
            cloud: clouds.yaml entry
            region: Default region

        Returns:
            New State object
        """
        state = State(workspace=workspace, cloud=cloud, region=region)
        self.save(state)
        return state

    def load_or_initialize(
        self, workspace: str, cloud: Optional[str] = None, region: Optional[str] = None
    ) -> State:
        """Load the state file, creating an empty one on first use."""
        if self.exists():
            return self.load()
        return self.initialize(workspace, cloud=cloud, region=region)

    def exists(self) -> bool:
        """Check if state file exists."""
        return self.state_path.exists()

    def lock(self, timeout: int = 30) -> None:
        """
        Acquire exclusive lock on state file.

        Args:
            timeout: Lock timeout in seconds

        Raises:
            StateLockError: If lock cannot be acquired
        """
        lock_path = self.state_path.with_suffix(".lock")
        lock_path.parent.mkdir(parents=True, exist_ok=True)

        self._lock_file = os.open(str(lock_path), os.O_CREAT | os.O_RDWR)

        start_time = time.time()
        while True:
            try:
                fcntl.flock(self._lock_file, fcntl.LOCK_EX | fcntl.LOCK_NB)
                return
            except BlockingIOError:
                if time.time() - start_time > timeout:
                    os.close(self._lock_file)
                    self._lock_file = None
                    raise StateLockError(
                        f"Failed to acquire lock on state file after {timeout}s",
                        suggestions=["Another run may be in progress for this workspace"]
                    )
                time.sleep(0.1)

    def unlock(self) -> None:
        """Release lock on state file."""
        if self._lock_file is not None:
            try:
                fcntl.flock(self._lock_file, fcntl.LOCK_UN)
                os.close(self._lock_file)
            finally:
                self._lock_file = None

    def __enter__(self):
        """Context manager entry - acquire lock and load state."""
        self.lock()
        if self.exists():
            self.load()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - release lock."""
        self.unlock()

    def get_state(self) -> State:
        """
        Get the current state.

        Returns:
            Current State object

        Raises:
            StateError: If state is not loaded
        """
        if self._current_state is None:
            raise StateError("State not loaded. Call load() first.")

        return self._current_state
