"""Local in-memory implementation of ProfileRepository."""

from datetime import datetime, timezone
from typing import Any, Dict

from ..domain.entities.profile import Profile
from ..domain.interfaces.profile_repository import ProfileRepository


class LocalProfileRepository(ProfileRepository):
    """Local in-memory implementation of the ProfileRepository protocol.

    Stores profiles in a dictionary for testing and development purposes.
    """

    def __init__(self):
        """Initialize the local profile repository with test data."""
        self._profiles: Dict[str, Profile] = {}

        # Pre-populate with a test user for e2e testing
        test_user_id = "12345678-1234-5678-1234-567812345678"
        self._profiles[test_user_id] = Profile(id=test_user_id, username="test-reader")

    async def get_profile(self, user_id: str) -> Profile:
        """Retrieve a profile by user ID from the in-memory dictionary.

        Args:
            user_id: The unique identifier of the user.

        Returns:
            Profile: The profile entity.

        Raises:
            ValueError: If the profile is not found.
        """
        if user_id not in self._profiles:
            raise ValueError(f"Profile with id {user_id} not found")

        return self._profiles[user_id]

    async def save_profile(self, profile: Profile) -> None:
        """Add or replace a profile in the dictionary.

        Args:
            profile: The profile to store.
        """
        self._profiles[profile.id] = profile

    async def update_profile(self, user_id: str, changes: dict[str, Any]) -> Profile:
        """Apply a partial update to a stored profile.

        Args:
            user_id: The unique identifier of the user.
            changes: Field names mapped to their new values.

        Returns:
            Profile: The updated profile.

        Raises:
            ValueError: If the profile is not found.
        """
        profile = await self.get_profile(user_id)
        updated = profile.model_copy(
            update={**changes, "updated_at": datetime.now(timezone.utc)}
        )
        self._profiles[user_id] = updated
        return updated

    def clear(self) -> None:
        """Clear all profiles from the dictionary."""
        self._profiles.clear()

    def get_all_profiles(self) -> Dict[str, Profile]:
        """Get all profiles.

        Returns:
            Dict[str, Profile]: Dictionary of all profiles.
        """
        return self._profiles.copy()
