"""Profile repository protocol."""

from typing import Any, Protocol, runtime_checkable

from ..entities.profile import Profile


@runtime_checkable
class ProfileRepository(Protocol):
    """Protocol for profile stores.

    Implementations can use different storage backends (in-memory,
    DynamoDB, etc.).
    """

    async def get_profile(self, user_id: str) -> Profile:
        """Retrieve a profile by user ID.

        Args:
            user_id: The unique identifier of the user.

        Returns:
            Profile: The profile entity.

        Raises:
            ValueError: If the profile is not found.
        """
        ...

    async def save_profile(self, profile: Profile) -> None:
        """Create or replace a profile.

        Args:
            profile: The profile entity to store.
        """
        ...

    async def update_profile(self, user_id: str, changes: dict[str, Any]) -> Profile:
        """Apply a partial update to a profile in a single write.

        Args:
            user_id: The unique identifier of the user.
            changes: Field names mapped to their new values.

        Returns:
            Profile: The updated profile.

        Raises:
            ValueError: If the profile is not found.
        """
        ...
