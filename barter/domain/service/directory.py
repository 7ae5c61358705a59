"""Directory port for user and skill display data."""

from barter.domain.value import SkillId, UserId

UNKNOWN_USER = "Unknown user"
UNKNOWN_SKILL = "Unknown skill"


class Directory:
    """Read-only lookup of display names owned by the user and skill services.

    Implementations must never raise: an unreachable or failing service
    degrades to the UNKNOWN_* placeholders so negotiation is never blocked.
    """

    async def get_user_name(self, user_id: UserId) -> str:
        """Look up a user's display name.

        Args:
            user_id: User ID

        Returns:
            Display name, or UNKNOWN_USER
        """
        raise NotImplementedError

    async def get_skill_name(self, skill_id: SkillId) -> str:
        """Look up a skill's display name.

        Args:
            skill_id: Skill ID

        Returns:
            Skill name, or UNKNOWN_SKILL
        """
        raise NotImplementedError
