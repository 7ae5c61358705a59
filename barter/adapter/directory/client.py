"""HTTP directory adapter for user and skill display names.

Display data belongs to the user and skill services. Lookups are best
effort: any failure degrades to a placeholder and is logged.
"""

import httpx
import logfire

from barter.adapter.error import ProviderError
from barter.domain.service.directory import UNKNOWN_SKILL, UNKNOWN_USER, Directory
from barter.domain.value import SkillId, UserId


class HttpDirectory(Directory):
    """Directory backed by the user and skill services' REST APIs."""

    def __init__(
        self,
        user_service_url: str,
        skill_service_url: str,
        timeout_seconds: float = 3.0,
    ) -> None:
        """Initialize directory client.

        Args:
            user_service_url: Base URL of the user service
            skill_service_url: Base URL of the skill service
            timeout_seconds: Per-request timeout
        """
        self.user_service_url = user_service_url.rstrip("/")
        self.skill_service_url = skill_service_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    async def get_user_name(self, user_id: UserId) -> str:
        """Look up a user's display name."""
        try:
            data = await self._get_json("user service", f"{self.user_service_url}/users/{user_id}")
        except ProviderError as e:
            logfire.warn("User lookup failed", user_id=str(user_id), error=str(e))
            return UNKNOWN_USER

        name = data.get("display_name") or " ".join(
            part for part in (data.get("first_name"), data.get("last_name")) if part
        )
        return name or UNKNOWN_USER

    async def get_skill_name(self, skill_id: SkillId) -> str:
        """Look up a skill's display name."""
        try:
            data = await self._get_json(
                "skill service", f"{self.skill_service_url}/skills/{skill_id}"
            )
        except ProviderError as e:
            logfire.warn("Skill lookup failed", skill_id=str(skill_id), error=str(e))
            return UNKNOWN_SKILL

        return data.get("name") or UNKNOWN_SKILL

    async def _get_json(self, service: str, url: str) -> dict:
        """GET a JSON object.

        Raises:
            ProviderError: On transport errors, non-200 responses or bad JSON
        """
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(url, timeout=self.timeout_seconds)

                if response.status_code != 200:
                    raise ProviderError(service, f"HTTP {response.status_code}")

                data = response.json()
        except httpx.HTTPError as e:
            raise ProviderError(service, str(e)) from e
        except ValueError as e:
            raise ProviderError(service, f"invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ProviderError(service, "unexpected response shape")
        return data


class StaticDirectory(Directory):
    """Directory with fixed names for development and testing."""

    def __init__(
        self,
        users: dict[UserId, str] | None = None,
        skills: dict[SkillId, str] | None = None,
    ) -> None:
        self.users = users or {}
        self.skills = skills or {}

    async def get_user_name(self, user_id: UserId) -> str:
        return self.users.get(user_id, UNKNOWN_USER)

    async def get_skill_name(self, skill_id: SkillId) -> str:
        return self.skills.get(skill_id, UNKNOWN_SKILL)
