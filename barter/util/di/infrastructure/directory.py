"""Directory infrastructure providers."""

from dishka import Scope, provide

from barter.adapter.directory import HttpDirectory
from barter.config import Settings
from barter.domain.service import Directory
from barter.util.di.base import ProviderBase
from barter.util.observability import instrument_httpx


class DirectoryProvider(ProviderBase):
    """Directory component base."""

    __mock_component__ = "directory"


class ProdDirectoryProvider(DirectoryProvider):
    """Production directory provider calling the user and skill services."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_directory(self, settings: Settings) -> Directory:
        """Provide HTTP directory client."""
        instrument_httpx()
        return HttpDirectory(
            user_service_url=settings.services.user_service_url,
            skill_service_url=settings.services.skill_service_url,
            timeout_seconds=settings.services.timeout_seconds,
        )
