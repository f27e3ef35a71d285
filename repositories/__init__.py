"""MongoDB repositories: the only modules that talk to collections directly."""

from repositories.token_repository import TokenRepository
from repositories.user_repository import UserRepository

__all__ = ["TokenRepository", "UserRepository"]
