"""Return policy repositories package."""

from modules.returns.repositories.django_repository import ReturnPolicyDjangoRepository
from modules.returns.repositories.interfaces import IReturnPolicyRepository

__all__ = ["IReturnPolicyRepository", "ReturnPolicyDjangoRepository"]
