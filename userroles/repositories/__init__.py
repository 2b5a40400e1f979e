"""
Repository layer: each repository owns the statements for one entity and maps
result rows to schema objects. Repositories hold no state between calls besides
the shared storage gateway.
"""

from userroles.repositories.roles import RoleRepository
from userroles.repositories.users import UserRepository

__all__ = ["RoleRepository", "UserRepository"]
