"""
Importable entity definitions.
"""

from .base import EntityDefinition
from .users import USER_TYPES, USERS, USERS_SCHEMA, UserRecord, build_user_rules

ENTITIES: dict[str, EntityDefinition] = {
    USERS.name: USERS,
}


def get_entity(name: str) -> EntityDefinition:
    """
    Look up a built-in entity definition by name.

    Raises:
        ValueError: If no entity has that name
    """
    try:
        return ENTITIES[name]
    except KeyError:
        known = ", ".join(sorted(ENTITIES))
        raise ValueError(f"Unknown entity '{name}'. Known entities: {known}") from None


__all__ = [
    "ENTITIES",
    "EntityDefinition",
    "USERS",
    "USERS_SCHEMA",
    "USER_TYPES",
    "UserRecord",
    "build_user_rules",
    "get_entity",
]
