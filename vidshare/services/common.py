from dataclasses import dataclass
from typing import Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.core.exceptions import ForbiddenError, NotFoundError

ModelT = TypeVar("ModelT")


@dataclass
class ToggleResult:
    """Outcome of a presence toggle.

    ``active`` is the state after the call. ``conflict_ignored`` is set when
    more than one matching row was found and all were removed, or when an
    insert lost a race against an identical concurrent insert.
    """

    active: bool
    conflict_ignored: bool = False


async def check_ownership(
    db: AsyncSession,
    model: Type[ModelT],
    entity_id: str,
    caller_id: str,
    entity_name: str = None,
) -> ModelT:
    name = entity_name or model.__name__
    entity = await db.get(model, entity_id)
    if entity is None:
        raise NotFoundError(name, entity_id)
    if entity.user_id != caller_id:
        raise ForbiddenError("modify", name.lower())
    return entity
