"""
Entity identity.

An entity is either Pending (created locally, never acknowledged by the
remote store) or Persisted (carries the identifier the store assigned).
Create-vs-update routing is decided by which variant an entity holds.
"""

from datetime import UTC, datetime
from typing import Annotated, Any, ClassVar, Literal
from uuid import uuid4

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    model_serializer,
    model_validator,
)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


Timestamp = Annotated[datetime, AfterValidator(ensure_utc)]


class Pending(BaseModel):
    """Locally generated placeholder identity."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["pending"] = "pending"
    local_id: str

    @classmethod
    def new(cls, prefix: str) -> "Pending":
        return cls(local_id=f"{prefix}-{uuid4().hex}")

    @property
    def value(self) -> str:
        return self.local_id


class Persisted(BaseModel):
    """Identity assigned by the remote store."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["persisted"] = "persisted"
    remote_id: str

    @property
    def value(self) -> str:
        return self.remote_id


Identity = Annotated[Pending | Persisted, Field(discriminator="kind")]


def lift_identity(prefix: str, raw_id: Any) -> Pending | Persisted:
    """
    Turn a plain identifier into a tagged identity.

    Identifiers carrying the entity's placeholder prefix were generated
    locally; anything else came from the store.
    """
    if raw_id is None or raw_id == "":
        return Pending.new(prefix)
    raw_id = str(raw_id)
    if raw_id.startswith(f"{prefix}-"):
        return Pending(local_id=raw_id)
    return Persisted(remote_id=raw_id)


class IdentifiedModel(BaseModel):
    """Base for every entity that is synchronized with the remote store."""

    id_prefix: ClassVar[str] = "entity"

    identity: Identity

    @model_validator(mode="before")
    @classmethod
    def _lift_plain_id(cls, data: Any) -> Any:
        if isinstance(data, dict) and "identity" not in data:
            data = dict(data)
            data["identity"] = lift_identity(cls.id_prefix, data.pop("id", None))
        return data

    @model_serializer(mode="wrap")
    def _serialize_id(self, handler: Any) -> dict[str, Any]:
        data = handler(self)
        data.pop("identity", None)
        return {"id": self.id, **data}

    @property
    def id(self) -> str:
        return self.identity.value

    @property
    def is_persisted(self) -> bool:
        return isinstance(self.identity, Persisted)
