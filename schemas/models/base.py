"""
Shared pieces for the MongoDB document models.

PyObjectId lets pydantic accept either a bson ObjectId or its 24-char hex
string, keeping the ObjectId in Python and emitting a string in JSON.
MongoDocument converts between model instances and raw collection dicts.
"""

from __future__ import annotations

from typing import Any, Optional, TypeVar

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, GetCoreSchemaHandler
from pydantic_core import core_schema

DocT = TypeVar("DocT", bound="MongoDocument")


class PyObjectId(ObjectId):
    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        # to_string_ser_schema only stringifies in JSON mode; model_dump()
        # keeps the ObjectId so documents go to MongoDB unchanged.
        return core_schema.no_info_plain_validator_function(
            cls._coerce,
            serialization=core_schema.to_string_ser_schema(),
        )

    @classmethod
    def _coerce(cls, value: Any) -> ObjectId:
        if isinstance(value, ObjectId):
            return value
        if isinstance(value, str) and ObjectId.is_valid(value):
            return ObjectId(value)
        raise ValueError(f"Invalid ObjectId: {value!r}")


class MongoDocument(BaseModel):
    """
    Base for collection documents.

    The MongoDB ``_id`` is exposed as ``id``. It stays None until the
    document has been inserted.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        validate_assignment=True,
    )

    id: Optional[PyObjectId] = Field(default=None, alias="_id")

    @property
    def id_str(self) -> Optional[str]:
        return str(self.id) if self.id is not None else None

    def to_mongo(self) -> dict:
        """Dump to a pymongo-ready dict, leaving ``_id`` out until one is assigned."""
        return self.model_dump(by_alias=True, exclude={"id"} if self.id is None else None)

    @classmethod
    def from_mongo(cls: type[DocT], data: Optional[dict]) -> Optional[DocT]:
        """Validate a raw document; a missed lookup (None) stays None."""
        return None if data is None else cls.model_validate(data)
