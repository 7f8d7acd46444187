"""
Shared schema configuration: the API speaks camelCase JSON.
"""
from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel
from typing import Any, ClassVar, Tuple


class CamelModel(BaseModel):
    """Base for request and response schemas."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReadModel(CamelModel):
    """Base for schemas built from ORM rows."""

    model_config = ConfigDict(from_attributes=True)


class UpdateModel(CamelModel):
    """
    Base for partial updates.

    Any field may be left out, but only the ones named in ``nullable_fields``
    may be sent as an explicit null.
    """

    nullable_fields: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="before")
    @classmethod
    def reject_nulls(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        for name, field in cls.model_fields.items():
            if name in cls.nullable_fields:
                continue
            alias = field.alias or name
            if (alias in data and data[alias] is None) or (name in data and data[name] is None):
                raise ValueError(f"{alias} cannot be null")
        return data
