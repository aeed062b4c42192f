from typing import Any

from pydantic import ConfigDict, SerializationInfo, model_serializer, model_validator
from pydantic.alias_generators import to_camel, to_snake

from app.models.base import BaseRecord


class Project(BaseRecord):
    # Server-computed fields we don't model are kept as-is
    model_config = ConfigDict(extra="allow")

    name: str

    @model_validator(mode="before")
    @classmethod
    def _snake_case_extras(cls, data: Any) -> Any:
        """Extras are stored snake_case, whichever spelling arrived."""
        if not isinstance(data, dict):
            return data
        return {
            key if key in cls.model_fields or to_snake(key) in cls.model_fields else to_snake(key): value
            for key, value in data.items()
        }

    @model_serializer(mode="wrap")
    def _camel_case_extras(self, handler, info: SerializationInfo) -> dict[str, Any]:
        data = handler(self)
        if info.by_alias and self.model_extra:
            for key in self.model_extra:
                if key in data:
                    data[to_camel(key)] = data.pop(key)
        return data
