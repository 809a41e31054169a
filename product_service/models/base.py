from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that serializes field names as camelCase (``createdAt``)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
