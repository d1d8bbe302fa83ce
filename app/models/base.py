# app/models/base.py
from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Request body base: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        use_enum_values=True,
    )

    def to_document(self, **kwargs) -> dict:
        # documents are stored with the wire (camelCase) field names
        return self.model_dump(by_alias=True, **kwargs)


class ActorClaim(ApiModel):
    # client-supplied identity for guest flows; always re-checked against the store
    user_id: Optional[str] = None
