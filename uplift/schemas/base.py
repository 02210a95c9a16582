"""Base schema type for Uplift wire payloads."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base class for payloads exchanged with the enrichment service.

    Fields are snake_case in Python and camelCase on the wire.  Both
    spellings are accepted on input; ``to_wire()`` always emits camelCase.
    Unknown keys in responses are ignored so additive service changes
    don't break parsing.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        protected_namespaces=(),
    )

    def to_wire(self) -> dict:
        """Serialise to a JSON-ready dict using the service's field names."""
        return self.model_dump(mode="json", by_alias=True)
