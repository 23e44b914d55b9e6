"""Base model configuration for all Pydantic models."""

from pydantic import BaseModel, ConfigDict


class ReportingBaseModel(BaseModel):
    """Base model with common configuration.

    Conventions:
    - Field names follow the backend's lowercase snake_case wire format
    - Keys the client does not model are kept and written back on save
    """

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        extra="allow",
    )

    def to_wire(self) -> dict:
        """Serialize to the backend JSON shape.

        Fields the backend never sent are left out. Explicit nulls, modeled or
        not, are written back as received.
        """
        return self.model_dump(mode="json", exclude_unset=True)
