"""Shared schema base for responses built from ORM rows or dataclasses."""

from pydantic import BaseModel


class ORMModel(BaseModel):
    """Reads fields from attributes, so SQLAlchemy rows and dataclasses validate directly."""

    model_config = {"from_attributes": True}
