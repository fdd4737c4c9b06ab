"""Import all models here so metadata.create_all sees every table."""

from vodhub.db.base_class import Base
from vodhub.models import provider  # noqa: F401

__all__ = ["Base"]
