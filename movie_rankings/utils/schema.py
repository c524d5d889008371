"""
Base Pydantic model shared by API schemas and the export file format.

Fields are snake_case in Python and camelCase on the wire.
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

USERNAME_PATTERN = r"^[a-zA-Z0-9_]+$"


class CamelModel(BaseModel):
    """Model that reads ORM attributes and serializes with camelCase aliases."""

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True
