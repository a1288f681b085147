"""Schema for accounts module."""

from ninja import ModelSchema
from pydantic import UUID4

from .models import RollcallUser


class RollcallUserSchema(ModelSchema):
    id: UUID4
    display_name: str

    class Meta:
        model = RollcallUser
        fields = ["email", "first_name", "last_name", "preferred_name", "is_event_staff"]


class MinimalRollcallUserSchema(ModelSchema):
    id: UUID4
    display_name: str

    class Meta:
        model = RollcallUser
        fields = ["email", "first_name", "last_name"]
