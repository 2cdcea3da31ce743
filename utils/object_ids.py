from beanie import PydanticObjectId
from bson import ObjectId
from fastapi import HTTPException


def to_object_id(value: str, label: str = "ID") -> PydanticObjectId:
    if not ObjectId.is_valid(value):
        raise HTTPException(status_code=400, detail=f"Invalid {label} format")
    return PydanticObjectId(value)
