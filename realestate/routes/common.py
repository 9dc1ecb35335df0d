"""
Helpers shared by the resource routers.
"""

from __future__ import annotations

from typing import Optional, Type, TypeVar

from fastapi import HTTPException, UploadFile
from pydantic import BaseModel, ValidationError

from realestate.media import UploadedFile

M = TypeVar("M", bound=BaseModel)


def parse_json_part(model: Type[M], raw: str, part_name: str) -> M:
    """Validates the JSON text of a multipart form field."""
    try:
        return model.model_validate_json(raw)
    except ValidationError as exc:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid '{part_name}' part: {exc.errors(include_url=False)}",
        ) from exc


async def read_upload(file: Optional[UploadFile]) -> Optional[UploadedFile]:
    if file is None:
        return None
    content = await file.read()
    return UploadedFile(
        filename=file.filename or "upload",
        content=content,
        content_type=file.content_type,
    )


def not_found(entity: str, entity_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"{entity} not found: {entity_id}")
