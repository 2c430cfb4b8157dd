"""
RecipeBox Backend: Upload Schemas
===================================

What:  Response body of POST /upload: {"imageUrl": "<base>/uploads/<name>"}.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class UploadResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    image_url: str = Field(description="Absolute URL the uploaded image is served from")
