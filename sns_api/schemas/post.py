from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # В JSON поля в camelCase (imageUrl, userId ...), snake_case тоже принимается
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class PostCreate(CamelModel):
    # content проверяется в сервисе, чтобы пустой ввод давал 400, а не 422
    content: Optional[str] = None
    image_url: Optional[str] = None
    user_id: Optional[str] = None


class PostResponse(CamelModel):
    id: int
    content: str
    image_url: Optional[str] = None
    user_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    like_count: int = 0
    is_liked: bool = False


class LikeRequest(CamelModel):
    user_id: Optional[str] = None


class LikeResponse(CamelModel):
    post_id: int
    like_count: int
    is_liked: bool


class MessageResponse(BaseModel):
    message: str
