import logging
import re
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sns_api.core.db import get_db
from sns_api.schemas.post import LikeRequest, LikeResponse, MessageResponse, PostCreate, PostResponse
from sns_api.services import post_service

logger = logging.getLogger(__name__)

router = APIRouter()

_POST_ID_RE = re.compile(r"^-?\d+$")


def parse_post_id(raw_id: str) -> int:
    """Проверяет id из пути: допускается только целое число."""
    raw_id = raw_id.strip()
    # Вне диапазона BIGINT драйвер БД падает с OverflowError
    if not _POST_ID_RE.match(raw_id) or not -2**63 <= int(raw_id) < 2**63:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid post id")
    return int(raw_id)


def storage_error(message: str) -> HTTPException:
    # Детали ошибки БД клиенту не отдаём, только в лог
    logger.exception(f"❌ {message}")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


@router.get("", response_model=List[PostResponse])
def list_posts(
    user_id: Optional[str] = Query(None, alias="userId", description="Пользователь, для которого считается isLiked"),
    db: Session = Depends(get_db),
):
    """
    Список постов, новые сверху, с likeCount и isLiked.
    """
    try:
        return post_service.list_posts(db, user_id or None)
    except SQLAlchemyError:
        raise storage_error("Failed to fetch posts")


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
def create_post(data: Optional[PostCreate] = None, db: Session = Depends(get_db)):
    try:
        return post_service.create_post(db, data or PostCreate())
    except SQLAlchemyError:
        raise storage_error("Failed to create post")


@router.delete("/{post_id}", response_model=MessageResponse)
def delete_post(post_id: str, db: Session = Depends(get_db)):
    """
    Удаляет пост. Лайки поста удаляются каскадно.
    """
    pid = parse_post_id(post_id)
    try:
        post_service.delete_post(db, pid)
    except SQLAlchemyError:
        raise storage_error("Failed to delete post")
    return {"message": "Post deleted"}


@router.post("/{post_id}/like", response_model=LikeResponse, status_code=status.HTTP_201_CREATED)
def like_post(post_id: str, data: Optional[LikeRequest] = None, db: Session = Depends(get_db)):
    pid = parse_post_id(post_id)
    try:
        return post_service.like_post(db, pid, data.user_id if data else None)
    except SQLAlchemyError:
        raise storage_error("Failed to like post")


@router.delete("/{post_id}/like", response_model=LikeResponse)
def unlike_post(post_id: str, data: Optional[LikeRequest] = None, db: Session = Depends(get_db)):
    pid = parse_post_id(post_id)
    try:
        return post_service.unlike_post(db, pid, data.user_id if data else None)
    except SQLAlchemyError:
        raise storage_error("Failed to unlike post")
