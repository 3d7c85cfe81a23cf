import logging
from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy import desc, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sns_api.models.like import Like
from sns_api.models.post import Post
from sns_api.schemas.post import LikeResponse, PostCreate, PostResponse

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Ошибка, о которой нужно сообщить клиенту (см. обработчик в main.py)."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(ServiceError):
    status_code = 400


class PostNotFoundError(ServiceError):
    status_code = 404

    def __init__(self, post_id: int):
        super().__init__("Post not found")
        self.post_id = post_id


class AlreadyLikedError(ServiceError):
    status_code = 400

    def __init__(self):
        super().__init__("Post already liked")


def _as_utc(value: datetime) -> datetime:
    # SQLite отдаёт время без зоны, а хранится оно в UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_response(post: Post, like_count: int, is_liked: bool) -> PostResponse:
    return PostResponse(
        id=post.id,
        content=post.content,
        image_url=post.image_url,
        user_id=post.user_id,
        created_at=_as_utc(post.created_at),
        updated_at=_as_utc(post.updated_at),
        like_count=like_count,
        is_liked=is_liked,
    )


def _require_user_id(user_id: Optional[str]) -> str:
    if user_id is None or not user_id.strip():
        raise InvalidInputError("userId is required")
    return user_id


def _ensure_post_exists(db: Session, post_id: int) -> None:
    if db.get(Post, post_id) is None:
        raise PostNotFoundError(post_id)


def count_likes(db: Session, post_id: int) -> int:
    return db.query(Like).filter(Like.post_id == post_id).count()


def list_posts(db: Session, user_id: Optional[str] = None) -> List[PostResponse]:
    """
    Все посты, новые сверху, с количеством лайков.
    is_liked = True, только если передан user_id и он лайкнул пост.
    """
    rows = (
        db.query(Post, func.count(Like.id))
        .outerjoin(Like, Like.post_id == Post.id)
        .group_by(Post.id)
        .order_by(desc(Post.created_at), desc(Post.id))
        .all()
    )

    liked_ids = set()
    if user_id:
        liked_ids = {
            post_id for (post_id,) in db.query(Like.post_id).filter(Like.user_id == user_id).all()
        }

    return [_to_response(post, like_count, post.id in liked_ids) for post, like_count in rows]


def create_post(db: Session, data: PostCreate) -> PostResponse:
    content = (data.content or "").strip()
    if not content:
        raise InvalidInputError("Content is required")

    post = Post(
        content=content,
        image_url=data.image_url or None,
        user_id=data.user_id or None,
    )
    db.add(post)
    db.commit()
    db.refresh(post)

    logger.info(f"✅ Создан пост {post.id}")
    return _to_response(post, 0, False)


def delete_post(db: Session, post_id: int) -> None:
    """Удаляет пост вместе с его лайками."""
    post = db.get(Post, post_id)
    if post is None:
        raise PostNotFoundError(post_id)

    db.delete(post)
    db.commit()
    logger.info(f"❌ Пост {post_id} удалён")


def like_post(db: Session, post_id: int, user_id: Optional[str]) -> LikeResponse:
    user_id = _require_user_id(user_id)
    _ensure_post_exists(db, post_id)

    db.add(Like(post_id=post_id, user_id=user_id))
    try:
        db.commit()
    except IntegrityError:
        # Либо дубль пары (post_id, user_id), либо пост успели удалить (внешний ключ)
        db.rollback()
        _ensure_post_exists(db, post_id)
        raise AlreadyLikedError()

    logger.info(f"👍 {user_id} лайкнул пост {post_id}")
    return LikeResponse(post_id=post_id, like_count=count_likes(db, post_id), is_liked=True)


def unlike_post(db: Session, post_id: int, user_id: Optional[str]) -> LikeResponse:
    """Снимает лайк. Если лайка не было — это не ошибка."""
    user_id = _require_user_id(user_id)
    _ensure_post_exists(db, post_id)

    deleted = (
        db.query(Like)
        .filter(Like.post_id == post_id, Like.user_id == user_id)
        .delete(synchronize_session=False)
    )
    db.commit()

    if deleted:
        logger.info(f"👎 {user_id} убрал лайк с поста {post_id}")
    return LikeResponse(post_id=post_id, like_count=count_likes(db, post_id), is_liked=False)
