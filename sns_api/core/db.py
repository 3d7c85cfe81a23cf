from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

# Базовый класс для моделей
Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # В SQLite внешние ключи (и ON DELETE CASCADE) выключены по умолчанию
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Подключение к БД: движок и фабрика сессий.

    Создаётся один раз при старте приложения (см. lifespan в main.py),
    закрывается через dispose() при остановке.
    """

    def __init__(self, url: str):
        self.url = url
        kwargs = {}
        is_sqlite = url.startswith("sqlite")
        if is_sqlite:
            kwargs["connect_args"] = {"check_same_thread": False}
            if url in ("sqlite://", "sqlite:///:memory:"):
                # Одно соединение на всё время жизни, иначе in-memory БД теряется
                kwargs["poolclass"] = StaticPool

        self.engine = create_engine(url, **kwargs)
        if is_sqlite:
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_all(self) -> None:
        # Импортируем модели, чтобы их таблицы попали в метаданные
        from sns_api.models import like, post  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


# Функция для получения сессии БД (используется в Depends)
def get_db(request: Request):
    db = request.app.state.db.SessionLocal()
    try:
        yield db
    finally:
        db.close()
