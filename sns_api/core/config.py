import os
from dotenv import load_dotenv

# Загружаем переменные окружения
load_dotenv()

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT") or 8888)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Список разрешённых доменов через запятую, "*" — все
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Параметры PostgreSQL (используются, если DATABASE_URL не задан явно)
DB_USERNAME = os.getenv("DB_USERNAME")
DB_PASSWORD = os.getenv("DB_PASSWORD")
DB_NAME = os.getenv("DB_NAME")
DB_PORT = os.getenv("DB_PORT", "5432")
DB_HOST = os.getenv("DB_HOST")


def build_database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    if DB_HOST:
        return f"postgresql+psycopg2://{DB_USERNAME}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
    return "sqlite:///./sns.db"


# Формируем строку подключения
DATABASE_URL = build_database_url()
