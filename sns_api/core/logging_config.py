import logging


def setup_logging(level: str = "INFO") -> None:
    """Настраивает корневой логгер (один раз за процесс)."""
    root = logging.getLogger()
    if root.handlers:
        # Уже настроено (uvicorn, повторный create_app в тестах)
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root.addHandler(handler)
