# run_server.py
import logging
import uvicorn
from app.core.config import settings

# Настраиваем логирование так же, как в main.py
logging.basicConfig(
    level=settings.LOGGING_LEVEL.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

logger = logging.getLogger(__name__)

def main():
    """
    Запуск прокси и UI через uvicorn (по умолчанию http://127.0.0.1:3000).
    """
    logger.info(f"Server is running on http://{settings.SERVER_HOST}:{settings.SERVER_PORT}")
    uvicorn.run(
        "app.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        log_level=settings.LOGGING_LEVEL.lower(),
    )


if __name__ == "__main__":
    try:
        main()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Server stopped by user.")
