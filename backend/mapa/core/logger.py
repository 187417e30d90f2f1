import logging
import os
from logging.handlers import RotatingFileHandler
from mapa.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class LoggerConfig:
    """
    One named logger writing to the console and to a size-rotated file under ``log_directory``.
    ``log`` appends any ``extra`` context as ``key=value`` pairs after the message.
    """
    def __init__(
        self,
        env=logging.INFO,
        logger_name="MAPA-BE",
        log_directory="logs",
        log_file="mapa.log",
        max_bytes=10 * 1024 * 1024,
        backup_count=5,
    ):
        self.env = env
        self.logger = logging.getLogger(logger_name)
        self.log_file_path = os.path.join(os.path.abspath(log_directory), log_file)
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self.setup_logger()

    def _handlers(self):
        formatter = logging.Formatter(LOG_FORMAT)
        handlers = [logging.StreamHandler()]
        try:
            os.makedirs(os.path.dirname(self.log_file_path), exist_ok=True)
            handlers.append(RotatingFileHandler(
                self.log_file_path,
                maxBytes=self.max_bytes,
                backupCount=self.backup_count,
                encoding="utf-8",
            ))
        except OSError as e:
            # Read-only filesystems still get console output
            print(f"File logging disabled ({self.log_file_path}): {str(e)}")

        for handler in handlers:
            handler.setLevel(self.env)
            handler.setFormatter(formatter)
        return handlers

    def setup_logger(self):
        # Uvicorn reload imports the app twice in one process
        if not self.logger.handlers:
            for handler in self._handlers():
                self.logger.addHandler(handler)
        self.logger.setLevel(self.env)
        self.logger.propagate = False

    def log(self, level: int, message: str, extra: dict = None):
        if extra:
            context = " ".join(f"{key}={value!r}" for key, value in extra.items())
            message = f"{message} | {context}"
        self.logger.log(level, message)

logs = LoggerConfig(
    env=settings.LOGGER,
    log_directory=settings.LOG_DIR,
    log_file=settings.LOG_FILE,
    max_bytes=settings.LOG_MAX_BYTES,
    backup_count=settings.LOG_BACKUP_COUNT,
)
