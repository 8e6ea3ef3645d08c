import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(script_name: str, data_dir: Path) -> logging.Logger:
    """Log DEBUG and above to a rotating file under data_dir/logs, INFO and above to console."""
    log_dir = Path(data_dir) / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    log_path = log_dir / f"{script_name}.log"

    file_handler = RotatingFileHandler(log_path, maxBytes=10 * 1024 * 1024, backupCount=5)
    file_handler.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)

    logging.basicConfig(
        level=logging.DEBUG,  # Root logger must be at lowest level (DEBUG)
        format=LOG_FORMAT,
        handlers=[file_handler, console_handler],
        force=True,
    )

    logger = logging.getLogger(script_name)
    logger.info(f"Logging initialized. Log file: {log_path}")

    return logger
