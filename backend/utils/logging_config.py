import logging
import os
from datetime import datetime

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging():
    """Configure the root logger with a timestamped log file and a console handler.

    LOG_DIR selects the directory for the log file; an empty LOG_DIR keeps the
    console handler only. LOG_LEVEL sets the minimum level for both handlers.
    """
    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    log_dir = os.getenv("LOG_DIR", "logs")

    root = logging.getLogger()
    root.setLevel(level)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True) # Create the log directory if it doesn't exist

        # Create a unique log file name based on current date/time
        current_time_str = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        log_file = os.path.join(log_dir, f"app_{current_time_str}.log")
        file_handler = logging.FileHandler(log_file, mode='a')
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(file_handler)

    # Also output logs to the console
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(console_handler)
