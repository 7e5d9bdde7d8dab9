"""Console logging setup for the command line tools."""
import logging


class Colors:
    """ANSI color codes for prettier output."""
    CYAN = '\033[36m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    RED = '\033[31m'
    GRAY = '\033[37m'
    BOLD = '\033[1m'
    RESET = '\033[0m'


class SimpleFormatter(logging.Formatter):
    """Colors each record by level and prints only the message."""
    LEVEL_COLORS = {
        'DEBUG': Colors.GRAY,
        'INFO': Colors.CYAN,
        'WARNING': Colors.YELLOW,
        'ERROR': Colors.RED,
        'CRITICAL': Colors.RED + Colors.BOLD,
    }

    def format(self, record):
        color = self.LEVEL_COLORS.get(record.levelname, Colors.RESET)
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return f"{color}{message}{Colors.RESET}"


def setup_logging(level=logging.INFO):
    """Route dronedispatch log records to a colored console handler."""
    logger = logging.getLogger("dronedispatch")
    logger.setLevel(level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    console = logging.StreamHandler()
    console.setFormatter(SimpleFormatter())
    logger.addHandler(console)
    logger.propagate = False
    return logger
