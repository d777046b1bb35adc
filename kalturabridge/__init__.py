from .utils.logging import Logger, get_logger
from .utils.version import get_pyproject_version

__author__ = "KalturaBridge Contributors"
__license__ = "MIT"
__version__ = get_pyproject_version()

# Console-only until the CLI reconfigures it from the loaded settings
log: Logger = get_logger(log_name="KalturaBridge", log_level="INFO")
