import logging

import hls_tags.config as config
from dotenv import load_dotenv

load_dotenv()

default_level = config.LOGGING_LEVEL or logging.WARNING
logging.basicConfig(
    level=default_level,
    format="%(asctime)s [%(levelname)s] [%(filename)s:%(lineno)d - %(funcName)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("hls_tags")


def get_logger():
    return logger
