import logging
import os


def setup_logger():
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[
            logging.FileHandler(os.getenv("LOG_FILE", "peerflix.log"), mode="a"),
            logging.StreamHandler(),
        ],
    )
    return logging.getLogger("peerflix")


logger = setup_logger()
