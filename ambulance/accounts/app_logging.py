import logging
from pythonjsonlogger import jsonlogger


def setup_logger(level: str = 'INFO', json: bool = True) -> None:
    logHandler = logging.StreamHandler()
    if json:
        formatter = jsonlogger.JsonFormatter(
            '%(asctime)s %(levelname)s %(name)s %(message)s',
            rename_fields={'levelname': 'level', 'asctime': 'timestamp'}
        )
    else:
        formatter = logging.Formatter(
            '%(asctime)s %(levelname)s %(name)s %(message)s'
        )
    logHandler.setFormatter(formatter)
    logger = logging.getLogger('ambulance')
    # Repeated setup replaces the handler.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.addHandler(logHandler)
    logger.setLevel(level)
