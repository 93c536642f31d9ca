import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s.%(funcName)s:%(lineno)d - %(message)s"


def configure_logging(level: str = "INFO"):
    logging.basicConfig(level=level, format=LOG_FORMAT)


def first_value(value):
    """Query values may repeat; options only look at the first one."""
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value
