import logging
import sys


class ContextFormatter(logging.Formatter):
    """Formatter that tolerates records without work_order_id and stage fields."""
    def format(self, record):
        if not hasattr(record, 'work_order_id'):
            record.work_order_id = '-'
        if not hasattr(record, 'stage'):
            record.stage = '-'
        return super().format(record)


def configure_logging(level: int = logging.INFO) -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ContextFormatter(
        "%(asctime)s %(levelname)s %(name)s [work_order_id=%(work_order_id)s stage=%(stage)s] - %(message)s"
    ))
    logging.basicConfig(
        level=level,
        handlers=[handler],
    )
