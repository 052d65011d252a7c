from __future__ import annotations

import logging
import sys


class _DefaultCycleFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "cycle_id"):
            record.cycle_id = "n/a"
        return True


def configure_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s cycle_id=%(cycle_id)s message=%(message)s",
        stream=sys.stdout,
    )
    # httpx and friends log without a cycle id.
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, _DefaultCycleFilter) for f in handler.filters):
            handler.addFilter(_DefaultCycleFilter())


class CycleAdapter(logging.LoggerAdapter):
    def process(self, msg, kwargs):
        kwargs.setdefault("extra", {})
        kwargs["extra"].setdefault("cycle_id", self.extra.get("cycle_id", "n/a"))
        return msg, kwargs
