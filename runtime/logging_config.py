# runtime/logging_config.py

import logging
from typing import Optional

LOGGER_NAME = "gem_layout"


class RoundIntervalFilter(logging.Filter):
    """Pass per-round records only every ``interval`` rounds.

    The scheduler tags its per-round records with ``layout_round``; records
    without the tag always pass.
    """

    def __init__(self, interval: int = 1) -> None:
        super().__init__()
        if interval < 1:
            raise ValueError(f"round interval must be >= 1, got {interval!r}")
        self.interval = interval

    def filter(self, record: logging.LogRecord) -> bool:
        layout_round = getattr(record, "layout_round", None)
        if layout_round is None:
            return True
        return layout_round % self.interval == 0


def setup_logging(
    log_file: Optional[str],
    *,
    quiet: bool = False,
    debug: bool = False,
    round_interval: int = 1,
) -> logging.Logger:
    """Configure and return the shared `gem_layout` logger.

    No file is written unless `log_file` is given. Round temperatures are
    logged at DEBUG level, so they only show with `debug=True`; a
    `round_interval` above 1 keeps every k-th of them.
    """
    logger = logging.getLogger(LOGGER_NAME)
    # Propagation stays on so pytest caplog sees records even when quiet.
    logger.propagate = True

    level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for old_filter in list(logger.filters):
        if isinstance(old_filter, RoundIntervalFilter):
            logger.removeFilter(old_filter)
    if round_interval > 1:
        logger.addFilter(RoundIntervalFilter(round_interval))

    formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    open_error = None

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="w")
        except OSError as exc:
            open_error = exc
        else:
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    if not quiet:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if open_error is not None:
        logger.warning("Could not open log file '%s': %s", log_file, open_error)

    return logger
