"""Demo entrypoint exercising the sink end to end.

Run with `python -m sinklog.demo`. It:

- Registers the sink on the root logger (stdout unless SINKLOG_* says otherwise).
- Logs at several levels from the main thread.
- Logs from a named thread and from an unnamed one.

It is a manual harness, not something the library itself depends on.
"""

from __future__ import annotations

import logging
import threading

from . import binding
from .models import TRACE

logger = logging.getLogger("sinklog.demo")


def run_demo() -> None:
    """Log a handful of records through the already-initialized sink."""
    logger.info("info")
    logger.error("error")
    logger.debug("silly")
    logger.log(TRACE, "very silly")

    named = threading.Thread(target=lambda: logger.info("hello from the other thread!"), name="other")
    named.start()
    named.join()

    unnamed = threading.Thread(target=lambda: logger.info("mrrp"))
    unnamed.start()
    unnamed.join()

    binding.flush()


def main() -> None:
    binding.init_from_config()
    run_demo()


if __name__ == "__main__":
    main()
