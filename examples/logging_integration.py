"""examples/logging_integration.py - Existing logging setups, line tracing, exit reports.

Demonstrates:
    - JotHandler: one addHandler() call routes a standard logger through jot
    - XTracer: ``set -x`` style tracing of a block of code
    - install_exit_handler(): a post-mortem report when the script dies

Run:
    python examples/logging_integration.py
"""

import logging

from jot import JotHandler, XTracer, install_exit_handler

# ---------------------------------------------------------------------------
# Standard logger setup, plus one line for jot
# ---------------------------------------------------------------------------
logger = logging.getLogger("payment_service")
logger.setLevel(logging.DEBUG)
logger.addHandler(JotHandler())

install_exit_handler()


def charge(amount: int) -> int:
    fee = amount // 100
    return amount + fee


if __name__ == "__main__":
    logger.info("Service starting")

    with XTracer():
        total = charge(2_500)

    logger.warning("Charged %d", total)

    try:
        charge(None)
    except TypeError:
        logger.exception("Charge failed")

    # Unhandled: the exit handler prints its report, then the normal traceback.
    raise RuntimeError("giving up")
