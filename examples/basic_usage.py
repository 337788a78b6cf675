"""examples/basic_usage.py - jot in a small command-line script.

Demonstrates:
    Scenario A: leveled calls, where errors carry a traceback automatically
    Scenario B: context and explicit traces for debugging a single call site

Run:
    python examples/basic_usage.py
    JOT_MIN_LEVEL=WARNING python examples/basic_usage.py
"""

import jot

# ---------------------------------------------------------------------------
# Business logic
# ---------------------------------------------------------------------------


def get_balance(user_id: int) -> int:
    """Simulate a DB balance query."""
    jot.debug("Querying balance from DB: user_id=%d", user_id)
    return 3_000


def pay(user_id: int, amount: int) -> bool:
    """Simulate a payment flow."""
    jot.info("Payment attempt: user_id=%d, amount=%d", user_id, amount)
    balance = get_balance(user_id)

    if balance < amount:
        # ERROR attaches the stack that led here.
        jot.error("Insufficient funds (balance=%d, requested=%d)", balance, amount)
        return False

    jot.info("Payment successful")
    return True


def refund(user_id: int) -> None:
    """Show the single calling frame instead of a whole traceback."""
    jot.warn("Refund requested for user_id=%d", user_id, trace=False, ctx=True)


# ---------------------------------------------------------------------------
# Run both scenarios
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    print("=" * 60)
    print("Scenario A: leveled logging")
    print("=" * 60)
    pay(user_id=101, amount=1_000)
    pay(user_id=202, amount=5_000)

    print()
    print("=" * 60)
    print("Scenario B: context, trace and simple backtrace")
    print("=" * 60)
    refund(user_id=303)
    print(jot.trace())
    print(jot.simple_backtrace())
