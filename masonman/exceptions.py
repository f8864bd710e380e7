"""Masonman exceptions."""


class MasonmanError(Exception):
    """
    Structured exception for ledger and workflow operations.

    Every failure path raises this with a stable ``code``; extra keyword
    arguments are kept in ``data`` for callers that need context.

    Usage:
        try:
            LoyaltyService.transition_redemption(redemption_id, "approved")
        except MasonmanError as e:
            if e.code == "INSUFFICIENT_STOCK":
                show_restock_hint(e.data["available"])
    """

    _default_messages = {
        "NOT_FOUND": "Record not found",
        "INVALID_TRANSITION": "Status transition not allowed",
        "INSUFFICIENT_STOCK": "Insufficient reward stock",
        "TRANSACTION_FAILED": "Transaction failed, no changes were applied",
        "INVALID_POINTS": "Points must be a non-zero integer",
        "INVALID_SOURCE_TYPE": "Unknown ledger source type",
        "LEDGER_IMMUTABLE": "Ledger entries cannot be changed or deleted",
    }

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(f"[{code}] {self.message}")

    def as_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "data": self.data}
