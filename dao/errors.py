# dao/errors.py
class ActionError(Exception):
    """Base class for every business failure of an action."""

    code = "action_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message


class ValidationError(ActionError):
    code = "validation"


class NotFoundError(ActionError):
    code = "not_found"


class IncompatibleError(ActionError):
    code = "incompatible"


class BindingError(ActionError):
    code = "binding"


class InsufficientStockError(ActionError):
    code = "insufficient_stock"


class TransactionError(ActionError):
    """Database fault raised inside the action transaction."""

    code = "transaction"
