"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class NotFoundError(DomainException):
    """Requested record does not exist for this user"""

    pass


class UserNotFoundError(NotFoundError):
    """User id resolves to no user record"""

    def __init__(self, user_id: int):
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id


class ExpenseNotFoundError(NotFoundError):
    """Expense is missing or belongs to another user"""

    def __init__(self, expense_id: int):
        super().__init__(f"Expense {expense_id} not found")
        self.expense_id = expense_id


class StorageError(DomainException):
    """Persistence layer failed (connectivity, constraint violation)"""

    pass
