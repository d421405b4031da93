class ThreadCommentsError(Exception):
    """Base exception for all thread-comments errors."""
    pass


class AuthorizationError(ThreadCommentsError):
    """
    Raised when a user is not allowed to perform an action on a thread or comment.
    """
    def __init__(self, action=None, message=None):
        self.action = action
        self.message = message or f"You are not allowed to {action or 'do that'} here."
        super().__init__(self.message)
