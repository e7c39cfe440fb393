from typing import Optional


class RetryExecutorError(Exception):
    """Base exception for failures raised by the retry executor itself.

    Failures raised by the wrapped operation are never wrapped in this type;
    they propagate unmodified.
    """


class RetryCancelledError(RetryExecutorError):
    """Raised when the cancellation signal fires around an inter-attempt wait.

    Attributes:
        attempt_number: Attempt whose failure preceded the cancelled wait
        max_attempts: Configured total number of attempts
        last_failure: Failure raised by the operation on that attempt
    """
    def __init__(
        self,
        attempt_number: Optional[int] = None,
        max_attempts: Optional[int] = None,
        last_failure: Optional[BaseException] = None,
    ):
        self.attempt_number = attempt_number
        self.max_attempts = max_attempts
        self.last_failure = last_failure
        if attempt_number is None:
            message = "Retry wait cancelled"
        else:
            message = f"Retry cancelled after attempt {attempt_number} of {max_attempts}"
        super().__init__(message)


class RetryInvariantError(RetryExecutorError):
    """Raised if the attempt loop exits without returning or raising.

    The loop bound and its branches make this unreachable for any valid
    configuration; seeing it means the executor itself is broken.
    """
    def __init__(self, attempt_number: int, max_attempts: int):
        self.attempt_number = attempt_number
        self.max_attempts = max_attempts
        super().__init__(
            f"Retry loop exited without an outcome (attempt={attempt_number}, max_attempts={max_attempts})"
        )
