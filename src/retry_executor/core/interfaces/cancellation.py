"""Cancellation port for cooperative cancellation of retry waits."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class CancellationPort(Protocol):
    """Queryable and awaitable cancellation request.

    The executor only consults the signal around inter-attempt waits; an
    in-flight operation is never interrupted through this port.
    """

    @property
    def is_cancellation_requested(self) -> bool:  # pragma: no cover - protocol
        """True once cancellation has been requested. Never resets."""
        ...

    async def wait(self) -> None:  # pragma: no cover - protocol
        """Suspend until cancellation is requested."""
        ...
