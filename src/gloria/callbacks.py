"""then / catch / finally callback chain over a sent Client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Generic, TypeVar

from .log import LogLevel
from .models import Envelope, Failure

if TYPE_CHECKING:
    from .client import Client
    from .config import ClientConfig
    from .models import Meta, ResponseContext

T = TypeVar("T")


class CallbackMixin(Generic[T]):
    exception: Failure | None
    result: Envelope[T]
    config: ClientConfig
    meta: Meta
    context: ResponseContext
    _chalk: Callable[[LogLevel, str], None]

    def then(self, cb: Callable[[T | None], Any]) -> Client[T]:
        """Run ``cb(data)`` when the request finished without a failure.

        A business code different from ``config.ok_code`` is logged but does
        not prevent the callback.
        """
        if self.exception is None:
            if self.result.code == self.config.ok_code:
                self._chalk(LogLevel.SUCCESS, "HTTP request successful")
            else:
                self._chalk(
                    LogLevel.FAIL,
                    "The HTTP request was successful, but the business "
                    "failed, please check!",
                )
            cb(self.result.data)
        return self  # type: ignore[return-value]

    def catch(self, cb: Callable[[Failure], Any]) -> Client[T]:
        """Run ``cb(failure)`` when the request recorded a failure."""
        failure = self.exception
        if failure is not None:
            if failure.is_transport:
                self._chalk(LogLevel.PANIC, "Panic Request!")
            else:
                self._chalk(LogLevel.FAIL, "Business Failed!")
            cb(failure)
        return self  # type: ignore[return-value]

    def finally_(
        self, cb: Callable[[Client[T]], Any], print_log: bool = False
    ) -> None:
        """Always run ``cb(client)``, optionally logging a summary first."""
        if print_log:
            self._chalk(LogLevel.INFO, self.meta.method)
            self._chalk(LogLevel.INFO, self.meta.url)
            self._chalk(LogLevel.INFO, repr(self.config))
            self._chalk(
                LogLevel.INFO,
                f"HTTP Status Code: {self.context.status}, "
                f"Business Error Code: {self.result.code}",
            )
        cb(self)  # type: ignore[arg-type]
