"""
Observable value holders.

A LiveData can be read synchronously, observed with a callback, or awaited
until it first holds a value. Setting happens through MutableLiveData and may
come from any thread; awaiting code is always resumed on its own event loop.
"""
import asyncio
import threading
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")

_UNSET = object()


class LiveData(Generic[T]):
    def __init__(self, value=_UNSET):
        self._lock = threading.Lock()
        self._value = value
        self._observers: list[Callable[[T], None]] = []

    @property
    def is_set(self) -> bool:
        return self._value is not _UNSET

    @property
    def value(self) -> Optional[T]:
        """Current value, or None while nothing has been published."""
        value = self._value
        return None if value is _UNSET else value

    def observe(self, observer: Callable[[T], None]) -> Callable[[], None]:
        """
        Register a callback for every published value.
        Fires immediately when a value is already held.
        Returns a function that removes the callback.
        """
        with self._lock:
            self._observers.append(observer)
            current = self._value

        if current is not _UNSET:
            observer(current)

        def unsubscribe() -> None:
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return unsubscribe

    async def wait(self, timeout: Optional[float] = None) -> T:
        """Wait for the first value. Raises asyncio.TimeoutError on timeout."""
        if self.is_set:
            return self._value

        loop = asyncio.get_running_loop()
        future: asyncio.Future = loop.create_future()

        def _resolve(value: T) -> None:
            if not future.done():
                future.set_result(value)

        unsubscribe = self.observe(lambda value: loop.call_soon_threadsafe(_resolve, value))
        try:
            return await asyncio.wait_for(future, timeout)
        finally:
            unsubscribe()

    def _publish(self, value: T) -> None:
        with self._lock:
            self._value = value
            observers = list(self._observers)
        for observer in observers:
            observer(value)

    def __repr__(self) -> str:
        state = repr(self._value) if self.is_set else "<unset>"
        return f"{type(self).__name__}({state})"


class MutableLiveData(LiveData[T]):
    def set_value(self, value: T) -> None:
        self._publish(value)
