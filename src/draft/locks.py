"""Process-local сериализация intents драфта.

DraftEngine обрабатывает intents строго по одному (single writer).
Единственный автономный источник intents — внешний таймер, вызывающий tick()
из другого потока. Лок гарантирует, что tick и pick одного хода не выполнятся
одновременно: принятый pick сбрасывает дедлайн внутри той же критической
секции, и ожидающий tick видит уже новый ход.

Лок основан на threading.RLock и работает только внутри одного процесса.
"""

from contextlib import contextmanager
from threading import RLock
from typing import Iterator, Optional


class IntentLock:
    """Реентерабельный лок критической секции intent."""

    def __init__(self) -> None:
        self._lock = RLock()

    @contextmanager
    def hold(self, reason: str = "", timeout_s: Optional[float] = None) -> Iterator[None]:
        """Захват лока на время обработки одного intent.

        Args:
            reason: описание для логов
            timeout_s: таймаут захвата (None — ждать без ограничения)

        Raises:
            TimeoutError: если лок не захвачен за timeout_s
        """
        if timeout_s is None:
            acquired = self._lock.acquire()
        else:
            acquired = self._lock.acquire(timeout=max(float(timeout_s), 0.0))

        if not acquired:
            raise TimeoutError(f"Failed to acquire draft intent lock within {timeout_s}s ({reason})")

        try:
            yield
        finally:
            self._lock.release()
