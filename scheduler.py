"""
Frame Scheduling
Cancellable per-frame callbacks for the animation loop
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional

FrameCallback = Callable[[], None]


class FrameRequest:
    """Cancellation token for one scheduled frame."""

    __slots__ = ("callback", "cancelled", "fired")

    def __init__(self, callback: FrameCallback) -> None:
        self.callback = callback
        self.cancelled = False
        self.fired = False

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if not self.active:
            return
        self.fired = True
        self.callback()


class FrameScheduler:
    """Base class: hand out a FrameRequest that fires once on the next frame."""

    def request_frame(self, callback: FrameCallback) -> FrameRequest:
        raise NotImplementedError("Schedulers must implement request_frame(callback).")


class ManualScheduler(FrameScheduler):
    """Headless scheduler; frames fire only when run_pending() is called."""

    def __init__(self) -> None:
        self._queue: List[FrameRequest] = []

    def request_frame(self, callback: FrameCallback) -> FrameRequest:
        request = FrameRequest(callback)
        self._queue.append(request)
        return request

    @property
    def pending(self) -> List[FrameRequest]:
        return [r for r in self._queue if r.active]

    def run_pending(self) -> int:
        """Fire every request queued before this call; return how many fired."""
        batch, self._queue = self._queue, []
        fired = 0
        for request in batch:
            if request.active:
                request.fire()
                fired += 1
        return fired

    def run_frames(self, count: int) -> None:
        for _ in range(count):
            self.run_pending()


class TimerScheduler(FrameScheduler):
    """
    Drive frames from a GUI timer such as ``fig.canvas.new_timer(interval=...)``.

    The timer object needs add_callback/remove_callback/start/stop; only one
    request is kept. close() unsubscribes on teardown.
    """

    def __init__(self, timer: Any) -> None:
        self._timer = timer
        self._request: Optional[FrameRequest] = None
        self._running = False
        self._subscribed = False
        self._subscribe()

    def _subscribe(self) -> None:
        if not self._subscribed:
            self._timer.add_callback(self._on_timer)
            self._subscribed = True

    def request_frame(self, callback: FrameCallback) -> FrameRequest:
        if self._request is not None:
            self._request.cancel()
        self._subscribe()
        self._request = FrameRequest(callback)
        if not self._running:
            self._timer.start()
            self._running = True
        return self._request

    def _on_timer(self) -> None:
        request, self._request = self._request, None
        if request is None or not request.active:
            self._timer.stop()
            self._running = False
            return
        request.fire()

    def close(self) -> None:
        """Cancel any pending frame, stop the timer and unsubscribe from it."""
        if self._request is not None:
            self._request.cancel()
            self._request = None
        self._timer.stop()
        self._running = False
        if self._subscribed:
            self._timer.remove_callback(self._on_timer)
            self._subscribed = False
