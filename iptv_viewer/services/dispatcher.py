"""Single coordination context that serializes state mutations."""
import asyncio
import logging
from typing import Any, Callable, Optional


logger = logging.getLogger(__name__)


class Dispatcher:
    """Runs posted callables one at a time, in order, on its event loop.

    Media-engine callbacks and network completions post their state changes
    here instead of mutating shared state directly. ``post`` may be called
    from any thread.
    """

    def __init__(self):
        self._queue: Optional[asyncio.Queue] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self):
        """Start the processing loop on the running event loop."""
        if self.running:
            return
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        self._task = self._loop.create_task(self._run())

    async def stop(self):
        """Process what is already queued, then stop the loop."""
        if not self.running:
            return
        await self._queue.join()
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def __aenter__(self) -> "Dispatcher":
        self.start()
        return self

    async def __aexit__(self, *exc_info):
        await self.stop()

    def post(self, fn: Callable[..., Any], *args: Any):
        """Queue ``fn(*args)`` for execution on the coordination loop."""
        if not self.running:
            raise RuntimeError("Dispatcher is not running")
        if self.in_loop():
            self._queue.put_nowait((fn, args))
        else:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, (fn, args))

    def call(self, fn: Callable[..., Any], *args: Any):
        """Run ``fn(*args)`` on the coordination loop.

        Runs inline when already on the loop thread (or when the dispatcher
        is not running), otherwise posts it. Use for synchronous commands.
        """
        if not self.running or self.in_loop():
            fn(*args)
        else:
            self.post(fn, *args)

    def in_loop(self) -> bool:
        """True when called from the dispatcher's own event loop."""
        try:
            return asyncio.get_running_loop() is self._loop
        except RuntimeError:
            return False

    async def join(self):
        """Wait until every posted callable has run."""
        if self.running:
            await self._queue.join()

    async def _run(self):
        while True:
            fn, args = await self._queue.get()
            try:
                result = fn(*args)
                if asyncio.iscoroutine(result):
                    await result
            except Exception:
                logger.exception("Dispatched call %r failed", fn)
            finally:
                self._queue.task_done()
