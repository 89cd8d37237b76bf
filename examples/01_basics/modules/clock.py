"""Logs a tick every `interval` seconds while running."""

import asyncio

from appmods import Module


class Clock(Module):
    async def start(self):
        self._task = asyncio.create_task(self._tick(self.config.get("interval", 1.0)))

    async def _tick(self, interval):
        n = 0
        while True:
            await asyncio.sleep(interval)
            n += 1
            self.lg.info("tick", extra={"n": n})

    async def stop(self):
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
