"""
Module classes with scripted start/stop behaviour for tests.
"""

import asyncio

from appmods import Module


class Recorder(Module):
    """Records lifecycle calls into the shared `events` list in its config."""

    def _record(self, event):
        self.config.get("events", []).append((event, type(self).__name__))

    async def start(self):
        self._record("start")
        return type(self).__name__

    async def stop(self):
        self._record("stop")
        return "stopped"


class QuickStop(Recorder):
    pass


class SlowStop(Recorder):
    """Stop takes `delay` seconds (config), longer than its timeout."""

    async def stop(self):
        await asyncio.sleep(self.config.get("delay", 0.5))
        self._record("stop")
        return "late"


class FailingStop(Recorder):
    async def stop(self):
        raise RuntimeError("stop failed")


class NoStop(Module):
    async def start(self):
        return "nostop"


class Passive(Module):
    """Neither start nor stop."""


class FailingStart(Module):
    async def start(self):
        await asyncio.sleep(0)
        raise ValueError("start failed")


class SlowStart(Module):
    """Start that only finishes after `delay` seconds."""

    started = False

    async def start(self):
        await asyncio.sleep(self.config.get("delay", 1.0))
        self.started = True


class SyncModule(Module):
    """Plain (non-async) start and stop."""

    def start(self):
        return "sync-started"

    def stop(self):
        return "sync-stopped"

    def echo(self, value, suffix=""):
        return f"{value}{suffix}"


class Echo(Module):
    def echo(self, value, suffix=""):
        return f"echo:{value}{suffix}"
