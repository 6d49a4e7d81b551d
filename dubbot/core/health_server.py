"""HTTP health check server"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Any

from aiohttp import web

if TYPE_CHECKING:
    from .context import BotContext

logger = logging.getLogger("Bot.Health")

SERVICE_NAME = "dubbot"


class HealthCheckServer:
    """HTTP health check server"""

    def __init__(self, context: BotContext, host: str = "0.0.0.0", port: int = 4344):
        self.context = context
        self.host = host
        self.port = port
        self.app = web.Application()
        self.runner: web.AppRunner | None = None
        self._start_time: float = time.time()
        self._heartbeat_task: asyncio.Task | None = None
        self._setup_routes()

    def _setup_routes(self) -> None:
        """Configure HTTP routes"""
        self.app.router.add_get("/", self.handle_root)
        self.app.router.add_get("/health", self.handle_health)
        self.app.router.add_get("/status", self.handle_status)
        self.app.router.add_get("/ping", self.handle_ping)

    @property
    def ready(self) -> bool:
        state = self.context.state
        return state is not None and state.initialized

    def status(self) -> dict[str, Any]:
        state = self.context.state
        current = state.current_play if state else None
        return {
            "service": SERVICE_NAME,
            "room": self.context.bot.room_name,
            "ready": self.ready,
            "uptime_seconds": int(time.time() - self._start_time),
            "users_in_room": len(state.users_in_room) if state else 0,
            "wait_list_length": len(state.wait_list) if state else 0,
            "chat_history_length": len(state.chat_history) if state else 0,
            "play_history_length": len(state.play_history) if state else 0,
            "current_play": current.media.full_title if current else None,
        }

    async def handle_root(self, request: web.Request) -> web.Response:
        """Root endpoint - minimal service info"""
        return web.json_response({"service": SERVICE_NAME, "status": "running"})

    async def handle_health(self, request: web.Request) -> web.Response:
        """Liveness, always 200"""
        ready = self.ready
        return web.json_response({"status": "healthy" if ready else "starting", "ready": ready})

    async def handle_status(self, request: web.Request) -> web.Response:
        """Room snapshot summary"""
        return web.json_response(self.status())

    async def handle_ping(self, request: web.Request) -> web.Response:
        """Ping endpoint"""
        return web.Response(text="pong")

    async def _heartbeat(self) -> None:
        """Periodic heartbeat: log uptime and room status"""
        while True:
            await asyncio.sleep(300)
            status = self.status()
            logger.info(
                f"Heartbeat: uptime={status['uptime_seconds']}s, ready={status['ready']}, "
                f"users={status['users_in_room']}, playing={status['current_play']}"
            )

    async def start(self) -> None:
        """Start health check server"""
        try:
            self.runner = web.AppRunner(self.app)
            await self.runner.setup()

            site = web.TCPSite(self.runner, self.host, self.port)
            await site.start()

            self._heartbeat_task = asyncio.create_task(self._heartbeat())

            logger.info(f"Health server started on {self.host}:{self.port}")
            logger.info(f"  GET http://{self.host}:{self.port}/health - Health check")
            logger.info(f"  GET http://{self.host}:{self.port}/status - Room status")

        except Exception as e:
            logger.exception(f"Failed to start health server: {e}")
            raise

    async def stop(self) -> None:
        """Stop health check server"""
        if self._heartbeat_task:
            self._heartbeat_task.cancel()
        if self.runner:
            try:
                await self.runner.cleanup()
                logger.info("Health server stopped")
            except Exception as e:
                logger.exception(f"Error stopping health server: {e}")
