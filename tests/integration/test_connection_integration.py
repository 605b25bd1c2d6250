"""
Integration tests for ConnectionManager with real MongoDB.
"""

import pytest

from motor_mongoose import ConnectionManager, InitializationError


@pytest.mark.integration
@pytest.mark.asyncio
class TestConnectionIntegration:
    """Startup handshake against a live server."""

    async def test_initialize_and_shutdown(self, mongodb_container):
        manager = ConnectionManager(
            mongodb_container.get_connection_url(), "connection_test", min_pool_size=1
        )

        client = await manager.initialize()
        assert (await client.admin.command("ping"))["ok"] == 1
        assert manager.get_collection("users").name == "users"

        await manager.shutdown()
        assert manager.initialized is False

    async def test_unreachable_server_raises(self):
        manager = ConnectionManager(
            "mongodb://127.0.0.1:1/?serverSelectionTimeoutMS=1000",
            "connection_test",
            min_pool_size=1,
            server_selection_timeout_ms=1000,
            connect_timeout=3.0,
        )

        with pytest.raises(InitializationError):
            await manager.initialize()
