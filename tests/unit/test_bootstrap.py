# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for process wiring."""

import pytest

from zoezi.bootstrap import lifecycle_services, shutdown, startup
from zoezi.core.config import DatabaseSettings, Settings
from zoezi.infrastructure.database import DatabaseError, create_schema, get_engine
from zoezi.models.learner import RegisterTutorRequest


class TestLifecycleServices:
    """Tests for startup, per-request services and shutdown."""

    @pytest.mark.asyncio
    async def test_services_share_one_session(self, tmp_path) -> None:
        settings = Settings(
            environment="test",
            database=DatabaseSettings(url_override=f"sqlite+aiosqlite:///{tmp_path / 'boot.db'}"),
        )

        await startup(settings)
        try:
            await create_schema(get_engine())

            async with lifecycle_services(request_id="req-1") as services:
                tutor = await services.identity.register_tutor(
                    RegisterTutorRequest(first_name="Kip", last_name="Rono", email="kip@example.com")
                )
                assert services.enrollment.db is services.session
                assert services.certification.db is services.session

            async with lifecycle_services() as services:
                stored = await services.identity.get_tutor(tutor.id)
        finally:
            await shutdown()

        assert stored.email == "kip@example.com"

    @pytest.mark.asyncio
    async def test_requires_startup(self) -> None:
        with pytest.raises(DatabaseError):
            async with lifecycle_services():
                pass
