# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the resilient collection fetcher."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from enrollsync.core.errors import SourceUnavailableError
from enrollsync.domains.catalog.adapter import normalize_class
from enrollsync.domains.catalog.fetcher import fetch_collection
from enrollsync.models.enrollment import ErrorKind


class TestFetchCollection:
    """Tests for fetch_collection."""

    @pytest.mark.asyncio
    async def test_normalizes_items(self) -> None:
        """Test a list payload is normalized in order."""
        source = AsyncMock(return_value=[{"id": 2, "name": "B"}, {"classId": "1", "className": "A"}])

        result = await fetch_collection(source, normalize_class, name="classes")

        assert [item.id for item in result.items] == ["2", "1"]
        assert result.degraded is False
        assert result.dropped == 0
        assert result.error is None
        source.assert_awaited_once_with()

    @pytest.mark.asyncio
    async def test_drops_unusable_items_without_failing(self) -> None:
        """Test records without identity are dropped and counted."""
        source = AsyncMock(return_value=[{"id": 1}, {}, {"name": "no id"}, None])

        result = await fetch_collection(source, normalize_class)

        assert [item.id for item in result.items] == ["1"]
        assert result.dropped == 3
        assert result.degraded is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{}, None, "classes", 42, {"data": []}])
    async def test_non_list_payload_is_degraded(self, payload) -> None:
        """Test a payload that is not a list gives an empty degraded result."""
        source = AsyncMock(return_value=payload)

        result = await fetch_collection(source, normalize_class)

        assert result.items == []
        assert result.degraded is True
        assert result.error is None

    @pytest.mark.asyncio
    async def test_source_exception_is_degraded(self) -> None:
        """Test a failing source does not raise."""
        source = AsyncMock(side_effect=SourceUnavailableError("connection refused"))

        result = await fetch_collection(source, normalize_class)

        assert result.items == []
        assert result.degraded is True
        assert result.error == ErrorKind.NETWORK
        source.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_timeout_is_degraded(self) -> None:
        """Test a source slower than the deadline is reported as a timeout."""

        async def slow_source():
            await asyncio.sleep(5)
            return []

        result = await fetch_collection(slow_source, normalize_class, timeout=0.01)

        assert result.degraded is True
        assert result.error == ErrorKind.TIMEOUT

    @pytest.mark.asyncio
    async def test_repeatable(self) -> None:
        """Test the same payload gives the same result on every call."""
        source = AsyncMock(return_value=[{"id": 1, "name": "A"}])

        first = await fetch_collection(source, normalize_class)
        second = await fetch_collection(source, normalize_class)

        assert first == second
        assert source.await_count == 2
