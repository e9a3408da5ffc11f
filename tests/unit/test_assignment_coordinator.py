# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the bulk assignment coordinator."""

import asyncio
import time
from unittest.mock import AsyncMock

import pytest

from enrollsync.core.errors import ClassNotFoundError, UnsupportedOperationError
from enrollsync.domains.enrollment.coordinator import AssignmentCoordinator
from enrollsync.models.enrollment import AssignmentStatus, ErrorKind


@pytest.fixture
def coordinator() -> AssignmentCoordinator:
    """Create a coordinator with a short per-call deadline."""
    return AssignmentCoordinator(call_timeout=1.0)


def _failing_for(failures: dict[str, Exception]):
    async def call(student_id: str, class_id: str) -> None:
        if class_id in failures:
            raise failures[class_id]

    return AsyncMock(side_effect=call)


class TestBulkEnroll:
    """Tests for bulk enrollment."""

    @pytest.mark.asyncio
    async def test_partial_failure(self, coordinator) -> None:
        """Test one rejected call fails alone and the others succeed."""
        enroll_one = _failing_for({"2": ClassNotFoundError("Class 2 not found")})

        outcomes = await coordinator.bulk_enroll("s1", ["1", "2"], enroll_one)

        assert [(o.class_id, o.status, o.error) for o in outcomes] == [
            ("1", AssignmentStatus.SUCCESS, None),
            ("2", AssignmentStatus.FAILURE, ErrorKind.NOT_FOUND),
        ]
        assert outcomes[1].message == "Class 2 not found"

    @pytest.mark.asyncio
    async def test_empty_request_makes_no_calls(self, coordinator) -> None:
        """Test an empty id list returns no outcomes and calls nothing."""
        enroll_one = AsyncMock()

        outcomes = await coordinator.bulk_enroll("s1", [], enroll_one)

        assert outcomes == []
        enroll_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_duplicates_dispatched_once(self, coordinator) -> None:
        """Test repeated ids produce one call and one outcome each."""
        enroll_one = AsyncMock()

        outcomes = await coordinator.bulk_enroll("s1", ["1", 1, " 1 ", "2", "2"], enroll_one)

        assert [o.class_id for o in outcomes] == ["1", "2"]
        assert enroll_one.await_count == 2
        enroll_one.assert_any_await("s1", "1")
        enroll_one.assert_any_await("s1", "2")

    @pytest.mark.asyncio
    async def test_one_outcome_per_id_whatever_fails(self, coordinator) -> None:
        """Test every distinct id gets an outcome even when most calls fail."""
        failures = {
            "1": UnsupportedOperationError("nope"),
            "3": ConnectionError("reset"),
            "4": RuntimeError("boom"),
        }
        enroll_one = _failing_for(failures)
        requested = ["1", "2", "3", "4", "5"]

        outcomes = await coordinator.bulk_enroll("s1", requested, enroll_one)

        assert [o.class_id for o in outcomes] == requested
        assert {o.class_id: o.error for o in outcomes if not o.succeeded} == {
            "1": ErrorKind.UNSUPPORTED,
            "3": ErrorKind.NETWORK,
            "4": ErrorKind.UNKNOWN,
        }
        assert [o.class_id for o in outcomes if o.succeeded] == ["2", "5"]

    @pytest.mark.asyncio
    async def test_calls_run_concurrently(self) -> None:
        """Test N slow calls take about as long as one."""
        coordinator = AssignmentCoordinator()

        async def slow(student_id: str, class_id: str) -> None:
            await asyncio.sleep(0.2)

        started = time.perf_counter()
        outcomes = await coordinator.bulk_enroll("s1", [str(i) for i in range(10)], slow)
        elapsed = time.perf_counter() - started

        assert all(o.succeeded for o in outcomes)
        assert elapsed < 1.0

    @pytest.mark.asyncio
    async def test_max_concurrency_bounds_in_flight_calls(self) -> None:
        """Test the semaphore caps concurrent calls."""
        coordinator = AssignmentCoordinator(max_concurrency=2)
        in_flight = 0
        peak = 0

        async def tracked(student_id: str, class_id: str) -> None:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1

        outcomes = await coordinator.bulk_enroll("s1", ["1", "2", "3", "4", "5"], tracked)

        assert len(outcomes) == 5
        assert peak == 2

    @pytest.mark.asyncio
    async def test_hung_call_times_out(self) -> None:
        """Test a call that never answers resolves to a timeout failure."""
        coordinator = AssignmentCoordinator(call_timeout=0.05)
        never = asyncio.Event()

        async def hang_on_two(student_id: str, class_id: str) -> None:
            if class_id == "2":
                await never.wait()

        outcomes = await coordinator.bulk_enroll("s1", ["1", "2"], hang_on_two)

        assert outcomes[0].succeeded
        assert outcomes[1].error == ErrorKind.TIMEOUT

    @pytest.mark.asyncio
    async def test_blank_class_id_is_invalid(self, coordinator) -> None:
        """Test an unusable id becomes an invalid outcome without a call."""
        enroll_one = AsyncMock()

        outcomes = await coordinator.bulk_enroll("s1", ["1", "  "], enroll_one)

        assert outcomes[0].succeeded
        assert outcomes[1].error == ErrorKind.INVALID
        enroll_one.assert_awaited_once_with("s1", "1")

    @pytest.mark.asyncio
    async def test_single_string_is_one_id(self, coordinator) -> None:
        """Test a bare string id is not split into characters."""
        enroll_one = AsyncMock()

        outcomes = await coordinator.bulk_enroll("s1", "12", enroll_one)

        assert [(o.class_id, o.status) for o in outcomes] == [("12", AssignmentStatus.SUCCESS)]
        enroll_one.assert_awaited_once_with("s1", "12")

    @pytest.mark.asyncio
    async def test_bytes_id_is_one_invalid_outcome(self, coordinator) -> None:
        """Test a bytes value is a single unusable id."""
        unenroll_one = AsyncMock()

        outcomes = await coordinator.bulk_unenroll("s1", b"12", unenroll_one)

        assert len(outcomes) == 1
        assert outcomes[0].error == ErrorKind.INVALID
        unenroll_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_student_is_invalid(self, coordinator) -> None:
        """Test a blank student id fails every item without calls."""
        enroll_one = AsyncMock()

        outcomes = await coordinator.bulk_enroll("", ["1", "2"], enroll_one)

        assert [o.error for o in outcomes] == [ErrorKind.INVALID, ErrorKind.INVALID]
        enroll_one.assert_not_awaited()

    def test_rejects_zero_concurrency(self) -> None:
        """Test a non-positive concurrency bound is refused."""
        with pytest.raises(ValueError):
            AssignmentCoordinator(max_concurrency=0)


class TestBulkUnenroll:
    """Tests for bulk unenrollment."""

    @pytest.mark.asyncio
    async def test_unenroll_uses_given_call(self, coordinator) -> None:
        """Test unenroll dispatches to the unenroll call."""
        unenroll_one = _failing_for({"3": UnsupportedOperationError("not supported")})

        outcomes = await coordinator.bulk_unenroll("s1", ["1", "3"], unenroll_one)

        assert outcomes[0].succeeded
        assert outcomes[1].error == ErrorKind.UNSUPPORTED
        assert unenroll_one.await_count == 2
