# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Bulk assignment coordinator.

Runs one enroll (or unenroll) call per class concurrently and turns each
call into exactly one AssignmentOutcome. A failing call never affects its
siblings and nothing is raised past this boundary. Applying the outcomes
to a partition is left to the caller.

Example:
    >>> coordinator = AssignmentCoordinator(call_timeout=10.0)
    >>> outcomes = await coordinator.bulk_enroll("42", ["1", "2"], backend.enroll)
    >>> [o.status for o in outcomes]
    [<AssignmentStatus.SUCCESS: 'success'>, <AssignmentStatus.FAILURE: 'failure'>]
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from enrollsync.core.errors import classify_error, describe_error
from enrollsync.domains.catalog.adapter import normalize_id
from enrollsync.models.enrollment import AssignmentAction, AssignmentOutcome, ErrorKind

logger = logging.getLogger(__name__)

AssignOne = Callable[[str, str], Awaitable[Any]]


class AssignmentCoordinator:
    """Concurrent dispatcher for bulk enroll/unenroll operations.

    Attributes:
        call_timeout: Deadline in seconds for each call, None for no deadline.
        max_concurrency: Bound on in-flight calls, None for unbounded.
    """

    def __init__(
        self,
        call_timeout: float | None = None,
        max_concurrency: int | None = None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            call_timeout: Per-call deadline in seconds.
            max_concurrency: Maximum number of calls in flight at once.
        """
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.call_timeout = call_timeout
        self.max_concurrency = max_concurrency

    async def bulk_enroll(
        self,
        student_id: str,
        class_ids: Iterable[Any],
        enroll_one: AssignOne,
    ) -> list[AssignmentOutcome]:
        """Enroll a student in several classes.

        Args:
            student_id: Student to enroll.
            class_ids: Requested class ids; duplicates are collapsed. A single
                string counts as one id.
            enroll_one: Backend call ``(student_id, class_id)``.

        Returns:
            One outcome per distinct requested id, in request order.
        """
        return await self._dispatch(AssignmentAction.ENROLL, student_id, class_ids, enroll_one)

    async def bulk_unenroll(
        self,
        student_id: str,
        class_ids: Iterable[Any],
        unenroll_one: AssignOne,
    ) -> list[AssignmentOutcome]:
        """Unenroll a student from several classes.

        Args:
            student_id: Student to unenroll.
            class_ids: Requested class ids; duplicates are collapsed. A single
                string counts as one id.
            unenroll_one: Backend call ``(student_id, class_id)``.

        Returns:
            One outcome per distinct requested id, in request order.
        """
        return await self._dispatch(AssignmentAction.UNENROLL, student_id, class_ids, unenroll_one)

    async def _dispatch(
        self,
        action: AssignmentAction,
        student_id: str,
        class_ids: Iterable[Any],
        call: AssignOne,
    ) -> list[AssignmentOutcome]:
        # A lone string is one id, not an iterable of characters.
        if isinstance(class_ids, (str, bytes)):
            class_ids = [class_ids]
        requested = list(class_ids)
        if not requested:
            logger.warning("Bulk %s called with no class ids; nothing to do", action.value)
            return []

        # Distinct ids in first-seen order; unusable ids keep their raw text.
        plan: list[tuple[str, str | None]] = []
        seen: set[str] = set()
        for raw in requested:
            class_id = normalize_id(raw)
            key = class_id if class_id is not None else f"invalid:{raw!r}"
            if key in seen:
                continue
            seen.add(key)
            plan.append((class_id if class_id is not None else str(raw or ""), class_id))

        student = normalize_id(student_id)
        if student is None:
            logger.warning("Bulk %s rejected: missing student id", action.value)
            return [
                AssignmentOutcome.failure(label, ErrorKind.INVALID, "Missing student id")
                for label, _ in plan
            ]

        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None

        async def run_one(label: str, class_id: str | None) -> AssignmentOutcome:
            if class_id is None:
                return AssignmentOutcome.failure(label, ErrorKind.INVALID, "Missing class id")
            if semaphore is None:
                return await self._call(action, call, student, class_id)
            async with semaphore:
                return await self._call(action, call, student, class_id)

        outcomes = await asyncio.gather(*(run_one(label, class_id) for label, class_id in plan))

        failed = sum(1 for outcome in outcomes if not outcome.succeeded)
        logger.info(
            "Bulk %s: student=%s, requested=%d, succeeded=%d, failed=%d",
            action.value,
            student,
            len(outcomes),
            len(outcomes) - failed,
            failed,
        )
        return list(outcomes)

    async def _call(
        self,
        action: AssignmentAction,
        call: AssignOne,
        student_id: str,
        class_id: str,
    ) -> AssignmentOutcome:
        try:
            if self.call_timeout is not None:
                await asyncio.wait_for(call(student_id, class_id), timeout=self.call_timeout)
            else:
                await call(student_id, class_id)
        except Exception as e:
            kind = classify_error(e)
            logger.warning(
                "Failed to %s student %s for class %s (%s): %s",
                action.value,
                student_id,
                class_id,
                kind.value,
                describe_error(e),
            )
            return AssignmentOutcome.failure(class_id, kind, describe_error(e))
        return AssignmentOutcome.success(class_id)
