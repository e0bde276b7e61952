"""
feedpush.publishing.escalator - Failure Escalation
====================================================

When a run logged errors, the FailureEscalator files one tracking issue so a
human looks at the failed release.

State Machine:
    IDLE ──→ RESOLVING_AUTHOR ──→ CREATING_ISSUE ──→ DONE
      │                                                ↑
      └────────────── (any exception) ─────────────────┘

Escalation runs at most once per escalator. It never raises: author lookup
falls back to a placeholder, and a failure to file the issue is logged and
recorded. The run result is decided by the error log alone, so escalation
can never turn a failed run into a successful one or vice versa.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Optional

import structlog

from feedpush.core.config import ReleaseContext
from feedpush.core.enums import EscalationState
from feedpush.core.error_log import RunErrorLog
from feedpush.core.models import BuildIdentity
from feedpush.integrations.issues.base import IssueTracker


logger = structlog.get_logger()

AUTHOR_PLACEHOLDER = "Last commit author could not be determined..."
MAX_ERRORS_IN_ISSUE = 20


def compose_issue(
    release: ReleaseContext,
    identity: Optional[BuildIdentity],
    author: str,
    notify_handles: Sequence[str],
    errors: Sequence[str] = (),
) -> tuple[str, str]:
    """Build the (title, body) of the tracking issue."""
    title = f"Release '{release.description}' failed"

    build_id = identity.build_id if identity else "unknown"
    lines = [
        "Something failed while trying to publish artifacts for build "
        f"[{build_id}]({release.triggered_by_build_url}).",
        "",
        f"Please click [here]({release.pipeline_url}) to check the error logs.",
        "",
        f"Last commit by: {author}",
    ]

    if errors:
        lines += ["", "Errors:", ""]
        lines += [f"- {error}" for error in errors[:MAX_ERRORS_IN_ISSUE]]
        if len(errors) > MAX_ERRORS_IN_ISSUE:
            lines.append(f"- ... and {len(errors) - MAX_ERRORS_IN_ISSUE} more")

    lines += ["", f"/fyi: {' '.join(notify_handles)}"]
    return title, "\n".join(lines)


class FailureEscalator:
    """Files a tracking issue for a failed publishing run.

    Args:
        issue_tracker: Where commit authors are resolved and issues are filed.
        release: Release context linked from the issue.
        issue_repository: Repository URL the issue is filed in.
        notify_handles: Handles mentioned at the end of the issue.
        error_log: The run error log; its messages go into the issue body and
            escalation problems are recorded back into it.
    """

    def __init__(
        self,
        issue_tracker: IssueTracker,
        release: ReleaseContext,
        issue_repository: str,
        notify_handles: Sequence[str],
        error_log: RunErrorLog,
    ) -> None:
        self._issue_tracker = issue_tracker
        self._release = release
        self._issue_repository = issue_repository
        self._notify_handles = list(notify_handles)
        self._error_log = error_log
        self._state = EscalationState.IDLE
        self._issue_id: Optional[int] = None
        self._logger = logger.bind(component="failure_escalator")

    @property
    def state(self) -> EscalationState:
        return self._state

    @property
    def issue_id(self) -> Optional[int]:
        return self._issue_id

    async def escalate(self, identity: Optional[BuildIdentity]) -> Optional[int]:
        """File the tracking issue.

        Args:
            identity: Build identity from the manifest, used for the author
                lookup and the build link. None skips the author lookup.

        Returns:
            The created issue id, or None if escalation already ran or
            the issue could not be filed.
        """
        if self._state != EscalationState.IDLE:
            self._logger.debug("escalation_already_done", state=self._state.value)
            return None

        errors = self._error_log.messages
        try:
            self._state = EscalationState.RESOLVING_AUTHOR
            author = await self._resolve_author(identity)

            self._state = EscalationState.CREATING_ISSUE
            title, body = compose_issue(
                self._release,
                identity,
                author,
                self._notify_handles,
                errors,
            )
            self._issue_id = await self._issue_tracker.create_issue(
                self._issue_repository,
                title,
                body,
            )
            self._logger.info(
                "issue_created",
                issue_id=self._issue_id,
                repository=self._issue_repository,
            )
        except Exception as e:
            self._logger.error(
                "escalation_failed",
                repository=self._issue_repository,
                error=str(e),
            )
            self._error_log.record_exception(e, context="Failed to create the tracking issue")
        finally:
            self._state = EscalationState.DONE

        return self._issue_id

    async def _resolve_author(self, identity: Optional[BuildIdentity]) -> str:
        if identity is None:
            return AUTHOR_PLACEHOLDER
        try:
            return await self._issue_tracker.get_commit_author(
                identity.repo_url,
                identity.commit_sha,
            )
        except Exception as e:
            self._logger.warning(
                "commit_author_unresolved",
                repo_url=identity.repo_url,
                commit_sha=identity.commit_sha,
                error=str(e),
            )
            return AUTHOR_PLACEHOLDER
