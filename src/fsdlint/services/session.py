"""Run-once session gate for whole-tree structural rules.

Structural rules inspect the entire source tree, so within one lint
session each of them must run at most once no matter how many files
trigger it. A :class:`LintSession` holds the set of rule ids that have
already run; hosts either pass one explicitly or share the process-wide
session keyed by ``"{pid}_{cwd}"``.
"""

from __future__ import annotations

import os
import threading

import structlog

log = structlog.get_logger(__name__)


def default_session_id() -> str:
    """Session identifier derived from the process and working directory."""
    return f"{os.getpid()}_{os.getcwd()}"


class LintSession:
    """Set of rule ids already executed in one analysis session.

    ``claim`` is an atomic check-and-set, so hosts that lint files on
    several threads still run each structural rule exactly once.
    """

    def __init__(self, session_id: str | None = None) -> None:
        self.session_id = session_id or default_session_id()
        self._executed: set[str] = set()
        self._lock = threading.Lock()

    def claim(self, rule_id: str) -> bool:
        """Return True the first time *rule_id* is claimed, False afterwards."""
        with self._lock:
            if rule_id in self._executed:
                return False
            self._executed.add(rule_id)
        log.debug("session_rule_claimed", session=self.session_id, rule=rule_id)
        return True

    def has_run(self, rule_id: str) -> bool:
        with self._lock:
            return rule_id in self._executed

    @property
    def executed(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._executed)

    def reset(self) -> None:
        with self._lock:
            self._executed.clear()


_sessions: dict[str, LintSession] = {}
_sessions_lock = threading.Lock()


def get_session(session_id: str | None = None) -> LintSession:
    """Return the process-wide session for *session_id*, creating it lazily."""
    key = session_id or default_session_id()
    with _sessions_lock:
        session = _sessions.get(key)
        if session is None:
            session = LintSession(key)
            _sessions[key] = session
        return session


def run_once(rule_id: str, session_id: str | None = None) -> bool:
    """Claim *rule_id* in the process-wide session."""
    return get_session(session_id).claim(rule_id)


def reset_sessions() -> None:
    """Forget every process-wide session (between independent runs, in tests)."""
    with _sessions_lock:
        _sessions.clear()
