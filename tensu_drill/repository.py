from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from threading import Lock
from uuid import UUID, uuid4

from tensu_drill.schemas import Difficulty, Problem


@dataclass
class StoredProblem:
    id: UUID
    difficulty: Difficulty
    problem: Problem
    expires_at: datetime
    attempts: int = 0
    solved: bool = False


class InMemoryProblemRepository:
    """Issued problems keyed by id, with answer attempts tracked per problem.

    A problem expires ``ttl_hours`` after it is issued; answering it does not
    extend its lifetime.
    """

    def __init__(self, ttl_hours: int = 24) -> None:
        self._ttl = timedelta(hours=ttl_hours)
        self._problems: dict[UUID, StoredProblem] = {}
        self._lock = Lock()

    def _utcnow(self) -> datetime:
        return datetime.now(timezone.utc)

    def _drop_expired(self) -> None:
        now = self._utcnow()
        for problem_id in [pid for pid, p in self._problems.items() if p.expires_at <= now]:
            del self._problems[problem_id]

    def issue(self, problem: Problem, difficulty: Difficulty) -> StoredProblem:
        with self._lock:
            self._drop_expired()
            stored = StoredProblem(
                id=uuid4(),
                difficulty=difficulty,
                problem=problem,
                expires_at=self._utcnow() + self._ttl,
            )
            self._problems[stored.id] = stored
            return stored

    def get(self, problem_id: UUID) -> StoredProblem | None:
        with self._lock:
            self._drop_expired()
            return self._problems.get(problem_id)

    def record_answer(self, problem_id: UUID, all_correct: bool) -> StoredProblem | None:
        with self._lock:
            self._drop_expired()
            stored = self._problems.get(problem_id)
            if stored is None:
                return None
            stored.attempts += 1
            # once solved, a later wrong answer does not unsolve it
            stored.solved = stored.solved or all_correct
            return stored

    def __len__(self) -> int:
        with self._lock:
            self._drop_expired()
            return len(self._problems)
