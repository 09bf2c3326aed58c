from datetime import timedelta
from uuid import uuid4

from tensu_drill.problem_generator import fallback_problem
from tensu_drill.repository import InMemoryProblemRepository
from tensu_drill.schemas import Difficulty


def test_issue_and_get():
    repo = InMemoryProblemRepository(ttl_hours=1)
    stored = repo.issue(fallback_problem(), Difficulty.advanced)
    assert repo.get(stored.id) is stored
    assert stored.difficulty == Difficulty.advanced
    assert (stored.attempts, stored.solved) == (0, False)
    assert len(repo) == 1


def test_problems_expire_after_ttl(monkeypatch):
    repo = InMemoryProblemRepository(ttl_hours=1)
    stored = repo.issue(fallback_problem(), Difficulty.beginner)
    later = stored.expires_at + timedelta(seconds=1)
    monkeypatch.setattr(repo, "_utcnow", lambda: later)
    assert repo.get(stored.id) is None
    assert repo.record_answer(stored.id, True) is None
    assert len(repo) == 0


def test_record_answer_counts_attempts():
    repo = InMemoryProblemRepository()
    stored = repo.issue(fallback_problem(), Difficulty.beginner)
    repo.record_answer(stored.id, False)
    repo.record_answer(stored.id, True)
    result = repo.record_answer(stored.id, False)
    assert result.attempts == 3
    assert result.solved is True


def test_record_answer_unknown_id():
    assert InMemoryProblemRepository().record_answer(uuid4(), True) is None
