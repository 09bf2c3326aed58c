from __future__ import annotations

import logging
import random
from uuid import UUID

from fastapi import FastAPI, HTTPException

from tensu_drill.config import settings
from tensu_drill.fu_calculation import compute_fu, describe_fu, is_standard_wait_pinfu
from tensu_drill.problem_generator import generate_problem, generate_problem_with_target_yaku
from tensu_drill.repository import InMemoryProblemRepository
from tensu_drill.schemas import (
    AnswerRequest,
    AnswerResponse,
    Problem,
    ProblemRequest,
    ProblemResponse,
    ScoreRequest,
    ScoreResponse,
    SolutionResponse,
    StepCheck,
    WinType,
    YakuListResponse,
)
from tensu_drill.score_calculation import compute_score, expected_score_answer, score_label, tsumo_total
from tensu_drill.tiles import sort_tiles, tiles_to_notation, wait_name, wind_name
from tensu_drill.validators import validate_hand, validate_has_yaku
from tensu_drill.yaku_calculation import compute_yaku
from tensu_drill.yaku_definitions import YAKU_DEFINITIONS, yaku_by_han

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Riichi Scoring Drill", version="0.1.0")
repo = InMemoryProblemRepository(ttl_hours=settings.problem_ttl_hours)
rng = random.Random(settings.random_seed)


def _solution(problem_id: UUID, problem: Problem) -> SolutionResponse:
    hand = problem.hand
    fu = compute_fu(hand)
    score = compute_score(hand)
    return SolutionResponse(
        problem_id=problem_id,
        yaku_result=problem.yaku_result,
        fu=fu,
        fu_explanation=describe_fu(fu, is_standard_wait_pinfu(hand), hand.win_type),
        score=score,
        score_label=score_label(score, hand.player_type, hand.win_type),
        score_answer=expected_score_answer(score, hand.player_type, hand.win_type),
        tsumo_total=tsumo_total(score, hand.player_type) if hand.win_type == WinType.tsumo else None,
    )


def _get_problem(problem_id: UUID) -> Problem:
    stored = repo.get(problem_id)
    if not stored:
        raise HTTPException(status_code=404, detail="problem not found or expired")
    return stored.problem


@app.get("/")
def root() -> dict[str, str]:
    return {
        "message": "Riichi Scoring Drill API",
        "docs": "/docs",
        "health": "/health",
        "yaku": "/api/v1/yaku",
    }


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/v1/yaku", response_model=YakuListResponse)
def list_yaku() -> YakuListResponse:
    by_han = {han: [d.id for d in group] for han, group in sorted(yaku_by_han().items())}
    return YakuListResponse(yaku=YAKU_DEFINITIONS, by_han=by_han)


@app.post("/api/v1/problems", response_model=ProblemResponse)
def create_problem(req: ProblemRequest) -> ProblemResponse:
    difficulty = req.difficulty or settings.default_difficulty
    if req.target_yaku is not None:
        problem = generate_problem_with_target_yaku(difficulty, req.target_yaku, rng)
    else:
        problem = generate_problem(difficulty, rng)
    stored = repo.issue(problem, difficulty)
    logger.info(
        "problem %s generated: difficulty=%s han=%d yaku=%s",
        stored.id,
        difficulty.value,
        problem.han,
        sorted(y.value for y in problem.yaku_result.yaku_ids),
    )
    hand = problem.hand
    return ProblemResponse(
        problem_id=stored.id,
        status="ok",
        hand=hand,
        notation=tiles_to_notation(sort_tiles(hand.all_tiles())),
        wait_name=wait_name(hand.wait_type),
        seat_wind_name=wind_name(hand.seat_wind),
        round_wind_name=wind_name(hand.round_wind),
        expires_at=stored.expires_at,
    )


@app.get("/api/v1/problems/{problem_id}/solution", response_model=SolutionResponse)
def get_solution(problem_id: UUID) -> SolutionResponse:
    return _solution(problem_id, _get_problem(problem_id))


@app.post("/api/v1/problems/{problem_id}/answer", response_model=AnswerResponse)
def check_answer(problem_id: UUID, req: AnswerRequest) -> AnswerResponse:
    expected = _solution(problem_id, _get_problem(problem_id))

    yaku_ok = (
        set(req.yaku_ids) == expected.yaku_result.yaku_ids
        and req.dora_count == expected.yaku_result.dora_count
    )
    yaku = StepCheck(submitted=True, correct=yaku_ok)
    fu = StepCheck(submitted=req.fu is not None, correct=req.fu == expected.fu.total)
    score = StepCheck(submitted=req.score is not None, correct=req.score == expected.score_answer)
    all_correct = yaku.correct and fu.correct and score.correct
    stored = repo.record_answer(problem_id, all_correct)
    if stored is None:
        raise HTTPException(status_code=404, detail="problem not found or expired")

    logger.info(
        "problem %s answered (attempt %d): yaku=%s fu=%s score=%s",
        problem_id,
        stored.attempts,
        yaku.correct,
        fu.correct,
        score.correct,
    )
    return AnswerResponse(
        problem_id=problem_id,
        yaku=yaku,
        fu=fu,
        score=score,
        all_correct=all_correct,
        attempts=stored.attempts,
        solved=stored.solved,
        expected=expected,
    )


@app.post("/api/v1/score", response_model=ScoreResponse)
def score(req: ScoreRequest) -> ScoreResponse:
    validate_hand(req.hand)
    yaku_result = compute_yaku(req.hand)
    validate_has_yaku(yaku_result)
    result = compute_score(req.hand)
    return ScoreResponse(
        status="ok",
        yaku_result=yaku_result,
        fu=compute_fu(req.hand),
        score=result,
        score_label=score_label(result, req.hand.player_type, req.hand.win_type),
    )
