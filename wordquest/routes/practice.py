"""Practice engine JSON APIs.

Every endpoint is stateless: the caller posts the records it holds and
gets the engine's decision back. Writing results to storage stays with
the caller.
"""

from __future__ import annotations

import datetime as dt
import logging
import random
from typing import Any

from fastapi import APIRouter, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from wordquest.models import CompanionState, PracticeItem, SessionOutcome
from wordquest.services.companion import read_companion
from wordquest.services.mastery import record_attempt
from wordquest.services.phonetics import phonetic_hint
from wordquest.services.rewards import compute_attempt_reward, compute_reward
from wordquest.services.selection import select_practice_items
from wordquest.services.syllables import format_syllables, syllabify
from wordquest.services.word_alignment import score_sentence
from wordquest.services.word_match import match_word
from wordquest.validation import PracticeValidationError, parse_date

logger = logging.getLogger(__name__)

router = APIRouter()


# ---- Helpers ----


def _error(message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


async def _json_body(request: Request) -> dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        raise PracticeValidationError("Request body must be JSON")
    if not isinstance(body, dict):
        raise PracticeValidationError("Request body must be a JSON object")
    return body


def _require(body: dict[str, Any], key: str) -> Any:
    if key not in body or body[key] is None:
        raise PracticeValidationError(f"Missing required field: {key}")
    return body[key]


def _optional_bool(body: dict[str, Any], key: str, default: bool = False) -> bool:
    value = body.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise PracticeValidationError(f"{key} must be a boolean")
    return value


def _optional_number(body: dict[str, Any], key: str, default: float = 0.0) -> float:
    value = body.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PracticeValidationError(f"{key} must be a number")
    return float(value)


def _parse_datetime(name: str, value: Any) -> dt.datetime | None:
    if value is None:
        return None
    try:
        return dt.datetime.fromisoformat(str(value))
    except ValueError:
        raise PracticeValidationError(f"{name} is not an ISO timestamp: {value!r}")


def _item_from_json(data: Any) -> PracticeItem:
    if not isinstance(data, dict):
        raise PracticeValidationError("Practice items must be JSON objects")
    try:
        return PracticeItem(
            id=str(_require(data, "id")),
            text=str(data.get("text", "")),
            times_practiced=data.get("times_practiced", 0),
            times_correct=data.get("times_correct", 0),
            best_accuracy=data.get("best_accuracy"),
            last_practiced_at=_parse_datetime("last_practiced_at", data.get("last_practiced_at")),
            current_stage=data.get("current_stage", "seedling"),
            version=data.get("version", 0),
        )
    except PracticeValidationError:
        raise
    except (TypeError, ValueError) as exc:
        raise PracticeValidationError(f"Invalid practice item: {exc}")


def _respond(payload: Any) -> JSONResponse:
    return JSONResponse(jsonable_encoder(payload))


# ---- Word & sentence checks ----


@router.post("/match")
async def check_word(request: Request):
    """Check a spoken attempt. Body: {spoken: str, target: str}."""
    try:
        body = await _json_body(request)
        target = _require(body, "target")
        verdict = match_word(str(body.get("spoken") or ""), str(target))
    except PracticeValidationError as exc:
        logger.warning("Rejected match request: %s", exc)
        return _error(str(exc))

    payload = jsonable_encoder(verdict)
    payload["hint"] = None if verdict.is_match else phonetic_hint(str(target))
    payload["syllables"] = None if verdict.is_match else syllabify(str(target))
    return JSONResponse(payload)


@router.post("/sentences/score")
async def check_sentence(request: Request):
    """Score a spoken sentence. Body: {spoken: str, target: str}."""
    try:
        body = await _json_body(request)
        score = score_sentence(str(body.get("spoken") or ""), str(_require(body, "target")))
    except PracticeValidationError as exc:
        logger.warning("Rejected sentence score request: %s", exc)
        return _error(str(exc))

    payload = jsonable_encoder(score)
    payload["words_correct"] = score.words_correct
    return JSONResponse(payload)


# ---- Progress ----


@router.post("/progress/attempt")
async def record_progress(request: Request):
    """Apply one attempt to an item.

    Body: {item: PracticeItem, correct: bool, accuracy?: float, at?: iso}.
    Returns the next version of the item and the stage update.
    """
    try:
        body = await _json_body(request)
        item = _item_from_json(_require(body, "item"))
        correct = _require(body, "correct")
        if not isinstance(correct, bool):
            raise PracticeValidationError("correct must be a boolean")
        updated, stage_update = record_attempt(
            item,
            correct,
            accuracy=body.get("accuracy"),
            at=_parse_datetime("at", body.get("at")),
        )
    except PracticeValidationError as exc:
        logger.warning("Rejected progress update: %s", exc)
        return _error(str(exc))

    return _respond({"item": updated, "stage_update": stage_update})


@router.post("/rescue/check")
async def check_rescue_word(request: Request):
    """Check one Word Rescue attempt on a struggling word.

    Body: {item: PracticeItem, spoken: str, used_coach?: bool,
    cash_enabled?: bool, cash_per_mastered_word?: float, at?: iso}.
    Matches the word, records the attempt and prices it in coins and gems.
    """
    try:
        body = await _json_body(request)
        item = _item_from_json(_require(body, "item"))
        if item.current_stage is None:
            raise PracticeValidationError("Word Rescue only takes word items")
        verdict = match_word(str(body.get("spoken") or ""), item.text)
        updated, stage_update = record_attempt(
            item, verdict.is_match, at=_parse_datetime("at", body.get("at"))
        )
        cash_amount = body.get("cash_per_mastered_word")
        reward = compute_attempt_reward(
            verdict.is_match,
            stage_update,
            used_coach=_optional_bool(body, "used_coach"),
            cash_enabled=_optional_bool(body, "cash_enabled"),
            cash_per_mastered_word=(
                None if cash_amount is None
                else _optional_number(body, "cash_per_mastered_word")
            ),
        )
    except PracticeValidationError as exc:
        logger.warning("Rejected rescue check: %s", exc)
        return _error(str(exc))

    coach = None
    if not verdict.is_match:
        syllables = syllabify(item.text)
        coach = {
            "syllables": syllables,
            "display": format_syllables(syllables),
            "hint": phonetic_hint(item.text),
        }
    return _respond({"item": updated, "verdict": verdict, "reward": reward, "coach": coach})


# ---- Selection ----


@router.post("/practice/select")
async def select_words(request: Request):
    """Build a practice queue. Body: {pool: [PracticeItem], count: int, seed?: int}."""
    try:
        body = await _json_body(request)
        pool_data = _require(body, "pool")
        if not isinstance(pool_data, list):
            raise PracticeValidationError("pool must be a list")
        pool = [_item_from_json(entry) for entry in pool_data]
        count = body.get("count", 10)
        seed = body.get("seed")
        if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
            raise PracticeValidationError("seed must be an integer")
        rng = random.Random(seed) if seed is not None else None
        queue = select_practice_items(pool, count, rng=rng)
    except PracticeValidationError as exc:
        logger.warning("Rejected selection request: %s", exc)
        return _error(str(exc))

    return _respond({"items": queue})


# ---- Sessions & companion ----


@router.post("/sessions/reward")
async def session_reward(request: Request):
    """Compute rewards for a finished session.

    Body: {outcome: {...}, prior_streak_days: int, last_practice_date?: date,
    session_date?: date, happiness?: int}.
    """
    try:
        body = await _json_body(request)
        outcome_data = _require(body, "outcome")
        if not isinstance(outcome_data, dict):
            raise PracticeValidationError("outcome must be a JSON object")
        try:
            outcome = SessionOutcome(
                items_attempted=_require(outcome_data, "items_attempted"),
                items_correct=_require(outcome_data, "items_correct"),
                items_practiced=outcome_data.get(
                    "items_practiced", outcome_data["items_attempted"]
                ),
                elapsed_seconds=_optional_number(outcome_data, "elapsed_seconds"),
                full_set_completed=_optional_bool(outcome_data, "full_set_completed"),
                words_mastered=outcome_data.get("words_mastered", 0),
            )
        except PracticeValidationError:
            raise
        except (TypeError, ValueError) as exc:
            raise PracticeValidationError(f"Invalid outcome: {exc}")
        result = compute_reward(
            outcome,
            prior_streak_days=body.get("prior_streak_days", 0),
            last_practice_date=body.get("last_practice_date"),
            session_date=body.get("session_date"),
            happiness=body.get("happiness"),
        )
    except PracticeValidationError as exc:
        logger.warning("Rejected session reward request: %s", exc)
        return _error(str(exc))

    payload = jsonable_encoder(result)
    payload["bonus_reasons"] = result.bonus_reasons
    return JSONResponse(payload)


@router.post("/companion/read")
async def companion_view(request: Request):
    """Current companion mood. Body: {happiness, streak_days, last_practice_date?, today?}."""
    try:
        body = await _json_body(request)
        state = CompanionState(
            happiness=body.get("happiness", 100),
            streak_days=body.get("streak_days", 0),
            last_practice_date=parse_date("last_practice_date", body.get("last_practice_date")),
        )
        view = read_companion(state, today=body.get("today"))
    except PracticeValidationError as exc:
        logger.warning("Rejected companion read: %s", exc)
        return _error(str(exc))

    return _respond(view)
