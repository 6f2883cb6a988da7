"""Word lookup API used by the browser extension."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from enorett.config import settings
from enorett.database import async_session
from enorett.services.entitlement import EntitlementCheck, SessionEntitlementChecker
from enorett.services.lookup import LookupOrchestrator, LookupResult, build_orchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/enorett", tags=["lookup"])


def get_orchestrator(request: Request) -> LookupOrchestrator:
    """Return the orchestrator built at startup, building it on first use otherwise."""
    orchestrator: LookupOrchestrator | None = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        orchestrator = build_orchestrator(settings)
        request.app.state.orchestrator = orchestrator
    return orchestrator


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_session


def get_entitlement_check(
    sessions: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> EntitlementCheck:
    """Purchase-backed check; a session is opened only when a check runs."""
    return SessionEntitlementChecker(sessions)


def serialize_result(result: LookupResult) -> dict[str, Any]:
    """Map a lookup result onto the JSON shape the extension expects."""
    return {
        "success": result.success,
        "word": result.word,
        "article": result.article.value if result.article else None,
        "genus": result.genus.value if result.genus else None,
        "translation": result.translation,
        "ipa": result.ipa,
        "examples": result.examples,
        "source": {
            "dictionary": result.source_flags.dictionary,
            "sparv": result.source_flags.morphology,
            "lex": result.source_flags.lexicon,
            "korp": result.source_flags.corpus,
        },
        "confidence": result.confidence.value,
        "isPremiumData": result.is_premium_data,
        "requiresPro": result.requires_premium,
        "error": result.error,
        "errorSv": result.error_localized,
    }


@router.get("")
async def lookup_word(
    word: str | None = Query(default=None),
    user_id: str | None = Query(default=None, alias="userId"),
    pro: bool = Query(default=False),
    orchestrator: LookupOrchestrator = Depends(get_orchestrator),
    entitlement: EntitlementCheck = Depends(get_entitlement_check),
) -> JSONResponse:
    """Look up whether a Swedish noun takes "en" or "ett"."""
    if not word or not word.strip():
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": "Missing word parameter",
                "errorSv": "Saknar ord-parameter",
            },
        )

    is_entitled = False
    if user_id and pro:
        is_entitled = await entitlement.is_entitled(user_id)

    # Sparv, Korp and the lexicon are premium enrichment
    result = await orchestrator.resolve(word, is_entitled, allow_remote=is_entitled)
    logger.debug(
        f"Lookup '{result.word}': confidence={result.confidence.value} "
        f"premium={result.is_premium_data} requires_premium={result.requires_premium}"
    )
    return JSONResponse(content=serialize_result(result))
