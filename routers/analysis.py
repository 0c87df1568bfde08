from __future__ import annotations

import os

from fastapi import APIRouter

from analyzer import analyze, summarize
from schemas.weakness import (
    AnalyzeRequest,
    AnalyzeResponse,
    LogSummary,
    PatternRequest,
    SuggestionResponse,
)
from suggestions import pattern_label, suggestion_message

# Only the most recent answers feed the analysis
ANALYSIS_LOG_LIMIT = int(os.getenv("ANALYSIS_LOG_LIMIT", "100"))
# The class summary looks further back, across all learners
SUMMARY_LOG_LIMIT = int(os.getenv("SUMMARY_LOG_LIMIT", "1000"))

router = APIRouter(prefix="/analysis", tags=["analysis"])


@router.post("/weakness", response_model=AnalyzeResponse)
def weakness(req: AnalyzeRequest):
    logs = req.logs[-ANALYSIS_LOG_LIMIT:] if ANALYSIS_LOG_LIMIT > 0 else req.logs
    result = analyze(logs)

    top = result.suggested_practice
    return {
        "patterns": result.patterns,
        "suggested_practice": top,
        "message": suggestion_message(top) if top is not None else None,
        "label": pattern_label(top) if top is not None else None,
    }


@router.post("/suggestion", response_model=SuggestionResponse)
def suggestion(req: PatternRequest):
    return {"message": suggestion_message(req.pattern), "label": pattern_label(req.pattern)}


@router.post("/summary", response_model=LogSummary)
def summary(req: AnalyzeRequest):
    logs = req.logs[-SUMMARY_LOG_LIMIT:] if SUMMARY_LOG_LIMIT > 0 else req.logs
    return summarize(logs)
