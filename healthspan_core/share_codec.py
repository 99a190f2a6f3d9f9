"""Compact, privacy-stripped share tokens for scored results.

A token is two stages: canonical JSON of the five shareable fields, then
unpadded base64url so it can sit in a query string as-is. Identity and
individual answers are never written, so decoding always yields the anonymous
placeholder profile and an empty answer map.

Wire form (key order fixed)::

    {"s":[{"system":..,"score":..,"maxScore":..,"percentage":..},...],
     "t":total_score,"tm":total_max,"op":overall_percentage,"d":timestamp}

There is no schema version in the token. Adding a field, and in particular any
identity-bearing field, is a breaking change for existing links.
"""
from __future__ import annotations

import base64
import binascii
import json
import logging
import re
from fractions import Fraction
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import urlencode, urlsplit, urlunsplit, parse_qsl

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError, model_validator

from .config import SHARE_PARAM
from .errors import MalformedToken
from .scoring import round_half_up
from .types import ANONYMOUS_USER, ScoredResult, SystemScore, SystemTag

log = logging.getLogger(__name__)

_TOKEN_RX = re.compile(r"[A-Za-z0-9_-]+={0,2}")


class WireScore(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    system: SystemTag
    score: StrictInt = Field(ge=0)
    max_score: StrictInt = Field(alias="maxScore", gt=0)
    percentage: StrictInt = Field(ge=0, le=100)

    @model_validator(mode="after")
    def _score_within_ceiling(self) -> "WireScore":
        if self.score > self.max_score:
            raise ValueError(f"score {self.score} exceeds maxScore {self.max_score}")
        if self.percentage != round_half_up(Fraction(self.score, self.max_score) * 100):
            raise ValueError(f"percentage {self.percentage} does not match {self.score}/{self.max_score}")
        return self


class SharePayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    s: List[WireScore]
    t: StrictInt = Field(ge=0)
    tm: StrictInt = Field(gt=0)
    op: StrictInt = Field(ge=0, le=100)
    d: StrictStr

    @model_validator(mode="after")
    def _totals_agree(self) -> "SharePayload":
        systems = [w.system for w in self.s]
        if len(set(systems)) != len(systems):
            raise ValueError("duplicate system entries")
        if self.t != sum(w.score for w in self.s):
            raise ValueError(f"total {self.t} is not the sum of system scores")
        if self.tm != sum(w.max_score for w in self.s):
            raise ValueError(f"total max {self.tm} is not the sum of system maxima")
        if self.op != round_half_up(Fraction(self.t, self.tm) * 100):
            raise ValueError(f"overall percentage {self.op} does not match {self.t}/{self.tm}")
        return self


def project(result: ScoredResult) -> Dict[str, Any]:
    """The only fields that may leave the device, in wire order."""

    return {
        "s": [
            {
                "system": s.system,
                "score": int(s.score),
                "maxScore": int(s.max_score),
                "percentage": int(s.percentage),
            }
            for s in result.system_scores
        ],
        "t": int(result.total_score),
        "tm": int(result.total_max),
        "op": int(result.overall_percentage),
        "d": result.timestamp,
    }


def encode(result: ScoredResult) -> str:
    text = json.dumps(project(result), ensure_ascii=False, separators=(",", ":"))
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


def _unwrap(token: str) -> bytes:
    if not isinstance(token, str) or not _TOKEN_RX.fullmatch(token):
        raise MalformedToken("share token contains characters outside the base64url alphabet")
    body = token.rstrip("=")
    try:
        return base64.urlsafe_b64decode(body + "=" * (-len(body) % 4))
    except (binascii.Error, ValueError) as exc:
        raise MalformedToken(f"share token is not valid base64url: {exc}") from exc


def decode(token: str) -> ScoredResult:
    """
    Rebuild an anonymized result from a token.

    Raises MalformedToken on a bad alphabet, bad base64, non-JSON content, or a
    payload with missing, mistyped or unexpected fields, or totals and
    percentages that disagree with the per-system scores.
    """
    raw = _unwrap(token)
    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        raise MalformedToken(f"share token payload is not JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise MalformedToken("share token payload is not an object")
    try:
        payload = SharePayload.model_validate(data)
    except ValidationError as exc:
        raise MalformedToken(f"share token payload rejected: {exc.error_count()} error(s)") from exc
    return ScoredResult(
        identity=ANONYMOUS_USER,
        raw_answers={},
        system_scores=tuple(
            SystemScore(system=w.system, score=w.score, max_score=w.max_score, percentage=w.percentage)
            for w in payload.s
        ),
        total_score=payload.t,
        total_max=payload.tm,
        overall_percentage=payload.op,
        timestamp=payload.d,
    )


def share_url(token: str, base_url: str) -> str:
    parts = urlsplit(base_url)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != SHARE_PARAM]
    query.append((SHARE_PARAM, token))
    return urlunsplit((parts.scheme, parts.netloc, parts.path or "/", urlencode(query), ""))


def from_query(params: Mapping[str, str]) -> Optional[ScoredResult]:
    """Resolve the landing view: an anonymized result if ``share`` decodes, else None."""

    token = params.get(SHARE_PARAM)
    if not token:
        return None
    try:
        return decode(token)
    except MalformedToken as exc:
        log.warning("ignoring share link: %s", exc)
        return None


__all__ = ["encode", "decode", "project", "share_url", "from_query", "SharePayload"]
