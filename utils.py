import math
import re
import unicodedata
from datetime import datetime, timezone

from flask import request
from pydantic import BaseModel, ValidationError

from errors import ValidationFailed

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

MAX_PAGE_SIZE = 100


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in every DateTime column."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value):
    return value.isoformat() if value is not None else None


def slugify(title: str) -> str:
    """Turn an article title into a URL-safe slug ("Gérer son stress" -> "gerer-son-stress")."""
    normalized = unicodedata.normalize("NFKD", title or "")
    ascii_title = normalized.encode("ascii", "ignore").decode("ascii").lower()
    return _NON_ALNUM.sub("-", ascii_title).strip("-")


def _format_errors(exc: ValidationError) -> list[dict]:
    items = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"]) or "body"
        ctx_error = (err.get("ctx") or {}).get("error")
        message = str(ctx_error) if err["type"] == "value_error" and ctx_error else err["msg"]
        items.append({"field": field, "message": message})
    return items


def parse_body(schema: type[BaseModel]):
    """Validate the JSON body of the current request against ``schema``."""
    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    try:
        return schema.model_validate(payload)
    except ValidationError as exc:
        raise ValidationFailed(errors=_format_errors(exc)) from exc


def parse_query(schema: type[BaseModel]):
    """Same as parse_body for query-string parameters."""
    try:
        return schema.model_validate(request.args.to_dict())
    except ValidationError as exc:
        raise ValidationFailed(errors=_format_errors(exc)) from exc


def parse_pagination(default_limit: int) -> tuple[int, int]:
    raw_limit = request.args.get("limit", default_limit)
    raw_offset = request.args.get("offset", 0)
    errors = []
    try:
        limit = int(raw_limit)
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise ValueError
    except (TypeError, ValueError):
        errors.append({"field": "limit", "message": f"limit doit être un entier entre 1 et {MAX_PAGE_SIZE}"})
    try:
        offset = int(raw_offset)
        if offset < 0:
            raise ValueError
    except (TypeError, ValueError):
        errors.append({"field": "offset", "message": "offset doit être un entier positif"})
    if errors:
        raise ValidationFailed(errors=errors)
    return limit, offset


def pagination_meta(total: int, limit: int, offset: int) -> dict:
    return {
        "total": total,
        "pages": math.ceil(total / limit),
        "currentPage": offset // limit + 1,
        "limit": limit,
    }
