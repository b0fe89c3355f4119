"""Translation of domain and request errors into structured HTTP errors."""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def http_error(
    status_code: int,
    code: str,
    message: str,
    fields: Mapping[str, list[str]] | None = None,
) -> HTTPException:
    return HTTPException(status_code=status_code, detail=_detail(code, message, fields))


def not_found(message: str) -> HTTPException:
    return http_error(status.HTTP_404_NOT_FOUND, "not_found", message)


def _detail(code: str, message: str, fields: Mapping[str, list[str]] | None) -> dict[str, object]:
    detail: dict[str, object] = {"code": code, "message": message}
    if fields:
        detail["fields"] = {key: list(value) for key, value in fields.items()}
    return detail


def _field_path(location: Iterable[Any]) -> str:
    """``("body", "items", 0, "salePrice")`` -> ``items[0].sale_price``."""
    path = ""
    for part in location:
        if isinstance(part, int):
            path += f"[{part}]"
            continue
        name = _CAMEL_BOUNDARY.sub("_", str(part)).lower()
        path = f"{path}.{name}" if path else name
    return path or "body"


def validation_fields(errors: Iterable[Mapping[str, Any]]) -> dict[str, list[str]]:
    fields: dict[str, list[str]] = {}
    for error in errors:
        location = list(error.get("loc", ()))
        if location and location[0] in {"body", "query", "path"}:
            location = location[1:]
        fields.setdefault(_field_path(location), []).append(str(error.get("msg", "Valeur invalide.")))
    return fields


async def request_validation_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": _detail(
                "validation_error",
                "Données de la requête invalides.",
                validation_fields(exc.errors()),
            )
        },
    )


__all__ = ["http_error", "not_found", "validation_fields", "request_validation_handler"]
