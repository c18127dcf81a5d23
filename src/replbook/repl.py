"""
Evaluator REST API: session creation and evaluation.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from replbook.errors import SessionError
from replbook.models.session import EvalRequest, EvalResponse, NewRepl
from replbook.transport.http import HttpClient


class ReplAPI:
    def __init__(self, http: HttpClient):
        self._http = http

    async def create(self) -> int:
        """Create a repl on the server and return its id.

        Raises SessionError when the response carries no integer ``id``.
        """
        data: Any = await self._http.post("/repl")
        try:
            return NewRepl.model_validate(data).id
        except ValidationError as e:
            raise SessionError("Malformed session-creation response", details={"body": data}) from e

    async def eval(self, repl_id: int, text: str) -> str:
        """Evaluate ``text`` in repl ``repl_id``. A missing ``result`` reads as ""."""
        data = await self._http.post(f"/eval/{repl_id}", EvalRequest(text=text).model_dump())
        return EvalResponse.model_validate(data).text
