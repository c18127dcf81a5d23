"""
Wire models for the evaluator service.

POST /repl            -> NewRepl
POST /eval/{repl_id}  EvalRequest -> EvalResponse
"""

from typing import Optional

from pydantic import BaseModel, StrictInt


class NewRepl(BaseModel):
    id: StrictInt  # booleans and floats are rejected


class EvalRequest(BaseModel):
    text: str


class EvalResponse(BaseModel):
    result: Optional[str] = None

    @property
    def text(self) -> str:
        return self.result or ""
