"""
Notebook cell model.

Cells are immutable; every transition returns a new instance so the notebook
can swap whole snapshots of its sequence.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, model_validator


class CellStatus(str, Enum):
    EDITABLE = "editable"
    PENDING = "pending"
    RESOLVED = "resolved"


class Cell(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    input: str = ""
    output: Optional[str] = None
    status: CellStatus = CellStatus.EDITABLE

    @model_validator(mode="after")
    def _resolved_has_output(self) -> "Cell":
        if self.status == CellStatus.RESOLVED and self.output is None:
            raise ValueError("resolved cell needs an output")
        return self

    @property
    def editable(self) -> bool:
        return self.status == CellStatus.EDITABLE

    @property
    def resolved(self) -> bool:
        return self.status == CellStatus.RESOLVED

    @property
    def output_text(self) -> str:
        return self.output or ""

    def with_input(self, text: str) -> "Cell":
        return self.model_copy(update={"input": text})

    def mark_pending(self) -> "Cell":
        return self.model_copy(update={"status": CellStatus.PENDING})

    def resolve(self, output: str) -> "Cell":
        return self.model_copy(update={"output": output, "status": CellStatus.RESOLVED})

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "input": self.input,
            "output": self.output_text,
            "status": self.status.value,
        }
