# weighbench/core/models.py
from __future__ import annotations
from typing import Any, Dict, List, Literal, Optional, Tuple
from pydantic import BaseModel, Field, field_validator, model_validator

U32_MAX = 2**32 - 1

# One (parameter name, value) pair per declared component, in declaration order.
Assignment = Tuple[Tuple[str, int], ...]


class Component(BaseModel):
    """A complexity parameter of a benchmark case and its range ``[low, high)``."""
    model_config = {"frozen": True}

    name: str = Field(min_length=1)
    low: int = Field(ge=0, le=U32_MAX)
    high: int = Field(ge=0, le=U32_MAX)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.isidentifier():
            raise ValueError(f"Parameter name must be an identifier, got '{v}'")
        return v

    @model_validator(mode="after")
    def _ordered(self):
        if self.low > self.high:
            raise ValueError(f"Parameter '{self.name}' has low ({self.low}) greater than high ({self.high})")
        return self

    @property
    def width(self) -> int:
        return self.high - self.low

    @property
    def mid(self) -> int:
        return self.low + self.width // 2

    def contains(self, value: int) -> bool:
        # Inclusive at both ends: the midpoint equals high when low == high.
        return self.low <= value <= self.high


class Origin(BaseModel):
    """Calling identity of an invocation."""
    model_config = {"frozen": True}

    kind: Literal["root", "signed", "none"]
    account: Optional[str] = None

    @model_validator(mode="after")
    def _account_only_when_signed(self):
        if self.kind == "signed" and not self.account:
            raise ValueError("Signed origin requires an account")
        if self.kind != "signed" and self.account is not None:
            raise ValueError(f"Origin '{self.kind}' cannot carry an account")
        return self

    @classmethod
    def root(cls) -> 'Origin':
        return cls(kind="root")

    @classmethod
    def signed(cls, account: str) -> 'Origin':
        return cls(kind="signed", account=account)

    @classmethod
    def none(cls) -> 'Origin':
        return cls(kind="none")

    def __str__(self) -> str:
        if self.kind == "signed":
            return f"Signed({self.account})"
        return self.kind.capitalize()


class Call(BaseModel):
    model_config = {"frozen": True}

    name: str = Field(min_length=1)
    args: Tuple[Any, ...] = ()


class Invocation(BaseModel):
    """The concrete (call, origin) pair that gets timed."""
    model_config = {"frozen": True}

    call: Call
    origin: Origin

    @classmethod
    def of(cls, name: str, *args: Any, origin: Origin) -> 'Invocation':
        return cls(call=Call(name=name, args=tuple(args)), origin=origin)


class BenchmarkResult(BaseModel):
    """One timed run: the assignment it used and the elapsed wall-clock time."""
    model_config = {"frozen": True}

    assignment: Assignment
    elapsed_ns: int = Field(ge=0)

    @property
    def values(self) -> Dict[str, int]:
        return dict(self.assignment)

    def value_of(self, name: str) -> int:
        for key, value in self.assignment:
            if key == name:
                return value
        raise KeyError(name)

    def to_dict(self) -> dict:
        return {
            'assignment': self.values,
            'elapsed_ns': self.elapsed_ns,
        }


class RunRequest(BaseModel):
    """One sweep requested by a benchmark plan."""
    pallet: str = Field(min_length=1)
    extrinsic: str = Field(min_length=1)
    steps: Optional[int] = Field(default=None, ge=1, le=U32_MAX)
    repeat: Optional[int] = Field(default=None, ge=1, le=U32_MAX)


class BenchmarkPlan(BaseModel):
    steps: Optional[int] = Field(default=None, ge=1, le=U32_MAX)
    repeat: Optional[int] = Field(default=None, ge=1, le=U32_MAX)
    runs: List[RunRequest]

    @field_validator('runs')
    @classmethod
    def validate_runs(cls, v):
        if not v:
            raise ValueError("A benchmark plan needs at least one run")
        return v

    def resolved_runs(self) -> List[RunRequest]:
        """Runs with plan-level steps/repeat filled in where a run leaves them unset."""
        return [
            run.model_copy(update={
                "steps": run.steps if run.steps is not None else self.steps,
                "repeat": run.repeat if run.repeat is not None else self.repeat,
            })
            for run in self.runs
        ]
