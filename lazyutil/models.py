"""
lazyutil - Pydantic Models

Settings and declarative pipeline models for lazy sequences.
"""

import logging
import os
from typing import Any, Callable, Dict, List, Mapping, Optional
from pydantic import BaseModel, Field, field_validator, model_validator, ConfigDict
from enum import Enum


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_TRUE_VALUES = {"1", "true", "yes", "on"}


class StepType(str, Enum):
    """Lazy pipeline step enumeration"""
    MAP = "map"
    GREP = "grep"
    TAKE = "take"
    FIND = "find"
    NFIND = "nfind"
    UNTIL = "until"
    UNIQ = "uniq"
    NUNIQ = "nuniq"


class AggregateType(str, Enum):
    """Aggregator enumeration"""
    COUNT = "count"
    FIRST = "first"
    LAST = "last"
    MAX = "max"
    MIN = "min"
    SUM = "sum"
    PROD = "prod"
    JOIN = "join"


class LazySettings(BaseModel):
    """Process-wide settings for lazy sequences"""
    recognize_deferred: bool = Field(
        True,
        description="Treat objects exposing the deferred method as value sources"
    )
    deferred_method: str = Field(
        "force",
        description="Name of the method that forces a deferred value"
    )
    trace_pulls: bool = Field(
        False,
        description="Log every pulled value at DEBUG level"
    )
    log_level: str = Field(
        "WARNING",
        description="Logging level used by configure_logging()"
    )

    model_config = ConfigDict(
        validate_assignment=True,
        json_schema_extra={
            "example": {
                "recognize_deferred": True,
                "deferred_method": "force",
                "trace_pulls": False,
                "log_level": "WARNING"
            }
        }
    )

    @field_validator('deferred_method')
    @classmethod
    def validate_deferred_method(cls, v):
        """Deferred method must be a usable attribute name"""
        v = v.strip()
        if not v.isidentifier():
            raise ValueError(f"Invalid deferred method name: {v!r}")
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Normalize and check the log level"""
        v = v.strip().upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"Log level must be one of {', '.join(LOG_LEVELS)}")
        return v

    @property
    def numeric_log_level(self) -> int:
        return getattr(logging, self.log_level)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LazySettings":
        """Build settings from LAZYUTIL_* environment variables"""
        if environ is None:
            environ = os.environ

        values: Dict[str, Any] = {}
        if "LAZYUTIL_RECOGNIZE_DEFERRED" in environ:
            values["recognize_deferred"] = environ["LAZYUTIL_RECOGNIZE_DEFERRED"].strip().lower() in _TRUE_VALUES
        if "LAZYUTIL_DEFERRED_METHOD" in environ:
            values["deferred_method"] = environ["LAZYUTIL_DEFERRED_METHOD"]
        if "LAZYUTIL_TRACE_PULLS" in environ:
            values["trace_pulls"] = environ["LAZYUTIL_TRACE_PULLS"].strip().lower() in _TRUE_VALUES
        if "LAZYUTIL_LOG_LEVEL" in environ:
            values["log_level"] = environ["LAZYUTIL_LOG_LEVEL"]

        return cls(**values)


class PipelineStep(BaseModel):
    """A single lazy step applied to a sequence"""
    type: StepType = Field(..., description="Step to apply")
    function: Optional[Callable[..., Any]] = Field(
        None,
        description="Mapping function or predicate (map, grep, until)"
    )
    count: Optional[int] = Field(
        None,
        description="Number of values to take (take)"
    )
    target: Optional[Any] = Field(
        None,
        description="Value that ends the sequence (find, nfind)"
    )

    @model_validator(mode='after')
    def validate_arguments(self):
        """Each step type needs its own argument"""
        if self.type in (StepType.MAP, StepType.GREP, StepType.UNTIL) and self.function is None:
            raise ValueError(f"Step '{self.type.value}' requires a function")
        if self.type == StepType.TAKE and self.count is None:
            raise ValueError("Step 'take' requires a count")
        if self.type in (StepType.FIND, StepType.NFIND) and "target" not in self.model_fields_set:
            raise ValueError(f"Step '{self.type.value}' requires a target")
        return self


class PipelineSpec(BaseModel):
    """An ordered list of steps, optionally ending in an aggregator"""
    steps: List[PipelineStep] = Field(
        default_factory=list,
        description="Steps applied in order"
    )
    aggregate: Optional[AggregateType] = Field(
        None,
        description="Aggregator draining the pipeline; drain to a list if omitted"
    )
    separator: Optional[str] = Field(
        None,
        description="Separator for the join aggregator"
    )

    @model_validator(mode='after')
    def validate_separator(self):
        """join needs a separator"""
        if self.aggregate == AggregateType.JOIN and self.separator is None:
            raise ValueError("Aggregate 'join' requires a separator")
        return self


class PipelineReport(BaseModel):
    """Result of running a pipeline"""
    result: Any = Field(None, description="Aggregated value or drained list")
    steps_applied: List[str] = Field(
        default_factory=list,
        description="Names of the steps applied, in order"
    )
    aggregate: Optional[str] = Field(None, description="Aggregator used")
    processing_time_ms: float = Field(
        ...,
        description="Processing time in milliseconds",
        ge=0
    )
    memory_usage_mb: float = Field(
        ...,
        description="Peak traced memory in megabytes",
        ge=0
    )
    output_size: Optional[int] = Field(
        None,
        description="Number of drained values when no aggregator is used"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "result": [5, 10, 15],
                "steps_applied": ["map"],
                "aggregate": None,
                "processing_time_ms": 0.42,
                "memory_usage_mb": 0.01,
                "output_size": 3
            }
        }
    )
