"""
Pydantic models for the lazy collections library.

Holds the runtime settings plus the request/response models used by the
declarative pipeline runner in ``utils``.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator, ConfigDict
from datetime import datetime
from enum import Enum


class CollectionShape(str, Enum):
    """Container shape enumeration"""
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    UNIQUE_SET = "unique_set"


class OperationType(str, Enum):
    """Operations a declarative pipeline can apply"""
    MAP = "map"
    FILTER = "filter"
    TAKE_WHILE = "take_while"
    TAKE = "take"
    DROP = "drop"
    SORTED = "sorted"
    REVERSE = "reverse"
    FLATTEN = "flatten"


# Operations that need a registered function
FUNCTION_OPERATIONS = {OperationType.MAP, OperationType.FILTER, OperationType.TAKE_WHILE}
# Operations that need a count
COUNT_OPERATIONS = {OperationType.TAKE, OperationType.DROP}


class CollectionSettings(BaseModel):
    """Runtime settings for the collections"""
    log_level: str = Field(
        "WARNING",
        description="Logging level used by setup_logging()"
    )
    log_file: Optional[str] = Field(
        None,
        description="Optional log file, in addition to stdout"
    )
    default_separator: str = Field(
        "",
        description="Separator used by mk_string() when none is given"
    )
    repr_limit: int = Field(
        20,
        description="Maximum number of elements shown by repr()",
        ge=1
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Normalize and validate the log level name"""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Operation(BaseModel):
    """A single step of a declarative pipeline"""
    type: OperationType = Field(..., description="Operation to apply")
    function: Optional[str] = Field(
        None,
        description="Name of a registered function (map/filter/take_while)"
    )
    count: Optional[int] = Field(
        None,
        description="Element count (take/drop)"
    )
    key: Optional[str] = Field(
        None,
        description="Name of a registered key function (sorted)"
    )
    reverse: bool = Field(False, description="Descending order (sorted)")

    @field_validator('function', 'key')
    @classmethod
    def validate_function_name(cls, v):
        """Validate function names are not blank"""
        if v is not None and not v.strip():
            raise ValueError("Function name cannot be empty")
        return v.strip() if v is not None else v


class PipelineRequest(BaseModel):
    """Request for running a declarative pipeline"""
    shape: CollectionShape = Field(
        CollectionShape.SEQUENCE,
        description="Shape of the collection built from data"
    )
    data: Any = Field(
        ...,
        description="Source data (list, or dict for mappings)"
    )
    operations: List[Operation] = Field(
        default_factory=list,
        description="Operations applied in order"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "shape": "sequence",
                "data": [1, 2, 3, 4],
                "operations": [
                    {"type": "map", "function": "double"},
                    {"type": "filter", "function": "is_even"},
                    {"type": "take", "count": 2}
                ]
            }
        }
    )


class PerformanceInfo(BaseModel):
    """Timing and memory figures for one measured operation"""
    operation: str = Field(..., description="Measured operation name")
    execution_time_ms: float = Field(..., description="Wall time in milliseconds", ge=0)
    memory_usage_mb: float = Field(..., description="Peak traced memory in megabytes", ge=0)
    input_size: Optional[int] = Field(None, description="Number of input elements")
    output_size: Optional[int] = Field(None, description="Number of output elements")
    success: bool = Field(True, description="Whether the operation succeeded")


class ErrorResponse(BaseModel):
    """Error details for a failed pipeline"""
    error: str = Field(..., description="Error message")
    error_type: str = Field(..., description="Exception class name")
    operation_index: Optional[int] = Field(
        None,
        description="Index of the failing operation, if any"
    )
    timestamp: datetime = Field(default_factory=datetime.now, description="Error timestamp")


class PipelineResult(BaseModel):
    """Result of a declarative pipeline"""
    success: bool = Field(..., description="Pipeline success status")
    shape: CollectionShape = Field(..., description="Shape of the result")
    result: Optional[Any] = Field(None, description="Realized elements (dict for mappings)")
    operations_applied: List[OperationType] = Field(
        default_factory=list,
        description="Operations applied before completion or failure"
    )
    performance: Optional[PerformanceInfo] = Field(None, description="Performance figures")
    error: Optional[ErrorResponse] = Field(None, description="Error details on failure")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Extra metadata")
