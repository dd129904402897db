"""
Utility functions for the lazy collections.

Logging and settings setup, a registry of named functions, and a runner for
declarative pipelines (a source plus a list of named operations) with
performance measurement.
"""

import gc
import logging
import os
import sys
import time
import tracemalloc
from typing import Any, Callable, Dict, Optional

import lazy
from mapping import Mapping
from models import (
    COUNT_OPERATIONS,
    FUNCTION_OPERATIONS,
    CollectionSettings,
    CollectionShape,
    ErrorResponse,
    OperationType,
    PerformanceInfo,
    PipelineRequest,
    PipelineResult,
)
from sequence import Sequence
from unique_set import UniqueSet

logger = logging.getLogger(__name__)

SHAPES = {
    CollectionShape.SEQUENCE: Sequence,
    CollectionShape.MAPPING: Mapping,
    CollectionShape.UNIQUE_SET: UniqueSet,
}

# Named functions usable from declarative pipelines
FUNCTION_REGISTRY: Dict[str, Callable] = {
    "identity": lambda x: x,
    "double": lambda x: x * 2,
    "square": lambda x: x * x,
    "negate": lambda x: -x,
    "is_even": lambda x: x % 2 == 0,
    "is_odd": lambda x: x % 2 == 1,
    "is_positive": lambda x: x > 0,
    "swap": lambda pair: (pair[1], pair[0]),
    "value": lambda pair: pair[1],
}

# Global performance tracking
_performance_metrics = {
    "operations": [],
    "total_time_ms": 0.0,
    "total_memory_mb": 0.0,
    "operation_count": 0
}


class PipelineError(Exception):
    """Raised when a declarative pipeline cannot be applied."""
    pass


def setup_logging(settings: Optional[CollectionSettings] = None) -> logging.Logger:
    """Setup logging for the collections"""
    settings = settings or lazy.get_settings()
    handlers = [logging.StreamHandler(sys.stdout)]
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file))
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s:%(lineno)d] - %(message)s',
        handlers=handlers
    )
    return logging.getLogger('lazy')


def load_settings(environ=None) -> CollectionSettings:
    """Build settings from LAZYCOLL_* environment variables and install them"""
    environ = os.environ if environ is None else environ
    values = {}
    for field in CollectionSettings.model_fields:
        env_name = f"LAZYCOLL_{field.upper()}"
        if env_name in environ:
            values[field] = environ[env_name]
    settings = CollectionSettings(**values)
    lazy.configure(settings)
    return settings


def register_function(name: str, fn: Callable) -> None:
    """Make fn available to pipelines under name"""
    if not name or not name.strip():
        raise ValueError("Function name cannot be empty")
    FUNCTION_REGISTRY[name.strip()] = fn
    logger.debug(f"Registered pipeline function: {name}")


def resolve_function(name: Optional[str]) -> Callable:
    if name is None:
        raise PipelineError("Operation requires a function name")
    if name not in FUNCTION_REGISTRY:
        raise PipelineError(f"Unknown function: {name}")
    return FUNCTION_REGISTRY[name]


def measure_performance(operation_name: str, func, *args, **kwargs) -> Dict[str, Any]:
    """Measure a function call, returning its result and a PerformanceInfo"""
    tracemalloc.start()
    gc.collect()
    start_time = time.perf_counter()
    success = False

    try:
        result = func(*args, **kwargs)
        success = True
        return {"result": result, "performance": _record(operation_name, start_time, success, result)}
    except Exception:
        _record(operation_name, start_time, success, None)
        raise
    finally:
        tracemalloc.stop()


def _record(operation_name, start_time, success, result) -> PerformanceInfo:
    execution_time_ms = (time.perf_counter() - start_time) * 1000
    _, peak = tracemalloc.get_traced_memory()
    memory_mb = peak / 1024 / 1024

    info = PerformanceInfo(
        operation=operation_name,
        execution_time_ms=execution_time_ms,
        memory_usage_mb=memory_mb,
        output_size=len(result) if hasattr(result, "__len__") else None,
        success=success
    )
    _performance_metrics["operations"].append(info)
    _performance_metrics["total_time_ms"] += execution_time_ms
    _performance_metrics["total_memory_mb"] += memory_mb
    _performance_metrics["operation_count"] += 1
    return info


def get_performance_summary() -> Dict[str, Any]:
    """Get summary of all performance metrics"""
    count = _performance_metrics["operation_count"]
    if count == 0:
        return {
            "total_operations": 0,
            "total_time_ms": 0.0,
            "total_memory_mb": 0.0,
            "avg_time_ms": 0.0,
            "avg_memory_mb": 0.0
        }

    return {
        "total_operations": count,
        "total_time_ms": _performance_metrics["total_time_ms"],
        "total_memory_mb": _performance_metrics["total_memory_mb"],
        "avg_time_ms": _performance_metrics["total_time_ms"] / count,
        "avg_memory_mb": _performance_metrics["total_memory_mb"] / count
    }


def clear_performance_metrics():
    """Clear all performance metrics"""
    global _performance_metrics
    _performance_metrics = {
        "operations": [],
        "total_time_ms": 0.0,
        "total_memory_mb": 0.0,
        "operation_count": 0
    }


def apply_operation(collection, operation):
    """Apply one declarative Operation to a collection"""
    op_type = operation.type

    if op_type in COUNT_OPERATIONS and operation.count is None:
        raise PipelineError(f"Operation '{op_type.value}' requires a count")

    if op_type in FUNCTION_OPERATIONS:
        fn = resolve_function(operation.function)
        if op_type == OperationType.MAP:
            return collection.map(fn)
        if op_type == OperationType.FILTER:
            return collection.filter(fn)
        return collection.take_while(fn)

    if op_type == OperationType.FLATTEN:
        if not hasattr(collection, "flatten"):
            raise PipelineError(f"{type(collection).__name__} does not support flatten")
        return collection.flatten()

    # The remaining operations are positional
    if not isinstance(collection, Sequence):
        raise PipelineError(f"Operation '{op_type.value}' needs a sequence, got {type(collection).__name__}")

    if op_type == OperationType.TAKE:
        return collection.take(operation.count)
    if op_type == OperationType.DROP:
        return collection.drop(operation.count)
    if op_type == OperationType.SORTED:
        key = resolve_function(operation.key) if operation.key else None
        return collection.sorted(key=key, reverse=operation.reverse)
    if op_type == OperationType.REVERSE:
        return collection.reverse()

    raise PipelineError(f"Unknown operation: {op_type}")


def process_operations(request: PipelineRequest) -> PipelineResult:
    """Run a declarative pipeline and report its result and performance"""
    shape_cls = SHAPES[request.shape]
    operations_applied = []
    operation_index = None

    tracemalloc.start()
    gc.collect()
    start_time = time.perf_counter()

    try:
        collection = shape_cls(source=request.data)
        for operation_index, operation in enumerate(request.operations):
            collection = apply_operation(collection, operation)
            operations_applied.append(operation.type)
        operation_index = None

        result = collection.to_dict() if isinstance(collection, Mapping) else collection.to_list()

        _, peak = tracemalloc.get_traced_memory()
        processing_time_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"Pipeline on {request.shape.value} completed: "
            f"{len(operations_applied)} operations in {processing_time_ms:.2f}ms"
        )

        return PipelineResult(
            success=True,
            shape=request.shape,
            result=result,
            operations_applied=operations_applied,
            performance=PerformanceInfo(
                operation="pipeline",
                execution_time_ms=processing_time_ms,
                memory_usage_mb=peak / 1024 / 1024,
                input_size=len(request.data) if hasattr(request.data, "__len__") else None,
                output_size=len(result)
            )
        )

    except Exception as e:
        logger.error(f"Pipeline on {request.shape.value} failed: {e}", exc_info=True)
        _, peak = tracemalloc.get_traced_memory()
        return PipelineResult(
            success=False,
            shape=request.shape,
            operations_applied=operations_applied,
            performance=PerformanceInfo(
                operation="pipeline",
                execution_time_ms=(time.perf_counter() - start_time) * 1000,
                memory_usage_mb=peak / 1024 / 1024,
                success=False
            ),
            error=ErrorResponse(
                error=str(e),
                error_type=type(e).__name__,
                operation_index=operation_index
            )
        )

    finally:
        tracemalloc.stop()
