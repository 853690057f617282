"""
Utility functions for lazyutil

Helpers for building lazy pipelines from declarative steps and for measuring
how long they take and how much memory they touch.
"""

import time
import gc
import logging
import tracemalloc
from typing import Any, Callable, Dict, List

from . import aggregators, combinators
from .lazy import LazyError, Sequence
from .models import AggregateType, PipelineReport, PipelineSpec, PipelineStep, StepType

logger = logging.getLogger(__name__)


class PipelineError(LazyError):
    """Raised when a pipeline step cannot be applied."""
    pass


# Measurements taken by measure_performance, oldest first
_measurements: List[Dict[str, Any]] = []


def measure_performance(operation_name: str, func: Callable, *args, **kwargs) -> Dict[str, Any]:
    """
    Call ``func`` and report its result, wall time and peak traced memory.

    An already running tracemalloc session is left running; its peak is
    reset so the figure covers this call only.
    """
    started_tracing = not tracemalloc.is_tracing()
    if started_tracing:
        tracemalloc.start()
    else:
        tracemalloc.reset_peak()
    gc.collect()

    info: Dict[str, Any] = {"operation": operation_name, "timestamp": time.time()}
    start_time = time.perf_counter()

    try:
        result = func(*args, **kwargs)
        info.update(
            result=result,
            success=True,
            result_size=len(result) if hasattr(result, "__len__") else None,
        )
        return info

    except Exception as e:
        info.update(success=False, error=str(e))
        logger.error(f"Error in {operation_name} after {(time.perf_counter() - start_time) * 1000:.2f}ms: {e}")
        raise

    finally:
        info["execution_time_ms"] = (time.perf_counter() - start_time) * 1000
        info["memory_usage_mb"] = tracemalloc.get_traced_memory()[1] / 1024 / 1024
        if started_tracing:
            tracemalloc.stop()
        _measurements.append(info)


def get_performance_summary() -> Dict[str, Any]:
    """Totals and averages over every measurement since the last clear"""
    total_operations = len(_measurements)
    total_time_ms = float(sum(m["execution_time_ms"] for m in _measurements))
    total_memory_mb = float(sum(m["memory_usage_mb"] for m in _measurements))

    return {
        "total_operations": total_operations,
        "failed_operations": sum(1 for m in _measurements if not m["success"]),
        "total_time_ms": total_time_ms,
        "total_memory_mb": total_memory_mb,
        "avg_time_ms": total_time_ms / total_operations if total_operations else 0.0,
        "avg_memory_mb": total_memory_mb / total_operations if total_operations else 0.0
    }


def clear_performance_metrics():
    """Forget every recorded measurement"""
    _measurements.clear()


def apply_step(seq: Sequence, step: PipelineStep) -> Sequence:
    """Wrap ``seq`` in the combinator described by ``step``"""
    if step.type == StepType.MAP:
        return combinators.map(step.function, seq)
    elif step.type == StepType.GREP:
        return combinators.grep(step.function, seq)
    elif step.type == StepType.UNTIL:
        return combinators.until(step.function, seq)
    elif step.type == StepType.TAKE:
        return combinators.take(step.count, seq)
    elif step.type == StepType.FIND:
        return combinators.find(step.target, seq)
    elif step.type == StepType.NFIND:
        return combinators.nfind(step.target, seq)
    elif step.type == StepType.UNIQ:
        return combinators.uniq(seq)
    elif step.type == StepType.NUNIQ:
        return combinators.nuniq(seq)
    else:
        raise PipelineError(f"Unknown step: {step.type}")


def build_pipeline(steps: List[PipelineStep], *sources) -> Sequence:
    """Chain ``sources`` and apply ``steps`` in order. Nothing is pulled."""
    seq = combinators.concat(*sources)
    for step in steps:
        seq = apply_step(seq, step)
        logger.debug(f"Applied step {step.type.value}")
    return seq


def aggregate(kind: AggregateType, seq: Sequence, separator: str = None) -> Any:
    """Drain ``seq`` with the aggregator named by ``kind``"""
    if kind == AggregateType.JOIN:
        if separator is None:
            raise PipelineError("The join aggregator needs a separator")
        return aggregators.join(separator, seq)

    funcs = {
        AggregateType.COUNT: aggregators.count,
        AggregateType.FIRST: aggregators.first,
        AggregateType.LAST: aggregators.last,
        AggregateType.MAX: aggregators.max,
        AggregateType.MIN: aggregators.min,
        AggregateType.SUM: aggregators.sum,
        AggregateType.PROD: aggregators.prod,
    }
    if kind not in funcs:
        raise PipelineError(f"Unknown aggregator: {kind}")
    return funcs[kind](seq)


def run_pipeline(spec: PipelineSpec, *sources) -> PipelineReport:
    """Build the pipeline described by ``spec`` over ``sources`` and evaluate it"""
    seq = build_pipeline(spec.steps, *sources)

    if spec.aggregate is not None:
        metrics = measure_performance(
            f"pipeline_{spec.aggregate.value}", aggregate, spec.aggregate, seq, spec.separator
        )
        output_size = None
    else:
        metrics = measure_performance("pipeline_drain", seq.drain_all)
        output_size = len(metrics["result"])

    logger.info(
        f"Pipeline with {len(spec.steps)} steps finished in {metrics['execution_time_ms']:.2f}ms"
    )

    return PipelineReport(
        result=metrics["result"],
        steps_applied=[step.type.value for step in spec.steps],
        aggregate=spec.aggregate.value if spec.aggregate is not None else None,
        processing_time_ms=metrics["execution_time_ms"],
        memory_usage_mb=metrics["memory_usage_mb"],
        output_size=output_size
    )

