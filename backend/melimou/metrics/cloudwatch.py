"""CloudWatch custom metrics for tutor reply latency and business events.

All functions are fire-and-forget: they catch exceptions internally and log
warnings via structlog. They never raise or block the caller.

boto3 is synchronous, so put_metric_data runs on a small thread pool. With
metrics_enabled off (the default) nothing is dispatched.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

import boto3
import structlog

from melimou.core.config import get_settings

logger = structlog.get_logger(__name__)

_cw_client = None
_executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="cw-metrics")


def _get_client():
    global _cw_client
    if _cw_client is None:
        _cw_client = boto3.client("cloudwatch", region_name=get_settings().aws_region)
    return _cw_client


def _put_tutor_latency(formality_level: str, duration_ms: float) -> None:
    """Synchronous put_metric_data for tutor reply latency. Runs in thread pool."""
    try:
        _get_client().put_metric_data(
            Namespace=f"{get_settings().metrics_namespace}/Tutor",
            MetricData=[{
                "MetricName": "ReplyLatency",
                "Dimensions": [{"Name": "Formality", "Value": formality_level}],
                "Value": duration_ms,
                "Unit": "Milliseconds",
                "Timestamp": datetime.now(timezone.utc),
            }],
        )
    except Exception as e:
        logger.warning("tutor_latency_emit_failed", error=str(e), formality=formality_level)


def _put_business_event(event_name: str, user_id: str | None = None) -> None:
    """Synchronous put_metric_data for business events. Runs in thread pool."""
    dimensions = [{"Name": "Event", "Value": event_name}]
    if user_id:
        dimensions.append({"Name": "UserId", "Value": user_id})
    try:
        _get_client().put_metric_data(
            Namespace=f"{get_settings().metrics_namespace}/Business",
            MetricData=[{
                "MetricName": "EventCount",
                "Dimensions": dimensions,
                "Value": 1.0,
                "Unit": "Count",
                "Timestamp": datetime.now(timezone.utc),
            }],
        )
    except Exception as e:
        logger.warning("business_event_emit_failed", error=str(e), event_name=event_name)


async def emit_tutor_latency(formality_level: str, duration_ms: float) -> None:
    """Emit tutor reply latency metric. Non-blocking, fire-and-forget."""
    if not get_settings().metrics_enabled:
        return
    loop = asyncio.get_running_loop()
    loop.run_in_executor(_executor, _put_tutor_latency, formality_level, duration_ms)


async def emit_business_event(event_name: str, user_id: str | None = None) -> None:
    """Emit business event metric. Non-blocking, fire-and-forget."""
    if not get_settings().metrics_enabled:
        return
    loop = asyncio.get_running_loop()
    loop.run_in_executor(_executor, _put_business_event, event_name, user_id)
