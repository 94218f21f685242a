from .aggregator import HourAggregator, ScheduleSegment, aggregate, expand_segments
from .buckets import Bucket, bucket_for
from .config import Config, cfg
from .holidays import Holiday, Region, easter, holiday
from .main import run_report

__all__ = [
    "Bucket",
    "Config",
    "Holiday",
    "HourAggregator",
    "Region",
    "ScheduleSegment",
    "aggregate",
    "bucket_for",
    "cfg",
    "easter",
    "expand_segments",
    "holiday",
    "run_report",
]
