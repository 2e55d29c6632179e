"""
Service container shared by the route handlers.
"""
from dataclasses import dataclass
from fastapi import Request

from ...predictions.domain.protocols import PredictionFeed
from ...realtime.broadcast.realtime_broadcaster import RealtimeBroadcaster
from ...reports.application.report_store import ReportStore

@dataclass
class Services:
    store: ReportStore
    feed: PredictionFeed
    broadcaster: RealtimeBroadcaster
    ping_seconds: int = 15

def get_services(request: Request) -> Services:
    return request.app.state.services
