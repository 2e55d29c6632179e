"""
Initialization snapshot sent once to each newly connected client.
"""
from ..predictions.domain.protocols import PredictionFeed
from ..reports.application.report_store import ReportStore

async def build_snapshot(store: ReportStore, feed: PredictionFeed) -> dict:
    """
    Current reports plus a bounded recent slice of the prediction feed.
    Reports are read after the (possibly suspending) feed read so the
    snapshot reflects the store at registration time.
    """
    predictions = await feed.snapshot()
    return {
        "reports": [report.to_wire() for report in store.list()],
        "predictions": [prediction.to_wire() for prediction in predictions],
    }
