"""
Download Callback Tasks

Completion notices from the download consumer arrive here and are
routed to the capture service. Thin wrapper: the service does the
locking, persistence and event publishing.
"""

import logging
from typing import Any, Dict, Optional

from ..application.errors import ApplicationError, to_application_error
from ..celery_app import celery_app
from ..config.celery_config import COMPLETE_DOWNLOAD_TASK
from ..domain.errors import DomainError

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name=COMPLETE_DOWNLOAD_TASK)
def complete_download(
    self,
    aggregate_type: str,
    aggregate_id: str,
    local_path: str,
    correlation_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Record that the download consumer stored an artifact.

    A replayed notice is reported with status ``duplicate``. Domain
    failures are returned as ``failed`` with the categorised error; the
    task is never retried.

    Args:
        aggregate_type: Qualified aggregate type, e.g. ``instagram.post``
        aggregate_id: Aggregate identifier
        local_path: Where the consumer stored the file
        correlation_id: Correlation id carried by the download request

    Returns:
        dict: Task result with status and the recorded events
    """
    from ..application.capture_service import CaptureService
    from ..bootstrap import get_container

    logger.info(
        f"Completion notice for {aggregate_type} {aggregate_id} "
        f"(task {self.request.id}, correlation_id={correlation_id})"
    )
    service = get_container().resolve(CaptureService)

    try:
        result = service.complete_download(
            aggregate_type, aggregate_id, local_path, correlation_id
        )
    except (DomainError, ApplicationError) as e:
        error = to_application_error(e)
        logger.error(
            f"Completion for {aggregate_type} {aggregate_id} failed: {error.technical_message}"
        )
        return {
            "status": "failed",
            "aggregate_type": aggregate_type,
            "aggregate_id": aggregate_id,
            "correlation_id": correlation_id,
            **error.to_dict(),
        }

    data = result.to_dict()
    data["status"] = "duplicate" if result.duplicate else "completed"
    return data
