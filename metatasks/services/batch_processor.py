"""Apply one remote operation to many identifiers with per-item failure isolation"""

from typing import Any, Callable, Iterable, Optional

from ..models.batch import BatchItem, BatchOutcome, ItemOutcome
from ..utils.exceptions import Cancelled
from ..utils.logger import get_logger

logger = get_logger(__name__)

REJECTED_REASON = "rejected by provider"


def process_batch(
    identifiers: Iterable[str],
    operation: Callable[[str], Any],
    accept: Optional[Callable[[Any], bool]] = None,
    action: str = "process",
) -> BatchOutcome:
    """
    Run operation(identifier) for each identifier, in order

    A failing item never aborts the batch: any exception, or a result that
    ``accept`` refuses, marks that item failed and the loop moves on.
    Cancellation is the one exception that propagates.

    Args:
        identifiers: Ordered identifiers to process
        operation: Remote call for a single identifier
        accept: Optional predicate on the operation's result
        action: Verb used in log lines ("delete", "fetch insights for")

    Returns:
        BatchOutcome with one item per identifier, in input order
    """
    items = []
    for identifier in identifiers:
        try:
            value = operation(identifier)
        except Cancelled:
            raise
        except Exception as e:
            logger.error(f"Failed to {action} item", identifier=identifier, error=str(e))
            items.append(BatchItem(identifier=identifier, outcome=ItemOutcome.FAILED, reason=str(e)))
            continue

        if accept is not None and not accept(value):
            logger.error(f"Failed to {action} item", identifier=identifier, error=REJECTED_REASON)
            items.append(BatchItem(identifier=identifier, outcome=ItemOutcome.FAILED, reason=REJECTED_REASON))
            continue

        items.append(BatchItem(identifier=identifier, outcome=ItemOutcome.SUCCEEDED, value=value))

    outcome = BatchOutcome(items=items)
    logger.info(
        "Batch processed",
        action=action,
        total=len(items),
        succeeded=outcome.total_succeeded,
        failed=outcome.total_failed,
    )
    return outcome
