from score_import.parsers.batch_manual import (
    BatchManualContext,
    batch_manual_parser,
    convert_batch_manual_score,
)

__all__ = ["BatchManualContext", "batch_manual_parser", "convert_batch_manual_score"]
