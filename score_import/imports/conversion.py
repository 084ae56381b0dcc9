import inspect
from collections.abc import AsyncIterable, AsyncIterator, Iterable
from typing import Any

from structlog.typing import FilteringBoundLogger

from score_import.exceptions import ConverterFailure
from score_import.imports.schemas import (
    ConversionFailure,
    ConversionOutcome,
    ConversionSuccess,
    Converter,
)


async def _iterate(iterable: Iterable[Any] | AsyncIterable[Any]) -> AsyncIterator[Any]:
    if isinstance(iterable, AsyncIterable):
        async for item in iterable:
            yield item
    else:
        for item in iterable:
            yield item


async def convert_one(raw: Any, converter: Converter, context: Any) -> ConversionOutcome:
    try:
        outcome = converter(raw, context)
        if inspect.isawaitable(outcome):
            outcome = await outcome
    except ConverterFailure as exc:
        return ConversionFailure(kind=exc.kind, message=exc.message)

    if not isinstance(outcome, ConversionSuccess | ConversionFailure):
        raise TypeError(f"Converter returned {type(outcome).__name__}, not a conversion outcome")
    return outcome


async def import_all_iterable_data(
    iterable: Iterable[Any] | AsyncIterable[Any],
    converter: Converter,
    context: Any,
    logger: FilteringBoundLogger,
) -> list[ConversionOutcome]:
    """Convert every raw record in input order, one at a time.

    Expected per-record failures become ConversionFailure outcomes; anything
    else the converter raises propagates and aborts the import.
    """
    outcomes: list[ConversionOutcome] = []

    async for raw in _iterate(iterable):
        outcome = await convert_one(raw, converter, context)
        if isinstance(outcome, ConversionFailure):
            logger.debug("score_conversion_failed", kind=outcome.kind, reason=outcome.message)
        outcomes.append(outcome)

    return outcomes
