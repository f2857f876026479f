"""Paced multi-part delivery to a single gateway address.

Carriers throttle or spam-filter bursts of emails from one sender, so the
parts of a long notification go out with a pause in between: one minute
after the first part, two minutes between every later pair. The pause is
an ``await``, so other requests keep being served while a digest drips out.
"""

from __future__ import annotations

import asyncio
import html
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Union

from .email.base import EmailProvider
from .errors import TransportError
from .types import DeliveryResult, EmailMessage, PacingSchedule, PartOutcome, SendOutcome

logger = logging.getLogger(__name__)

DEFAULT_SCHEDULE = PacingSchedule()

SleepFn = Callable[[float], Awaitable[object]]
SubjectFn = Callable[[int], str]


def render_html(chunk: str) -> str:
    return f"<p>{html.escape(chunk).replace(chr(10), '<br>')}</p>"


async def _deliver(provider: EmailProvider, message: EmailMessage, index: int) -> DeliveryResult:
    try:
        return await provider.send_async(message)
    except Exception as exc:
        error = TransportError(str(exc) or type(exc).__name__, part=index)
        logger.exception("Transport raised while sending part %d to %s", index + 1, message.to)
        return DeliveryResult.fail(str(error))


async def send_paced(
    provider: EmailProvider,
    chunks: Sequence[str],
    to_address: str,
    subject_for_part: Union[SubjectFn, str],
    *,
    from_email: str,
    from_name: str = "",
    schedule: PacingSchedule = DEFAULT_SCHEDULE,
    stop_on_failure: bool = False,
    sleep: SleepFn = asyncio.sleep,
) -> SendOutcome:
    """Send ``chunks`` in order, one email each, pausing between parts.

    Args:
        provider: Transport used for every part.
        chunks: Ordered message parts.
        to_address: Resolved carrier gateway address.
        subject_for_part: Subject line, or a callable taking the 0-based part index.
        schedule: Delays between parts; nothing is awaited after the last part.
        stop_on_failure: Abort the remaining parts after the first failure
            instead of carrying on best-effort.
        sleep: Awaitable used for the pauses (swapped out in tests).

    Returns:
        SendOutcome with one PartOutcome per attempted part. ``success`` is
        True only when every part was delivered.
    """
    if not chunks:
        return SendOutcome.failure("No message content")

    subject_fn: SubjectFn = subject_for_part if callable(subject_for_part) else (lambda _i: subject_for_part)
    total = len(chunks)
    parts: list[PartOutcome] = []

    logger.info("Sending %d SMS part%s to %s", total, "" if total == 1 else "s", to_address)

    for index, chunk in enumerate(chunks):
        message = EmailMessage(
            to=to_address,
            subject=subject_fn(index),
            text_content=chunk,
            html_content=render_html(chunk),
            from_email=from_email,
            from_name=from_name,
        )
        result = await _deliver(provider, message, index)

        if result.succeeded:
            logger.info("Part %d/%d sent (%s)", index + 1, total, result.external_id)
            parts.append(PartOutcome(index=index, success=True, external_id=result.external_id))
        else:
            logger.error("Part %d/%d failed: %s", index + 1, total, result.error_message)
            parts.append(PartOutcome(index=index, success=False, error=result.error_message))
            if stop_on_failure:
                skipped = total - index - 1
                if skipped:
                    logger.warning("Aborting %d unsent part%s", skipped, "" if skipped == 1 else "s")
                return SendOutcome.failure(
                    f"Part {index + 1}/{total} failed: {result.error_message}",
                    parts=parts,
                )

        if index < total - 1:
            delay = schedule.delay_after(index)
            logger.info("Waiting %.0f seconds before part %d", delay, index + 2)
            await sleep(delay)

    failed = [p for p in parts if not p.success]
    if failed:
        summary = "; ".join(f"part {p.index + 1}: {p.error}" for p in failed)
        return SendOutcome.failure(f"{len(failed)} of {total} parts failed ({summary})", parts=parts)

    logger.info("All %d SMS part%s sent to %s", total, "" if total == 1 else "s", to_address)
    return SendOutcome(success=True, parts=parts)
