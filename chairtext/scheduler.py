"""Daily digest scheduler.

Run as its own process:
    python -m chairtext.scheduler --appointments-file appointments.json
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from datetime import date, datetime
from zoneinfo import ZoneInfo

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED, JobExecutionEvent
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from .appointments import AppointmentSource, JsonFileAppointmentSource, build_digest
from .config import (
    directory_from_env,
    ledger_from_env,
    notifier_config_from_env,
    provider_from_env,
    schedule_config_from_env,
)
from .notifier import SMSNotifier
from .types import DigestScheduleConfig, SendOutcome

JOB_ID = "daily_digest"

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Configure process-wide logging for scheduler mode."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def today_in(timezone: str) -> date:
    return datetime.now(tz=ZoneInfo(timezone)).date()


async def run_daily_digest(
    notifier: SMSNotifier,
    source: AppointmentSource,
    *,
    day: date,
    skip_empty_days: bool = True,
) -> SendOutcome | None:
    """Fetch ``day``'s appointments and text the digest.

    Returns None when nothing was attempted (fetch failed, or an empty day
    was skipped). Failures are logged; the next attempt is the next
    scheduled run.
    """
    try:
        rows = await source.appointments_for(day)
        digest = build_digest(rows)
    except Exception:
        logger.exception("Failed to fetch appointments for %s daily digest", day.isoformat())
        return None

    count = digest.appointment_count
    if count == 0 and skip_empty_days:
        logger.info("No appointments scheduled for %s, skipping digest", day.isoformat())
        return None

    outcome = await notifier.send_daily_digest(digest, for_date=day)
    if outcome.success:
        logger.info("Daily digest sent: %d appointment%s for %s", count, "" if count == 1 else "s", day.isoformat())
    elif outcome.skipped:
        logger.info("Daily digest for %s was already sent", day.isoformat())
    else:
        logger.error("Failed to send daily digest for %s: %s", day.isoformat(), outcome.error)
    return outcome


def _log_job_state(scheduler: AsyncIOScheduler, event: JobExecutionEvent, tz: ZoneInfo) -> None:
    """Log last and next run metadata for observability."""
    job = scheduler.get_job(event.job_id)
    job_next_run = getattr(job, "next_run_time", None) if job else None
    next_run = job_next_run.isoformat() if job_next_run else "none"
    last_run_at = (
        event.scheduled_run_time.astimezone(tz).isoformat()
        if event.scheduled_run_time
        else datetime.now(tz=tz).isoformat()
    )

    if event.exception:
        logger.error(
            "Job %s failed at %s; next run at %s",
            event.job_id,
            last_run_at,
            next_run,
            exc_info=event.exception,
        )
        return

    logger.info("Job %s completed at %s; next run at %s", event.job_id, last_run_at, next_run)


def build_scheduler(
    notifier: SMSNotifier,
    source: AppointmentSource,
    schedule: DigestScheduleConfig = DigestScheduleConfig(),
) -> AsyncIOScheduler:
    """Build the scheduler with the daily digest job registered."""
    tz = ZoneInfo(schedule.timezone)
    scheduler = AsyncIOScheduler(timezone=tz)

    async def daily_digest_job() -> None:
        await run_daily_digest(
            notifier,
            source,
            day=today_in(schedule.timezone),
            skip_empty_days=schedule.skip_empty_days,
        )

    trigger = CronTrigger(hour=schedule.hour, minute=schedule.minute, timezone=tz)
    scheduler.add_job(
        daily_digest_job,
        trigger=trigger,
        id=JOB_ID,
        replace_existing=True,
        coalesce=True,
        misfire_grace_time=1800,
    )

    scheduler.add_listener(
        lambda event: _log_job_state(scheduler, event, tz),
        EVENT_JOB_EXECUTED | EVENT_JOB_ERROR,
    )

    next_run = trigger.get_next_fire_time(None, datetime.now(tz=tz))
    logger.info(
        "Registered %s for %02d:%02d %s (next run: %s)",
        JOB_ID,
        schedule.hour,
        schedule.minute,
        tz.key,
        next_run.isoformat() if next_run else "none",
    )
    return scheduler


def _build_notifier() -> SMSNotifier:
    return SMSNotifier(
        notifier_config_from_env(),
        provider_from_env(),
        directory=directory_from_env(),
        ledger=ledger_from_env(),
    )


async def _serve(notifier: SMSNotifier, source: AppointmentSource, schedule: DigestScheduleConfig) -> None:
    scheduler = build_scheduler(notifier, source, schedule)
    scheduler.start()
    logger.info("Starting scheduler process")
    try:
        await asyncio.Event().wait()
    finally:
        scheduler.shutdown(wait=False)


def main(argv: list[str] | None = None) -> None:
    """Entrypoint for a dedicated scheduler process."""
    parser = argparse.ArgumentParser(description="Run the daily appointment digest scheduler")
    parser.add_argument(
        "--appointments-file",
        required=True,
        help="JSON list of {date, time, clientName} rows",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Send today's digest immediately and exit (manual mode)",
    )
    args = parser.parse_args(argv)

    configure_logging()

    notifier = _build_notifier()
    source = JsonFileAppointmentSource(args.appointments_file)
    schedule = schedule_config_from_env()

    if args.once:
        logger.info("Running in manual mode: executing %s once", JOB_ID)
        asyncio.run(
            run_daily_digest(
                notifier,
                source,
                day=today_in(schedule.timezone),
                skip_empty_days=False,
            )
        )
        logger.info("Manual execution of %s completed", JOB_ID)
        return

    try:
        asyncio.run(_serve(notifier, source, schedule))
    except (KeyboardInterrupt, SystemExit):
        logger.info("Scheduler stopped")


if __name__ == "__main__":
    main()
