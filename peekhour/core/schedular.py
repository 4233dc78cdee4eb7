import logging
from datetime import datetime, timezone

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from peekhour.core.database import SessionLocal
from peekhour.models.user_ban import UserBan

logger = logging.getLogger(__name__)


def expire_bans():
    """
    Scheduled task that lifts temporary bans whose expiry has passed.
    Bans are already ignored once expired; this keeps ``is_active`` honest
    for listings and the moderation dashboard.
    """
    db = SessionLocal()
    try:
        lifted = (
            db.query(UserBan)
            .filter(
                UserBan.is_active == True,
                UserBan.expires_at.isnot(None),
                UserBan.expires_at <= datetime.now(timezone.utc),
            )
            .update({UserBan.is_active: False}, synchronize_session=False)
        )
        db.commit()
        if lifted:
            logger.info(f"Ban expiry: lifted {lifted} expired bans")
    except Exception as e:
        db.rollback()
        logger.error(f"Error during ban expiry: {e}", exc_info=True)
    finally:
        db.close()


def start_scheduler():
    """
    Initialize and start the APScheduler for housekeeping jobs.
    """
    scheduler = AsyncIOScheduler()

    scheduler.add_job(
        expire_bans,
        trigger=IntervalTrigger(minutes=15),
        id="expire_bans",
        name="Lift expired user bans",
        replace_existing=True,
    )

    scheduler.start()
    logger.info("Scheduler started. Ban expiry runs every 15 minutes.")

    return scheduler


def shutdown_scheduler(scheduler: AsyncIOScheduler):
    """
    Gracefully shutdown the scheduler.
    """
    if scheduler:
        scheduler.shutdown()
        logger.info("Scheduler shut down.")
