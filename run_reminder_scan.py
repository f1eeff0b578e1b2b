"""
Due-Service Reminder Runner
Runs one reminder scan outside the ARQ scheduler: python run_reminder_scan.py
"""

import logging
import sys

from roservice.config import DATABASE_URL
from roservice.database import Database
from roservice.email_service import Mailer
from roservice.services.notification_service import NotificationService
from roservice.services.reminder_service import send_due_service_reminders

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


def main() -> int:
    database = Database(DATABASE_URL)
    database.create_all()
    mailer = Mailer()
    try:
        with database.session() as db:
            summary = send_due_service_reminders(db, NotificationService(db, mailer))
        logger.info(f"✅ Reminder scan finished: {summary}")
        return 0
    finally:
        mailer.close()
        database.dispose()


if __name__ == "__main__":
    logger.info("🚀 Starting due-service reminder scan...")
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        logger.info("👋 Reminder scan stopped by user")
    except Exception as e:
        logger.error(f"❌ Reminder scan crashed: {e}")
        sys.exit(1)
