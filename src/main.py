import logging
import sys
from config.settings import LOG_LEVEL
from database.db import init_db, SessionLocal
from database.repository import PayrollRepository
from database.seed import seed_sample_data
from processors.payroll_report import PayrollReportBuilder
from processors.payroll_report_generator import PayrollReportGenerator

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def main(argv=None):
    """Initialize the database and optionally build the payroll of a period"""
    argv = sys.argv[1:] if argv is None else argv
    logger.info("Starting payroll settlement system")

    # Initialize database
    logger.info("Initializing database...")
    init_db()

    db = SessionLocal()
    try:
        repo = PayrollRepository(db)
        if seed_sample_data(repo):
            logger.info("Database was empty, sample data loaded")

        if argv:
            report = PayrollReportBuilder(repo).build(argv[0])
            filepath = PayrollReportGenerator().generate(report)
            logger.info("Payroll report for %s written to %s", report.period, filepath)
            for failure in report.failures:
                logger.warning("Excluded %s (%s): %s", failure.employee_ref, failure.kind, failure.message)
    finally:
        db.close()

    logger.info("System initialized successfully")


if __name__ == "__main__":
    main()
