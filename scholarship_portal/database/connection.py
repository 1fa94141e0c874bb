import re
import logging
import motor.motor_asyncio
from beanie import init_beanie
from scholarship_portal.database.models import ScholarshipApplication
from scholarship_portal.core import settings

logger = logging.getLogger(__name__)


def _mask_mongo_uri(uri: str) -> str:
    # Never log full connection URIs, they may contain credentials.
    m = re.match(r'(?P<prefix>mongodb(?:\+srv)?://)(?:(?P<creds>[^@]+)@)?(?P<rest>.+)', uri or "")
    if not m:
        return "mongodb://<redacted>"
    host_part = m.group('rest').split('/')[0]
    return f"{m.group('prefix')}***@{host_part}"


async def init_db():
    try:
        mongodb_uri = settings.MONGODB_URI
        mongodb_db_name = settings.MONGODB_DB_NAME

        if not mongodb_uri:
            logger.error("MONGODB_URI is not set in environment variables")
            raise ValueError("MONGODB_URI is not set in environment variables")
        if not mongodb_db_name:
            logger.error("MONGODB_DB_NAME is not set in environment variables")
            raise ValueError("MONGODB_DB_NAME is not set in environment variables")

        logger.info(f"Attempting to connect to MongoDB at: {_mask_mongo_uri(mongodb_uri)}")
        logger.info("Database name: %s", mongodb_db_name)

        client = motor.motor_asyncio.AsyncIOMotorClient(
            mongodb_uri,
            serverSelectionTimeoutMS=30000,
            connectTimeoutMS=30000,
            socketTimeoutMS=30000,
            retryWrites=True,
            w='majority'
        )

        logger.info("Testing MongoDB connection...")
        await client.admin.command('ping')
        logger.info("Successfully connected to MongoDB!")

        database = client[mongodb_db_name]

        # Creates the unique tracking_id index on first start
        logger.info("Initializing Beanie with document models...")
        await init_beanie(database, document_models=[ScholarshipApplication])
        logger.info("Beanie initialized successfully!")

        return database

    except ValueError as e:
        logger.error(f"Configuration error: {str(e)}")
        raise RuntimeError(f"Configuration error: {str(e)}") from e
    except Exception as e:
        logger.error(f"Database initialization failed: {str(e)}")
        logger.error(f"Exception type: {type(e)}")
        raise
