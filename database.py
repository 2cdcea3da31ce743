import logging

from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

import config
from models.user import User
from models.doctor_profile import DoctorProfile
from models.health_center import HealthCenter
from models.appointment import Appointment
from models.notification import Notification
from models.message import Message
from models.medicine_reminder import MedicineReminder

logger = logging.getLogger(__name__)

DOCUMENT_MODELS = [
    User,
    DoctorProfile,
    HealthCenter,
    Appointment,
    Notification,
    Message,
    MedicineReminder,
]

client = None
database_name = None
# False until init_beanie has succeeded against the current client
ready = False


async def connect_to_mongo(mongo_client=None, name: str = None):
    """Initialise Beanie against ``mongo_client`` (a new Motor client by default)."""
    global client, database_name, ready
    ready = False
    client = mongo_client or AsyncIOMotorClient(
        config.MONGODB_URI,
        serverSelectionTimeoutMS=10000,
        connectTimeoutMS=10000,
        socketTimeoutMS=45000,
        maxPoolSize=10,
    )
    database_name = name or config.DATABASE_NAME
    db = client[database_name]
    await init_beanie(database=db, document_models=DOCUMENT_MODELS)
    ready = True
    logger.info(f"Connected to MongoDB database '{db.name}'")


async def ensure_beanie() -> bool:
    """Retry Beanie initialisation when startup could not reach the server."""
    if ready:
        return True
    if client is None:
        return False
    try:
        await connect_to_mongo(client, database_name)
    except PyMongoError as e:
        logger.warning(f"Beanie initialisation failed: {e}")
        return False
    return True


async def ping_database() -> bool:
    if client is None:
        return False
    try:
        await client.admin.command("ping")
    except PyMongoError as e:
        logger.warning(f"MongoDB ping failed: {e}")
        return False
    return True


def close_mongo_connection():
    global client, ready
    ready = False
    if client is not None:
        client.close()
        client = None
        logger.info("MongoDB connection closed")
