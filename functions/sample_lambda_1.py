import os, json, logging
from greetings import greeting

logger = logging.getLogger()
logger.setLevel(os.getenv("LOG_LEVEL", "INFO"))

def handler(event, context):
    logger.info("Event: %s", json.dumps(event, default=str))
    return greeting(event, "Hello from sample-lambda-1!")
