# lambda_handler.py
# AWS Lambda handlers for the test submission endpoint

from mangum import Mangum
import os
import json
import logging

from core.api import app as submission_app
from core.handler import CORS_HEADERS

logger = logging.getLogger(__name__)

# Wrap FastAPI app with Mangum for Lambda compatibility
submission_handler = Mangum(submission_app, lifespan="off")

# Lambda handlers
def submit(event, context):
    """
    Lambda handler for the submission endpoint
    Handles POST/OPTIONS on /submit and /api/submit
    """
    try:
        return submission_handler(event, context)
    except Exception as e:
        logger.exception("Unhandled error in submission handler")
        return {
            "statusCode": 500,
            "body": json.dumps({
                "error": "Internal server error",
                "message": str(e)
            }),
            "headers": {
                "Content-Type": "application/json",
                **CORS_HEADERS
            }
        }

# Health check handler
def health_check(event, context):
    """
    Simple health check endpoint
    """
    return {
        "statusCode": 200,
        "body": json.dumps({
            "status": "healthy",
            "service": "Test Submission Notifier",
            "version": "1.0.0",
            "environment": os.getenv("AWS_LAMBDA_FUNCTION_NAME", "local")
        }),
        "headers": {
            "Content-Type": "application/json",
            **CORS_HEADERS
        }
    }
