"""
main.py

Flask entry point for the file broker.

Dependencies:
  - Python packages: Flask, flask-restx, flask-cors, redis, celery, PyJWT,
    boto3 or google-cloud-storage
  - Infrastructure: Redis server, an S3-compatible store or a GCS bucket

Notes:
  - API v1 endpoints available at /api/v1/ with Swagger docs at /api/v1/docs
  - Uses application factory pattern for better testability
"""

import logging
import os

from file_broker.app_factory import create_app
from file_broker.config.settings import AppConfig

config = AppConfig()

logging.basicConfig(
    level=getattr(logging, config.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = create_app(config)

if __name__ == "__main__":
    host = os.getenv("FLASK_HOST", "0.0.0.0")
    port = int(os.getenv("FLASK_PORT", 8000))
    debug = os.getenv("FLASK_DEBUG", "false").lower() == "true"

    app.run(host=host, port=port, debug=debug)
