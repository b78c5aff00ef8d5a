# config.py
from dotenv import load_dotenv
import logging
import os
from typing import Optional

from errors import ConfigurationError
from models import CosmosSecrets, Settings

load_dotenv()

# Azure Cosmos DB configuration
COSMOS_AUTH_TOKEN_ENV = "COSMOS_AUTH_TOKEN"
COSMOS_ACCOUNT_NAME_ENV = "COSMOS_ACCOUNT_NAME"
COSMOS_ENDPOINT_ENV = "COSMOS_ENDPOINT"

# Web server configuration
PORT_ENV = "COSMOS_SAMPLE_PORT"
HOST_ENV = "COSMOS_SAMPLE_HOST"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
logger = logging.getLogger("Config")


def _require(name):
    value = os.getenv(name)
    if not value:
        raise ConfigurationError(f"Set env variable {name} first!", variable=name)
    return value


def get_cosmos_secrets() -> CosmosSecrets:
    """Load the Cosmos secrets from the environment, failing on the first missing one"""
    token = _require(COSMOS_AUTH_TOKEN_ENV)
    account = _require(COSMOS_ACCOUNT_NAME_ENV)
    return CosmosSecrets(token=token, account=account)


def account_endpoint(account: str) -> str:
    return f"https://{account}.documents.azure.com:443/"


def get_port() -> Optional[int]:
    """The listen port from the environment, None when unset"""
    raw = os.getenv(PORT_ENV)
    if not raw:
        return None
    try:
        port = int(raw)
    except ValueError:
        raise ConfigurationError(f"{PORT_ENV} must be an integer, got '{raw}'", variable=PORT_ENV)
    if not 0 < port < 65536:
        raise ConfigurationError(f"{PORT_ENV} out of range: {port}", variable=PORT_ENV)
    return port


def load_settings() -> Settings:
    """
    Build the service settings once at startup.

    Raises:
        ConfigurationError: a required variable is missing or malformed
    """
    secrets = get_cosmos_secrets()
    endpoint = os.getenv(COSMOS_ENDPOINT_ENV) or account_endpoint(secrets.account)
    # Host, port and names fall back to the Settings defaults
    overrides = {}
    host = os.getenv(HOST_ENV)
    if host:
        overrides["host"] = host
    port = get_port()
    if port is not None:
        overrides["port"] = port
    settings = Settings(secrets=secrets, endpoint=endpoint, **overrides)
    logger.info(f"Secrets found. Account: {secrets.account}")
    logger.info(f"Using endpoint {settings.endpoint}, listening on {settings.host}:{settings.port}")
    return settings
