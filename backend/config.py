import os
import datetime
from dotenv import load_dotenv

load_dotenv()

class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///telehealth.sqlite")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_ACCESS_TOKEN_EXPIRES = datetime.timedelta(hours=24)

    # flask-restx: error payloads are built by our own handlers
    ERROR_INCLUDE_MESSAGE = False
    RESTX_ERROR_404_HELP = False

    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # AgentForce (Salesforce Einstein agent API)
    SF_ORG_DOMAIN = os.getenv("SF_ORG_DOMAIN")
    SF_API_HOST = os.getenv("SF_API_HOST")
    SF_CLIENT_ID = os.getenv("SF_CLIENT_ID")
    SF_CLIENT_SECRET = os.getenv("SF_CLIENT_SECRET")
    SF_AGENT_ID = os.getenv("SF_AGENT_ID")

    SLACK_WEBHOOK_URL = os.getenv("SLACK_WEBHOOK_URL")
    EXTERNAL_HTTP_TIMEOUT = float(os.getenv("EXTERNAL_HTTP_TIMEOUT", "30"))

class DevConfig(Config):
    DEBUG = True

class ProdConfig(Config):
    DEBUG = False

class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    RATELIMIT_ENABLED = False
    SF_ORG_DOMAIN = "https://org.example.test"
    SF_API_HOST = "https://api.example.test"
    SF_CLIENT_ID = "client-id"
    SF_CLIENT_SECRET = "client-secret"
    SF_AGENT_ID = "agent-1"
    SLACK_WEBHOOK_URL = "https://hooks.example.test/services/T000/B000"
