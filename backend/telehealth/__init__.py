import os
import logging
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_bcrypt import Bcrypt
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_restx import Api
from config import DevConfig, ProdConfig

db = SQLAlchemy()
migrate = Migrate()
bcrypt = Bcrypt()
cors = CORS()
limiter = Limiter(key_func=get_remote_address)

def create_app(config_class=None):
    app = Flask(__name__)
    if config_class is None:
        env = os.getenv("FLASK_ENV", "development")
        config_class = ProdConfig if env == "production" else DevConfig
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Extensions
    db.init_app(app)
    migrate.init_app(app, db)
    bcrypt.init_app(app)
    cors.init_app(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}})
    limiter.init_app(app)

    api = Api(
        app,
        version="1.0",
        title="Telehealth API",
        description="Patients, doctors, appointment requests, chat and assistant proxy",
        doc="/api/docs",
    )

    from .errors import register_error_handlers
    register_error_handlers(api)

    from .auth import auth_ns
    from .users import users_ns, doctors_ns, patients_ns
    from .connections import connections_ns, appointments_ns
    from .chat import chat_ns
    from .assistant import assistant_ns, notify_ns

    api.add_namespace(auth_ns, path="/api/auth")
    api.add_namespace(users_ns, path="/api/users")
    api.add_namespace(doctors_ns, path="/api/doctors")
    api.add_namespace(patients_ns, path="/api/patients")
    api.add_namespace(connections_ns, path="/api/connections")
    api.add_namespace(appointments_ns, path="/api/appointments")
    api.add_namespace(chat_ns, path="/api/chat")
    api.add_namespace(assistant_ns, path="/api/assistant")
    api.add_namespace(notify_ns, path="/api/notify")

    return app
