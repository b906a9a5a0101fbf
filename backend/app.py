import logging
from telehealth import create_app, db

logger = logging.getLogger(__name__)

app = create_app()


if __name__ == '__main__':
    # Create tables for local development (use Flask-Migrate elsewhere)
    with app.app_context():
        db.create_all()
        logger.info("Tables created")

    app.run(debug=app.config.get("DEBUG", False))
