from typing import Optional

from flask import Flask

from configs import db, Settings, configure_logging
from blueprint import blue_print


def create_app(config: Optional[dict] = None) -> Flask:
    settings = Settings.from_env()

    app = Flask(__name__)
    app.config.update(settings.to_flask_config())
    if config:
        app.config.update(config)

    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        raise RuntimeError("DATABASE_URL is not set. Check your .env")

    configure_logging(app.config["LOG_LEVEL"], app.config.get("LOG_FILE"))
    app.secret_key = app.config["SECRET_KEY"]

    db.init_app(app)
    from db import models  # noqa: F401  registers tables on db.metadata

    blue_print(app)
    return app


if __name__ == "__main__":
    create_app().run(debug=True, host="0.0.0.0", port=5000)
