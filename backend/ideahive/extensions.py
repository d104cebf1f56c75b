from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager
from pymongo import MongoClient

db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()


class Mongo:
    """
    Holds the document-store client for an application.

    A ready client may be passed in (tests hand over a mongomock client);
    otherwise one is built from MONGO_URI with bounded timeouts.
    """

    def __init__(self):
        self.client = None
        self.db = None

    def init_app(self, app, client=None):
        if client is None:
            timeout_ms = app.config["MONGO_TIMEOUT_MS"]
            client = MongoClient(
                app.config["MONGO_URI"],
                serverSelectionTimeoutMS=timeout_ms,
                socketTimeoutMS=timeout_ms,
                tz_aware=True,
            )

        self.client = client
        self.db = client[app.config["MONGO_DB_NAME"]]
        app.extensions["mongo"] = self


mongo = Mongo()
