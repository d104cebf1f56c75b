import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(app):
    level = app.config.get("LOG_LEVEL", "INFO")

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler()]
    )
    logging.getLogger("ideahive").setLevel(level)
    app.logger.setLevel(level)
