import logging

from cpq import create_app

app = create_app()

if __name__ == "__main__":
    port = app.config["PORT"]
    logging.info("API running on port %s", port)
    app.run(host="0.0.0.0", port=port)
