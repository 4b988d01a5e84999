from dotenv import load_dotenv
from flask import Flask

# wczytanie .env (dev-friendly) – przed importem Config, bo ten czyta os.environ
load_dotenv()
# Dodatkowe lokalne zmienne (niecommitowalne) – .env.local nadpisuje tylko brakujące wartości
load_dotenv(dotenv_path=".env.local", override=False)

from core.config import Config  # noqa: E402
from core.logging_config import configure_logging  # noqa: E402
from interface.api import api_bp  # noqa: E402


def create_app(config_object=Config, **overrides) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.config.update(overrides)

    configure_logging(app)

    # rejestracja blueprintów
    app.register_blueprint(api_bp)

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=True)
