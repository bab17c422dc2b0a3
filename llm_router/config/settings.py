"""Application configuration settings"""

import os
from dotenv import load_dotenv

from llm_router.domain.exceptions import ConfigurationError
from llm_router.domain.value_objects.model_id import ModelId

load_dotenv()

_TRUTHY = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in _TRUTHY


class Config:
    DEBUG = _env_bool("DEBUG", "false")

    # Server
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "3000"))

    # Provider credentials
    OPENAI_KEY = os.getenv("OPENAI_API_KEY", "")
    ANTHROPIC_KEY = os.getenv("ANTHROPIC_API_KEY", "")

    # Provider model names
    GPT35_MODEL_NAME = os.getenv("GPT35_MODEL_NAME", "gpt-3.5-turbo")
    GPT4_MODEL_NAME = os.getenv("GPT4_MODEL_NAME", "gpt-4")
    CLAUDE3_SONNET_MODEL_NAME = os.getenv(
        "CLAUDE3_SONNET_MODEL_NAME", "claude-3-sonnet-20240229"
    )
    CLAUDE3_HAIKU_MODEL_NAME = os.getenv(
        "CLAUDE3_HAIKU_MODEL_NAME", "claude-3-haiku-20240307"
    )
    LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.7"))
    LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "60"))
    LLM_CONNECT_TIMEOUT = float(os.getenv("LLM_CONNECT_TIMEOUT", "10"))

    # Model selection
    DEFAULT_MODEL = os.getenv("DEFAULT_MODEL", ModelId.GPT35.value)
    ROUTER_MODEL = os.getenv("ROUTER_MODEL", ModelId.GPT35.value)
    # True: heuristic weight scoring. False: ask ROUTER_MODEL to name a model.
    USE_OBJECTIVE_SELECTION = _env_bool("USE_OBJECTIVE_SELECTION", "true")

    # Slack
    SLACK_ENABLED = _env_bool("SLACK_ENABLED", "true")
    SLACK_BOT_TOKEN = os.getenv("SLACK_BOT_TOKEN", "")
    SLACK_SIGNING_SECRET = os.getenv("SLACK_SIGNING_SECRET", "")
    SLACK_STREAM_RESPONSES = _env_bool("SLACK_STREAM_RESPONSES", "false")
    SLACK_STREAM_UPDATE_CHARS = int(os.getenv("SLACK_STREAM_UPDATE_CHARS", "200"))

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_PATH = os.getenv("LOG_PATH", "")
    LOG_FORMAT = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s",
    )

    @classmethod
    def validate(cls) -> None:
        """Fail fast on missing credentials or unknown model ids.

        Raises:
            ConfigurationError: listing every problem found
        """
        problems = []
        if not cls.OPENAI_KEY:
            problems.append("OPENAI_API_KEY is not set")
        if not cls.ANTHROPIC_KEY:
            problems.append("ANTHROPIC_API_KEY is not set")
        if cls.SLACK_ENABLED:
            if not cls.SLACK_BOT_TOKEN:
                problems.append("SLACK_BOT_TOKEN is not set")
            if not cls.SLACK_SIGNING_SECRET:
                problems.append("SLACK_SIGNING_SECRET is not set")
        for name in ("DEFAULT_MODEL", "ROUTER_MODEL"):
            value = getattr(cls, name)
            if not ModelId.is_known(value):
                problems.append(f"{name}={value!r} is not a known model id")
        if cls.SLACK_STREAM_UPDATE_CHARS <= 0:
            problems.append("SLACK_STREAM_UPDATE_CHARS must be positive")

        if problems:
            raise ConfigurationError(problems)


class DevelopmentConfig(Config):
    """Development configuration"""

    DEBUG = True


class ProductionConfig(Config):
    """Production configuration"""

    pass


config = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env=None):
    """Get configuration based on environment"""
    if env is None:
        env = os.getenv("APP_ENV", "development")
    return config.get(env, config["default"])
