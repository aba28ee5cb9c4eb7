"""Logging configuration for Searchwise."""

import logging
import sys
from typing import Optional

from src.core.config import Settings, settings as default_settings


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Configure structured logging for the application."""
    settings = settings or default_settings
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=log_format,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)


def log_provider_keys(settings: Settings) -> None:
    """Report which provider API keys were found at startup.

    Keys are not validated here; a missing key only fails on first use.
    """
    logger = logging.getLogger(__name__)
    logger.info(f"SerpAPI key: {'Loaded' if settings.serp_api_key else 'Missing'}")
    logger.info(f"OpenAI API key: {'Loaded' if settings.openai_api_key else 'Missing'}")
    if settings.llm_provider.lower() == "gemini":
        logger.info(
            f"Gemini API keys: {len(settings.gemini_api_keys) or 'Missing'}"
        )
