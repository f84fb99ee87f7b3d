"""
Startup validation utilities to check configuration before serving requests.

Missing Supabase settings are critical: every DAO, proposal and wallet
route reads from the database. Upstream API settings only disable the
routes that need them, so they are reported as warnings.
"""

import os
import sys
from typing import List

from src.config.settings import STACKS_NETWORK, get_cache_url, is_testnet
from src.utils.logger import logger

SUPPORTED_NETWORKS = ("mainnet", "testnet")


class StartupValidator:
    """Startup validation for the dashboard API."""

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def validate_all(self) -> bool:
        """
        Run all validation checks.

        Returns:
            True if all critical checks pass, False otherwise.
        """
        logger.info("StartupValidator: Beginning configuration validation")

        # Critical validations (must pass)
        self._validate_environment_variables()
        self._validate_network()

        # Non-critical validations (warnings only)
        self._validate_upstream_config()
        self._validate_optional_config()

        self._report_results()

        return len(self.errors) == 0

    def _validate_environment_variables(self) -> None:
        required_vars = ["SUPABASE_URL", "SUPABASE_ANON_KEY"]
        missing_vars = [var for var in required_vars if not os.environ.get(var)]

        if missing_vars:
            self.errors.append(f"Missing required environment variables: {', '.join(missing_vars)}")
        else:
            logger.info("StartupValidator: Environment variables validation passed")

    def _validate_network(self) -> None:
        if STACKS_NETWORK not in SUPPORTED_NETWORKS:
            self.errors.append(
                f"STACKS_NETWORK must be one of {', '.join(SUPPORTED_NETWORKS)}, got '{STACKS_NETWORK}'"
            )

    def _validate_upstream_config(self) -> None:
        """Upstream services each back a subset of routes."""
        if not os.environ.get("HIRO_API_KEY"):
            self.warnings.append("HIRO_API_KEY not set: Hiro API requests will be rate limited")

        if not get_cache_url(STACKS_NETWORK):
            cache_var = "CACHE_URL_TESTNET" if is_testnet(STACKS_NETWORK) else "CACHE_URL"
            self.warnings.append(f"{cache_var} not set: cached proposal votes are unavailable")

        if not os.environ.get("API_URL"):
            self.warnings.append("API_URL not set: the tool catalog is unavailable")

    def _validate_optional_config(self) -> None:
        optional_configs = {
            "ALLOWED_ORIGINS": "CORS configuration (defaults to http://localhost:3000)",
            "WEBSOCKET_URL": "Chat websocket (defaults to ws://localhost:8000/chat/ws)",
            "BLOCK_TIME_CACHE_SECONDS": "Block time cache TTL (defaults to 600s)",
            "BALANCE_CACHE_SECONDS": "Wallet balance cache TTL (defaults to 1200s)",
        }

        for var, description in optional_configs.items():
            if not os.environ.get(var):
                self.warnings.append(f"Optional config {var} not set: {description}")

    def _report_results(self) -> None:
        if self.errors:
            logger.error("StartupValidator: %d critical errors found:", len(self.errors))
            for error in self.errors:
                logger.error("  - %s", error)

        if self.warnings:
            logger.warning("StartupValidator: %d warnings found:", len(self.warnings))
            for warning in self.warnings:
                logger.warning("  - %s", warning)

        if not self.errors and not self.warnings:
            logger.info("StartupValidator: All validation checks passed successfully")
        elif not self.errors:
            logger.info("StartupValidator: Critical validation passed with %d warnings", len(self.warnings))


def validate_startup() -> bool:
    """
    Run startup validation and return success status.

    Returns:
        True if validation passes, False if critical errors found.
    """
    validator = StartupValidator()
    return validator.validate_all()


def validate_or_exit() -> None:
    """Run startup validation and exit if critical errors are found."""
    if not validate_startup():
        logger.error("StartupValidator: Critical validation errors found. Exiting.")
        sys.exit(1)

    logger.info("StartupValidator: System validation completed successfully")


if __name__ == "__main__":
    validate_or_exit()
