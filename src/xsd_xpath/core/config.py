#!/usr/bin/env python3
"""
Configuration settings for schema traversal and export.

Every value can be overridden via environment variables so the CLI and the
API share one set of defaults per deployment.
"""

import logging

from .env_utils import getenv_bool, getenv_clean, getenv_int, getenv_list

logger = logging.getLogger(__name__)


class ExportConfig:
    """XPath export and dependency graph configuration.

    Values are read from the environment when an instance is created.
    """

    def __init__(self):
        # Element/attribute names whose branch is left out of the CSV
        self.SKIP_NODES = getenv_list("XPATH_EXPORT_SKIP_NODES")

        # Extra declaration attributes exported as columns, e.g. annotation:deprecated
        self.ADDITIONAL_ATTRIBUTES = getenv_list("XPATH_EXPORT_ADDITIONAL_ATTRIBUTES")

        # Traverse named model groups as dependency roots
        self.EXPAND_GROUPS = getenv_bool("XPATH_EXPORT_EXPAND_GROUPS", False)

        # Fail on dependency cycles instead of breaking them silently
        self.STRICT_SORT = getenv_bool("XPATH_EXPORT_STRICT_SORT", False)

        # Upload limit per request; schema uploads often include many referenced XSD files
        self.MAX_SCHEMA_FILES = getenv_int("XPATH_EXPORT_MAX_SCHEMA_FILES", 150)

        # Total upload size limit in megabytes
        self.MAX_SCHEMA_FILE_SIZE_MB = getenv_int("MAX_SCHEMA_FILE_SIZE_MB", 20)

        self.LOG_LEVEL = (getenv_clean("LOG_LEVEL", "INFO") or "INFO").upper()


# Singleton instance
export_config = ExportConfig()
