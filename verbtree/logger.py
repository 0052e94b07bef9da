# verbtree — (c) 2025 rtj.dev LLC — MIT Licensed
"""Global logger instance for verbtree."""
import logging

logger: logging.Logger = logging.getLogger("verbtree")
