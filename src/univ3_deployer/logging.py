"""
Package-global logger writing to stderr. It does not propagate to the root logger, so adjust the
level or handlers on `univ3_deployer.logging.logger` directly.
"""

import logging

logger = logging.getLogger("univ3_deployer")
logger.propagate = False
logger.setLevel(logging.INFO)
logger.addHandler(logging.StreamHandler())
