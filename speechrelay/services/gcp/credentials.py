"""
Google credential path normalization.

Google client libraries read GOOGLE_APPLICATION_CREDENTIALS from the process
environment. Settings may hold a path relative to the repository or to a
container layout, so resolve it before the first client is built.
"""

import logging
import os
from typing import Optional

from speechrelay.config.settings import settings

logger = logging.getLogger(__name__)


def ensure_credentials(creds_path: Optional[str] = None) -> Optional[str]:
    """Ensure Google credentials are set in environment.

    Returns the path exported (or already present), None when unconfigured.
    """
    if "GOOGLE_APPLICATION_CREDENTIALS" in os.environ:
        return os.environ["GOOGLE_APPLICATION_CREDENTIALS"]

    creds_path = creds_path or settings.GOOGLE_APPLICATION_CREDENTIALS
    if not creds_path:
        return None

    if not os.path.isabs(creds_path):
        creds_path = os.path.abspath(creds_path)

    if not os.path.exists(creds_path):
        possible_paths = [
            os.path.join(os.getcwd(), "config", os.path.basename(creds_path)),
            os.path.join(os.getcwd(), "speechrelay", "config", os.path.basename(creds_path)),
        ]
        for path in possible_paths:
            if os.path.exists(path):
                creds_path = path
                break
        else:
            logger.warning(f"Google credentials file not found: {creds_path}")

    os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = creds_path
    return creds_path
