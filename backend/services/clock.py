"""
Local time helpers - timestamps are reported in the site's timezone
"""
import os
from datetime import datetime

import pytz

LOCAL_TZ = pytz.timezone(os.getenv("APP_TIMEZONE", "Asia/Dubai"))


def get_local_now():
    """Current time in the site's timezone"""
    return datetime.now(LOCAL_TZ)
