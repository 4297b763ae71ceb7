"""
UTC timestamp logging formatter for pkgs.

Prefixes every log entry with a UTC timestamp in square brackets so that
entries from runs on hosts in different time zones line up in a shared log.
"""

import datetime
import logging


class UTCTimestampFormatter(logging.Formatter):
    """
    Logging formatter that adds UTC timestamps in square brackets.

    Format: [YYYY-MM-DD HH:MM:SS.sss UTC] <formatted record>
    """

    def format(self, record):
        utc_now = datetime.datetime.fromtimestamp(
            record.created, tz=datetime.timezone.utc
        )
        timestamp = utc_now.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        return f"[{timestamp} UTC] {super().format(record)}"
