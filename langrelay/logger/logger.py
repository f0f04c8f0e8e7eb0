# SPDX-FileCopyrightText: 2025 RealTimeX
# SPDX-License-Identifier: MPL-2.0
import logging



# Create logger object
global_logger = logging.getLogger("langrelay")
global_logger.setLevel(logging.INFO)
# Output to console
console_handler = logging.StreamHandler()
console_handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
global_logger.addHandler(console_handler)


def set_log_level(level: str | int) -> None:
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    global_logger.setLevel(level)
