# SPDX-FileCopyrightText: 2025 RealTimeX
# SPDX-License-Identifier: MPL-2.0
from langrelay.logger.logger import global_logger, set_log_level

__all__ = ["global_logger", "set_log_level"]
