# SPDX-FileCopyrightText: 2025 RealTimeX
# SPDX-License-Identifier: MPL-2.0
from langrelay.cli import main

if __name__ == "__main__":
    main()
