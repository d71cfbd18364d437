#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Allow running sm-ssh-add as ``python -m sm_ssh_add``."""

from __future__ import annotations

from sm_ssh_add.cli import main

if __name__ == "__main__":
    main()

# 🔑🏦🔚
