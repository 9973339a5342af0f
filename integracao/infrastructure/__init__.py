# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Infrastructure layer.

- database: Mapping store, connections and transaction scopes
- platform: Learning platform clients
"""
