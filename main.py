#!/usr/bin/env python3
"""
Organization Repository Summary Engine - Main Entry Point

Summarizes a batch of repository records for one organization:
language and topic aggregates, topic clusters, contributor overlap,
and inferred relationships between repositories.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from orgscan.cli import main

if __name__ == "__main__":
    main()
