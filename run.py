#!/usr/bin/env python3
"""
Application Entry Script.

Development entry point for call_api_check. Installed environments use the
`call_api_check` console script instead; both run the same main().

Usage:
    python run.py --help
    python run.py -c Invoke-IcingaCheckCPU -- -Warning 80 -Critical 90
    python run.py -c Invoke-IcingaCheckCPU --insecure --timeout 30 -- -NoPerfData
"""

import sys
from pathlib import Path

# Ensure project root is in path for absolute imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from call_api_check.cli.main import main

if __name__ == "__main__":
    main()
