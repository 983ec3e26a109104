#!/usr/bin/env python3
"""
Launcher script for SaltedAES.
Run this script to use the command line tool without installing it.
"""

import sys
import os

# Add the current directory to Python path so we can import saltedaes
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

# Import and run the main function
from saltedaes.main import main

if __name__ == "__main__":
    raise SystemExit(main())
