#!/usr/bin/env python3
"""
Startup script for the OfficeFlow command-line client.
Equivalent to the installed `officeflow` command.
"""
import sys

from officeflow.cli import main

if __name__ == "__main__":
    sys.exit(main())
