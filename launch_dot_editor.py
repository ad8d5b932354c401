#!/usr/bin/env python3
"""Convenience launcher for the dot editor from root directory"""

import os
import sys

# Make the dot_editor package importable without installing it
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from dot_editor.core.dot_editor_window import main  # noqa: E402

if __name__ == "__main__":
    main()
