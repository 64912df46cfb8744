"""Launcher for ``streamlit run ui/app.py``.

Streamlit executes this file as a script, so the project root is put on the
path before the package is imported.
"""

import os
import sys

# Add the project root to the Python path to import contactbook modules
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from contactbook.ui.app import main

main()
