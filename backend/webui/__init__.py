"""
Browser renderer for the Snake server: the page, script and stylesheet
served by app.py.
"""

import os

STATIC_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "static")
