# tests/conftest.py
# Ensure the project root (the folder that contains 'jenkinsweave' and 'tests')
# is on sys.path so `import jenkinsweave` works without installing the package.

import sys
import pathlib

ROOT = pathlib.Path(__file__).resolve().parents[1]
ROOT_STR = str(ROOT)

if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)
