import os
import sys

HERE = os.path.dirname(__file__)
ROOT_DIR = os.path.abspath(os.path.join(HERE, ".."))

if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)
