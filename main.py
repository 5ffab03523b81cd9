#!/usr/bin/env python3
"""IPTV Viewer - a live IPTV player built with Python Flet."""
from iptv_viewer.app import run


if __name__ == "__main__":
    run()
