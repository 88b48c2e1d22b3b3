"""
Entry Point Script (Bootstrap)
==============================
Development runner for the viewer without installing the package.

Why is this file needed?
------------------------
1. It sits outside 'src' so the viewer can be started from a checkout.
2. It puts 'src' on 'sys.path' so 'modelviewport' imports resolve.

Usage:
    $ python run.py [model] [--headless]
"""
import sys
import os

current_dir: str = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, os.path.join(current_dir, 'src'))

# Own taskbar icon group on Windows
appid = 'ModelViewport.Viewer'
if sys.platform == "win32":
    import ctypes
    ctypes.windll.shell32.SetCurrentProcessExplicitAppUserModelID(appid)

from modelviewport.main import main

if __name__ == "__main__":
    main()
