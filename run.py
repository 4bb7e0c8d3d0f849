"""
Development Launcher
====================
Runs the calculator from a source checkout, no install needed.

    $ python run.py            # normal start
    $ python run.py --debug    # same as POCKETCALC_LOG_LEVEL=DEBUG

The 'src' directory is put on 'sys.path' before the package is imported, and
'--debug' is turned into the environment variable that `pocketcalc.config`
reads at import time.
"""
import os
import sys

SRC_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'src')
WINDOWS_APP_ID = 'pocketcalc.Calc'


def _register_windows_app_id() -> None:
    # Groups the taskbar entry under our own icon instead of python.exe
    if sys.platform != 'win32':
        return
    import ctypes
    ctypes.windll.shell32.SetCurrentProcessExplicitAppUserModelID(WINDOWS_APP_ID)


def launch(argv: list[str]) -> None:
    if '--debug' in argv:
        argv.remove('--debug')
        os.environ['POCKETCALC_LOG_LEVEL'] = 'DEBUG'

    if SRC_DIR not in sys.path:
        sys.path.insert(0, SRC_DIR)
    _register_windows_app_id()

    from pocketcalc.main import main
    main()


if __name__ == "__main__":
    launch(sys.argv)
