#!/usr/bin/env python3
"""
HTML Translator - Launcher
==========================
Start the server and open the translator in the default browser.

Usage:
    python run.py
    python -m html_translator
"""
import sys
import os
import threading
import time
import webbrowser
from pathlib import Path

package_dir = Path(__file__).parent
if str(package_dir) not in sys.path:
    sys.path.insert(0, str(package_dir))

if getattr(sys, 'frozen', False):
    BUNDLE_DIR = sys._MEIPASS
    APP_DIR = os.path.dirname(sys.executable)
else:
    BUNDLE_DIR = str(package_dir)
    APP_DIR = BUNDLE_DIR

# Must be set before html_translator.config is imported
os.environ['HTML_TRANSLATOR_APP_DIR'] = APP_DIR
os.environ['HTML_TRANSLATOR_BUNDLE_DIR'] = BUNDLE_DIR


class Colors:
    RESET = '\033[0m'
    BOLD = '\033[1m'
    RED = '\033[91m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    CYAN = '\033[96m'


def print_banner(app_url: str):
    print(f"\n{Colors.CYAN}{'='*60}{Colors.RESET}")
    print(f"{Colors.BOLD}{Colors.GREEN}  BULK HTML TRANSLATOR{Colors.RESET}")
    print(f"{Colors.CYAN}{'='*60}{Colors.RESET}")
    print(f"  Server: {app_url}")
    print(f"  Working Directory: {os.getcwd()}")
    print(f"{Colors.CYAN}{'='*60}{Colors.RESET}\n")


def check_gemini() -> bool:
    """Check that an API key is set and the configured model answers."""
    from html_translator.services.gemini_client import get_gemini_client
    return get_gemini_client().is_healthy()


def main():
    from html_translator.config import config
    from html_translator.app import create_app

    app_url = f"http://{config.server.host}:{config.server.port}"
    print_banner(app_url)

    print(f"{Colors.YELLOW}Checking Gemini API...{Colors.RESET}")
    if not config.gemini.is_configured:
        print(f"{Colors.RED}   GEMINI_API_KEY is not set{Colors.RESET}")
        print(f"{Colors.YELLOW}   Every translation will fail until it is{Colors.RESET}")
    elif check_gemini():
        print(f"{Colors.GREEN}   Model {config.gemini.model} is reachable{Colors.RESET}")
    else:
        print(f"{Colors.RED}   Model {config.gemini.model} did not answer{Colors.RESET}")
    print()

    def open_browser():
        time.sleep(1.5)
        webbrowser.open(app_url)

    threading.Thread(target=open_browser, daemon=True).start()

    print(f"{Colors.RED}   Press Ctrl+C to close{Colors.RESET}\n")
    app = create_app()
    app.run(host=config.server.host, port=config.server.port, debug=False, use_reloader=False, threaded=True)


if __name__ == '__main__':
    main()
