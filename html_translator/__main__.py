from html_translator.app import run_server

run_server()
