from .app import run_service

run_service()
