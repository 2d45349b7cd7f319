"""
Celery Tasks

Task modules are registered through ``celery_app.conf.imports``.
"""
