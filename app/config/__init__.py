# Stayhub project configuration: settings, URL routing, ASGI/WSGI entry
# points and the Celery application.
#
# The Celery app is imported here so @shared_task functions in every
# installed app bind to it as soon as Django loads.

from config.celery import app as celery_app

__all__ = ("celery_app",)
