"""
WSGI config for boarding_house project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'boarding_house.settings')

application = get_wsgi_application()
