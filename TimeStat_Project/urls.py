"""
TimeStat Project URL Configuration

URL Structure:
- /admin/ : Django admin interface
- /timestat/ : Time-spent report
"""

from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    path('timestat/', include('timestat.urls')),
]
