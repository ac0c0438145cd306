from django.urls import path

from . import views

app_name = 'timestat'

urlpatterns = [
    path('', views.report, name='report'),
]
