from django.urls import path
from . import views

app_name = 'suppliers'

urlpatterns = [
    path('me/', views.my_profile, name='my-profile'),
]
