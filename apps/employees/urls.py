from django.urls import path
from . import views

app_name = 'employees'

urlpatterns = [
    path('me/', views.my_profile, name='my-profile'),
    path('me/balance/', views.my_balance, name='my-balance'),
]
