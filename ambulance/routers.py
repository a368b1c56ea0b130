"""
URL mappings for the dispatch API.

Paths match the ones the ambulance mobile client already calls.
Trailing slashes are deliberately omitted.
"""
from django.urls import path

from .views import health
from .views.dispatches import (
    dispatch_accept,
    dispatch_complete,
    dispatch_create,
    dispatch_detail,
    dispatch_list,
    hospital_dispatch_board,
)
from .views.patients import patient_detail, patient_item, patients_collection

urlpatterns = [
    path('healthz', health.healthz, name='healthz'),
    # Patients
    path('api/patient/<str:nhs_number>', patient_detail, name='patient_detail'),
    path('api/patients', patients_collection, name='patients'),
    path('api/patients/<str:nhs_number>', patient_item, name='patient_item'),
    # Dispatches
    path('api/dispatch', dispatch_create, name='dispatch_create'),
    path('api/dispatch/<int:pk>', dispatch_detail, name='dispatch_detail'),
    path('api/dispatch/<int:pk>/accept', dispatch_accept, name='dispatch_accept'),
    path('api/dispatch/<int:pk>/complete', dispatch_complete, name='dispatch_complete'),
    path('api/dispatches', dispatch_list, name='dispatch_list'),
    path('api/hospital/dispatches', hospital_dispatch_board, name='hospital_dispatches'),
]
