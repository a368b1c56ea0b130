"""
Django admin registrations for patients and dispatches.

Lets control-room staff inspect records at ``/admin/``.  Dispatch
lifecycle columns are read-only here so that every accept and
completion goes through the API and its conditional updates.
"""

from django.contrib import admin

from .models import Dispatch, Patient


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('nhs_number', 'name', 'address')
    search_fields = ('nhs_number', 'name', 'address')


@admin.register(Dispatch)
class DispatchAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient_name', 'condition', 'timestamp', 'ambulance_id', 'completed', 'completion_time')
    list_filter = ('completed',)
    search_fields = ('patient_id', 'patient_name', 'condition', 'ambulance_id')
    readonly_fields = ('timestamp', 'ambulance_id', 'completed', 'completion_time')
    ordering = ('-timestamp',)
