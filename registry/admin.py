"""
Django admin registrations for the registry models.

The admin is where the street catalog is curated and where operators
can inspect addresses, patients and the audit trail.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import Address, AuditEvent, Patient, Street, User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('username', 'full_name', 'is_staff', 'last_login')
    search_fields = ('username', 'full_name')
    fieldsets = BaseUserAdmin.fieldsets + (('Registry', {'fields': ('full_name',)}),)


@admin.register(Street)
class StreetAdmin(admin.ModelAdmin):
    list_display = ('name', 'street_type', 'normalized_name')
    list_filter = ('street_type',)
    search_fields = ('name', 'normalized_name')


@admin.register(Address)
class AddressAdmin(admin.ModelAdmin):
    list_display = ('street', 'number', 'complement', 'latitude', 'longitude', 'coordinates_dms')
    search_fields = ('street__name', 'number')
    readonly_fields = ('latitude', 'longitude', 'coordinates_dms', 'created_at')


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('name', 'address', 'complement', 'last_visit', 'active')
    list_filter = ('active',)
    search_fields = ('name', 'address__street__name')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('action', 'object_type', 'object_id', 'user', 'created_at')
    list_filter = ('action', 'object_type')
    readonly_fields = ('user', 'action', 'object_type', 'object_id', 'detail', 'created_at')
