"""
Django admin registrations for the clinic models.

Clinical records live in the entity store, so the admin only shows
accounts, the raw collection blobs and the audit trail.
"""

from django.contrib import admin

from .models import AuditEvent, StoredCollection, User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'role', 'email', 'is_active', 'is_staff', 'is_superuser')
    list_filter = ('role', 'is_active')
    search_fields = ('username', 'first_name', 'last_name', 'email')


@admin.register(StoredCollection)
class StoredCollectionAdmin(admin.ModelAdmin):
    list_display = ('key', 'updated_at')
    readonly_fields = ('updated_at',)
    search_fields = ('key',)


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('created_at', 'action', 'object_type', 'object_id', 'user')
    list_filter = ('action', 'object_type')
    search_fields = ('object_id', 'user__username')
    readonly_fields = ('created_at',)
