from django.contrib import admin
from .models import User, HostApprovalRequest

# Register your models here.

@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ['username', 'email', 'is_organizer', 'is_admin', 'is_active']
    list_filter = ['is_organizer', 'is_admin', 'is_active']
    search_fields = ['username', 'email', 'first_name', 'last_name']


@admin.register(HostApprovalRequest)
class HostApprovalRequestAdmin(admin.ModelAdmin):
    list_display = ['user', 'organization_name', 'status', 'requested_at', 'decided_by', 'decided_at']
    list_filter = ['status']
    search_fields = ['user__username', 'user__email', 'organization_name']
    readonly_fields = ['status', 'requested_at', 'decided_by', 'decided_at']
