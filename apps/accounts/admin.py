# ==========================================
# apps/accounts/admin.py
# ==========================================

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html
from .models import User, UserType


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Admin interface for marketplace users.

    Wallet balances are read-only here: every coin movement must go through
    the ledger services so it leaves a transaction record.
    """

    list_display = [
        'email',
        'name',
        'user_type_badge',
        'coins',
        'locked_coins',
        'is_active',
        'created_at',
    ]

    list_filter = [
        'user_type',
        'is_active',
        'is_staff',
        'preferred_currency',
        'created_at',
    ]

    search_fields = [
        'email',
        'name',
    ]

    ordering = ['-created_at']
    date_hierarchy = 'created_at'

    fieldsets = (
        ('Basic Information', {
            'fields': ('email', 'name', 'user_type', 'password')
        }),
        ('Wallet', {
            'fields': ('coins', 'locked_coins', 'preferred_currency', 'stripe_connect_account_id'),
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('collapse',),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        ('Create User', {
            'classes': ('wide',),
            'fields': ('email', 'name', 'user_type', 'password1', 'password2'),
        }),
    )

    readonly_fields = [
        'coins',
        'locked_coins',
        'created_at',
        'last_login',
    ]

    filter_horizontal = ['groups', 'user_permissions']

    def user_type_badge(self, obj):
        """Display user type as colored badge."""
        colors = {
            UserType.FARMER: '#6B8E5E',
            UserType.BUYER: '#A47449',
            UserType.ADMIN: '#B85C5C',
        }
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            colors.get(obj.user_type, '#ccc'),
            obj.get_user_type_display(),
        )
    user_type_badge.short_description = 'Type'
    user_type_badge.admin_order_field = 'user_type'

    actions = ['activate_users', 'deactivate_users']

    @admin.action(description='Activate selected users')
    def activate_users(self, request, queryset):
        count = queryset.update(is_active=True)
        self.message_user(request, f'Activated {count} user(s).')

    @admin.action(description='Deactivate selected users')
    def deactivate_users(self, request, queryset):
        """Deactivate selected users (superusers are skipped)."""
        safe_queryset = queryset.filter(is_superuser=False)
        count = safe_queryset.update(is_active=False)
        skipped = queryset.count() - count
        msg = f'Deactivated {count} user(s).'
        if skipped:
            msg += f' Skipped {skipped} superuser(s).'
        self.message_user(request, msg)
