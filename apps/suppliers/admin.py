from django.contrib import admin
from django.utils.html import format_html

from .models import Supplier


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    """Admin interface for suppliers with activation and verification actions."""

    list_display = [
        'business_name',
        'user',
        'address',
        'location_radius',
        'eligibility_badge',
        'created_at',
    ]

    list_filter = ['is_active', 'is_verified', 'created_at']
    search_fields = ['business_name', 'business_license', 'address', 'user__email']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['business_name']

    fieldsets = (
        ('Business', {
            'fields': ('user', 'business_name', 'business_license', 'address')
        }),
        ('Location', {
            'fields': ('latitude', 'longitude', 'location_radius')
        }),
        ('Status', {
            'fields': ('is_active', 'is_verified')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    actions = ['activate', 'deactivate', 'verify']

    def eligibility_badge(self, obj):
        """Display whether the supplier may charge coupons."""
        if obj.can_charge:
            label, bg, fg = 'Can charge', '#6B8E5E', 'white'
        elif not obj.is_active:
            label, bg, fg = 'Inactive', '#B85C5C', 'white'
        else:
            label, bg, fg = 'Unverified', '#E5C49A', '#2C1810'
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, label
        )
    eligibility_badge.short_description = 'Status'

    @admin.action(description='Activate selected suppliers')
    def activate(self, request, queryset):
        count = queryset.filter(is_active=False).update(is_active=True)
        self.message_user(request, f'Activated {count} supplier(s).')

    @admin.action(description='Deactivate selected suppliers')
    def deactivate(self, request, queryset):
        count = queryset.filter(is_active=True).update(is_active=False)
        self.message_user(request, f'Deactivated {count} supplier(s).')

    @admin.action(description='Verify selected suppliers')
    def verify(self, request, queryset):
        count = queryset.filter(is_verified=False).update(is_verified=True)
        self.message_user(request, f'Verified {count} supplier(s).')

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('user')
