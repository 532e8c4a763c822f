from django.contrib import admin
from django.utils.html import format_html

from .models import CouponTransaction, QRCode, TransactionStatus


BADGE_HTML = (
    '<span style="background: {}; color: {}; padding: 3px 8px; '
    'border-radius: 10px; font-size: 11px;">{}</span>'
)


class CouponTransactionInline(admin.TabularInline):
    """Transactions opened on a QR code."""
    model = CouponTransaction
    extra = 0
    fields = ['supplier', 'coupons_used', 'total_amount', 'status', 'created_at']
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        """Transactions are created by suppliers through the API only."""
        return False


@admin.register(QRCode)
class QRCodeAdmin(admin.ModelAdmin):
    """Read-only view of issued QR codes."""

    list_display = ['short_code', 'employee', 'state_badge', 'expires_at', 'used_at', 'created_at']
    list_filter = ['is_used', 'created_at']
    search_fields = ['code', 'employee__employee_code', 'employee__name']
    readonly_fields = ['id', 'code', 'employee', 'expires_at', 'is_used', 'used_at', 'created_at']
    inlines = [CouponTransactionInline]
    ordering = ['-created_at']

    def short_code(self, obj):
        return obj.code[:8]
    short_code.short_description = 'Code'

    def state_badge(self, obj):
        """Display used/expired/valid state as colored badge."""
        if obj.is_used:
            return format_html(BADGE_HTML, '#6B8E5E', 'white', 'Used')
        if obj.is_expired():
            return format_html(BADGE_HTML, '#B85C5C', 'white', 'Expired')
        return format_html(BADGE_HTML, '#E5C49A', '#2C1810', 'Valid')
    state_badge.short_description = 'State'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def get_queryset(self, request):
        """Optimize query with select_related."""
        qs = super().get_queryset(request)
        return qs.select_related('employee')


@admin.register(CouponTransaction)
class CouponTransactionAdmin(admin.ModelAdmin):
    """
    Admin interface for coupon transactions.

    Transactions are never edited by hand: the balance and the QR code
    are only changed by the approval service.
    """

    list_display = [
        'id',
        'employee',
        'supplier',
        'coupons_used',
        'total_amount',
        'status_badge',
        'created_at',
        'resolved_at',
    ]

    list_filter = [
        'status',
        'supplier',
        'created_at',
    ]

    search_fields = [
        'employee__employee_code',
        'employee__name',
        'supplier__business_name',
        'qr_code__code',
    ]

    readonly_fields = [
        'id',
        'employee',
        'supplier',
        'qr_code',
        'coupons_used',
        'total_amount',
        'status',
        'employee_latitude',
        'employee_longitude',
        'notes',
        'rejection_reason',
        'processed_at',
        'resolved_at',
        'created_at',
        'updated_at',
    ]

    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    fieldsets = (
        ('Parties', {
            'fields': ('employee', 'supplier', 'qr_code')
        }),
        ('Charge', {
            'fields': ('coupons_used', 'total_amount', 'status', 'notes', 'rejection_reason')
        }),
        ('Location', {
            'fields': ('employee_latitude', 'employee_longitude'),
            'classes': ('collapse',),
        }),
        ('Timestamps', {
            'fields': ('processed_at', 'resolved_at', 'created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    def status_badge(self, obj):
        """Display transaction status as colored badge."""
        colors = {
            TransactionStatus.PENDING: ('#E5C49A', '#2C1810'),
            TransactionStatus.COMPLETED: ('#6B8E5E', 'white'),
            TransactionStatus.REJECTED: ('#B85C5C', 'white'),
        }
        bg, fg = colors.get(obj.status, ('#ccc', '#666'))
        return format_html(BADGE_HTML, bg, fg, obj.get_status_display())
    status_badge.short_description = 'Status'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def get_queryset(self, request):
        """Optimize query with select_related."""
        qs = super().get_queryset(request)
        return qs.select_related('employee', 'supplier', 'qr_code')
