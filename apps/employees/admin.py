from django.contrib import admin
from django.utils.html import format_html

from .models import Employee, EmployeeStatus, InvalidStatusTransitionError


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    """
    Admin interface for employees.

    The coupon balance is read-only here; it is seeded from the monthly
    allocation on creation and afterwards changed only by approvals.
    Status changes go through the transition table.
    """

    list_display = [
        'employee_code',
        'name',
        'email',
        'status_badge',
        'current_balance',
        'monthly_allocation',
        'hire_date',
    ]

    list_filter = ['status', 'hire_date']
    search_fields = ['employee_code', 'name', 'email', 'user__email']
    readonly_fields = [
        'current_balance',
        'last_allocation_date',
        'status',
        'termination_date',
        'created_at',
        'updated_at',
    ]
    ordering = ['employee_code']

    fieldsets = (
        ('Employee', {
            'fields': ('user', 'employee_code', 'name', 'email', 'phone')
        }),
        ('Coupons', {
            'fields': ('monthly_allocation', 'current_balance', 'last_allocation_date')
        }),
        ('Employment', {
            'fields': ('status', 'hire_date', 'termination_date', 'notes')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    actions = [
        'mark_active',
        'mark_on_leave',
        'mark_suspended',
        'mark_terminated',
    ]

    def status_badge(self, obj):
        """Display employee status as colored badge."""
        colors = {
            EmployeeStatus.ACTIVE: ('#6B8E5E', 'white'),
            EmployeeStatus.ON_LEAVE: ('#E5C49A', '#2C1810'),
            EmployeeStatus.SUSPENDED: ('#A47449', 'white'),
            EmployeeStatus.TERMINATED: ('#B85C5C', 'white'),
        }
        bg, fg = colors.get(obj.status, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.get_status_display()
        )
    status_badge.short_description = 'Status'

    def _change_status(self, request, queryset, new_status):
        changed, skipped = 0, 0
        for employee in queryset:
            try:
                employee.change_status(new_status)
                changed += 1
            except InvalidStatusTransitionError:
                skipped += 1
        message = f'Changed {changed} employee(s) to {new_status}.'
        if skipped:
            message += f' Skipped {skipped} not allowed transition(s).'
        self.message_user(request, message)

    @admin.action(description='Mark selected as ACTIVE')
    def mark_active(self, request, queryset):
        self._change_status(request, queryset, EmployeeStatus.ACTIVE)

    @admin.action(description='Mark selected as ON LEAVE')
    def mark_on_leave(self, request, queryset):
        self._change_status(request, queryset, EmployeeStatus.ON_LEAVE)

    @admin.action(description='Mark selected as SUSPENDED')
    def mark_suspended(self, request, queryset):
        self._change_status(request, queryset, EmployeeStatus.SUSPENDED)

    @admin.action(description='Mark selected as TERMINATED')
    def mark_terminated(self, request, queryset):
        self._change_status(request, queryset, EmployeeStatus.TERMINATED)
