from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
import uuid

from apps.coupons.conf import coupon_setting


class EmployeeStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    ON_LEAVE = 'on_leave', 'On leave'
    SUSPENDED = 'suspended', 'Suspended'
    TERMINATED = 'terminated', 'Terminated'


# Allowed status changes; anything not listed is rejected.
EMPLOYEE_STATUS_TRANSITIONS = {
    EmployeeStatus.ACTIVE: {
        EmployeeStatus.ON_LEAVE,
        EmployeeStatus.SUSPENDED,
        EmployeeStatus.TERMINATED,
    },
    EmployeeStatus.ON_LEAVE: {
        EmployeeStatus.ACTIVE,
        EmployeeStatus.SUSPENDED,
        EmployeeStatus.TERMINATED,
    },
    EmployeeStatus.SUSPENDED: {
        EmployeeStatus.ACTIVE,
        EmployeeStatus.TERMINATED,
    },
    EmployeeStatus.TERMINATED: set(),
}

# Statuses allowed to hold a QR code and take part in a transaction
REDEEMING_STATUSES = (EmployeeStatus.ACTIVE, EmployeeStatus.ON_LEAVE)


class InvalidStatusTransitionError(ValueError):
    """Raised when an employee status change is not in the transition table."""
    pass


class ProtectedBalanceError(ValueError):
    """Raised when code tries to write current_balance through save()."""
    pass


def default_monthly_allocation():
    return coupon_setting('MONTHLY_ALLOCATION')


class Employee(models.Model):
    """
    Employee entitled to meal coupons.

    ``current_balance`` belongs to the coupon ledger: it is set from the
    monthly allocation when the row is created and afterwards only changes
    through ``CouponLedger`` queryset updates. ``save()`` on an existing
    row never writes it.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.OneToOneField(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='employee_profile'
    )

    employee_code = models.CharField(max_length=32, unique=True)
    name = models.CharField(max_length=200)
    email = models.EmailField(max_length=255)
    phone = models.CharField(max_length=32, blank=True)

    status = models.CharField(
        max_length=20,
        choices=EmployeeStatus.choices,
        default=EmployeeStatus.ACTIVE
    )

    # Coupon balance
    monthly_allocation = models.PositiveIntegerField(default=default_monthly_allocation)
    current_balance = models.IntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
        help_text='Starts at the monthly allocation when left empty.'
    )
    last_allocation_date = models.DateTimeField(null=True, blank=True)

    # Employment
    hire_date = models.DateField()
    termination_date = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'employees'
        indexes = [
            models.Index(fields=['status'], name='employees_status_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(current_balance__gte=0),
                name='employee_balance_non_negative',
            ),
        ]
        ordering = ['employee_code']

    def __str__(self):
        return f"{self.employee_code} - {self.name}"

    def save(self, *args, **kwargs):
        """Seed the balance on insert; never write it on update."""
        if self._state.adding:
            if self.current_balance is None:
                self.current_balance = self.monthly_allocation
                self.last_allocation_date = timezone.now()
            return super().save(*args, **kwargs)

        update_fields = kwargs.get('update_fields')
        if update_fields is None:
            kwargs['update_fields'] = [
                field.name
                for field in self._meta.concrete_fields
                if not field.primary_key and field.name != 'current_balance'
            ]
        elif 'current_balance' in update_fields:
            raise ProtectedBalanceError(
                'current_balance can only be changed through the coupon ledger'
            )
        return super().save(*args, **kwargs)

    @property
    def can_redeem(self):
        """Whether the employee's status allows coupon use."""
        return self.status in REDEEMING_STATUSES

    def can_transition_to(self, new_status):
        return new_status in EMPLOYEE_STATUS_TRANSITIONS[EmployeeStatus(self.status)]

    def change_status(self, new_status):
        """Move to ``new_status`` if the transition table allows it."""
        if not self.can_transition_to(new_status):
            raise InvalidStatusTransitionError(
                f"Cannot change employee status from {self.status} to {new_status}"
            )

        self.status = new_status
        fields = ['status', 'updated_at']
        if new_status == EmployeeStatus.TERMINATED:
            self.termination_date = timezone.now()
            fields.append('termination_date')
        self.save(update_fields=fields)
