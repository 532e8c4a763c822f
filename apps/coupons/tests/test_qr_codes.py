"""
Tests for QR code issuance, payload parsing and supplier-side validation.
"""

import base64
from datetime import timedelta

import pytest
from django.test import override_settings
from django.utils import timezone

from apps.coupons.models import QRCode
from apps.coupons.services import (
    issue_qr_code,
    parse_qr_payload,
    validate_qr_code,
)
from apps.coupons.services.exceptions import (
    EmployeeNotEligibleError,
    EmployeeNotFoundError,
    NoCouponsAvailableError,
    QRCodeAlreadyUsedError,
    QRCodeExpiredError,
    QRCodeNotFoundError,
    SupplierNotEligibleError,
    SupplierNotFoundError,
)
from apps.coupons.services.qr_codes import resolve_qr_code
from apps.coupons.services.qr_rendering import QRPayloadGenerator
from apps.employees.models import Employee, EmployeeStatus


@pytest.mark.django_db
class TestIssueQRCode:

    def test_issue_creates_unused_code(self, employee_user, employee):
        issued = issue_qr_code(user=employee_user)

        qr_code = QRCode.objects.get(id=issued.qr_code.id)
        assert qr_code.employee == employee
        assert qr_code.is_used is False
        assert qr_code.used_at is None
        assert issued.employee_balance == 10

    def test_issue_uses_configured_expiry(self, employee_user, employee):
        before = timezone.now()
        issued = issue_qr_code(user=employee_user)

        assert issued.expires_in_minutes == 15
        assert issued.qr_code.expires_at >= before + timedelta(minutes=15)
        assert issued.qr_code.expires_at <= timezone.now() + timedelta(minutes=15)

    @override_settings(COUPONS={'QR_EXPIRY_MINUTES': 5})
    def test_issue_expiry_is_configurable(self, employee_user, employee):
        issued = issue_qr_code(user=employee_user)

        assert issued.expires_in_minutes == 5

    def test_payload_embeds_employee_code_and_token(self, employee_user, employee):
        issued = issue_qr_code(user=employee_user)

        assert issued.payload == f"COUPON-EMP-001-{issued.qr_code.code}"

    def test_image_is_png_data_uri(self, employee_user, employee):
        issued = issue_qr_code(user=employee_user)

        prefix = 'data:image/png;base64,'
        assert issued.image_data_uri.startswith(prefix)
        png = base64.b64decode(issued.image_data_uri[len(prefix):])
        assert png[:8] == b'\x89PNG\r\n\x1a\n'

    def test_each_issue_gets_a_fresh_token(self, employee_user, employee):
        first = issue_qr_code(user=employee_user)
        second = issue_qr_code(user=employee_user)

        assert first.qr_code.code != second.qr_code.code

    def test_issue_does_not_touch_balance(self, employee_user, employee):
        issue_qr_code(user=employee_user)

        employee.refresh_from_db()
        assert employee.current_balance == 10

    def test_zero_balance_is_forbidden(self, employee_user):
        Employee.objects.create(
            user=employee_user,
            employee_code='EMP-000',
            name='Empty',
            email='employee@example.com',
            hire_date='2023-01-01',
            current_balance=0,
        )

        with pytest.raises(NoCouponsAvailableError):
            issue_qr_code(user=employee_user)

        assert QRCode.objects.count() == 0

    @pytest.mark.parametrize('status', [EmployeeStatus.SUSPENDED, EmployeeStatus.TERMINATED])
    def test_ineligible_status_is_forbidden(self, employee_user, employee, status):
        employee.change_status(status)

        with pytest.raises(EmployeeNotEligibleError) as exc_info:
            issue_qr_code(user=employee_user)

        assert exc_info.value.details['status'] == status

    def test_on_leave_employee_can_issue(self, employee_user, employee):
        employee.change_status(EmployeeStatus.ON_LEAVE)

        issued = issue_qr_code(user=employee_user)

        assert issued.qr_code.employee == employee

    def test_user_without_profile(self, supplier_user):
        with pytest.raises(EmployeeNotFoundError):
            issue_qr_code(user=supplier_user)


class TestParsePayload:

    TOKEN = '0f8fad5b-d9cb-469f-a165-70867728950e'

    def test_composite_payload(self):
        assert parse_qr_payload(f'COUPON-E42-{self.TOKEN}') == ('E42', self.TOKEN)

    def test_employee_code_with_dashes(self):
        assert parse_qr_payload(f'COUPON-EMP-001-{self.TOKEN}') == ('EMP-001', self.TOKEN)

    def test_bare_token(self):
        assert parse_qr_payload(self.TOKEN) == (None, self.TOKEN)

    def test_surrounding_whitespace_is_ignored(self):
        assert parse_qr_payload(f'  {self.TOKEN}\n') == (None, self.TOKEN)

    def test_build_then_parse(self):
        payload = QRPayloadGenerator.build_payload('EMP-7', self.TOKEN)

        assert parse_qr_payload(payload) == ('EMP-7', self.TOKEN)


@pytest.mark.django_db
class TestResolveQRCode:

    def test_resolves_composite_payload(self, qr_code, qr_payload):
        assert resolve_qr_code(qr_payload) == qr_code

    def test_resolves_bare_token(self, qr_code):
        assert resolve_qr_code(qr_code.code) == qr_code

    def test_unknown_token(self, employee):
        with pytest.raises(QRCodeNotFoundError):
            resolve_qr_code('COUPON-EMP-001-00000000-0000-0000-0000-000000000000')

    def test_employee_code_must_match_owner(self, qr_code):
        with pytest.raises(QRCodeNotFoundError):
            resolve_qr_code(f'COUPON-EMP-999-{qr_code.code}')

    def test_used_code(self, qr_code):
        QRCode.objects.filter(id=qr_code.id).update(is_used=True, used_at=timezone.now())

        with pytest.raises(QRCodeAlreadyUsedError):
            resolve_qr_code(qr_code.code)

    def test_expired_code_reports_expiry(self, qr_code):
        expired_at = timezone.now() - timedelta(seconds=1)
        QRCode.objects.filter(id=qr_code.id).update(expires_at=expired_at)

        with pytest.raises(QRCodeExpiredError) as exc_info:
            resolve_qr_code(qr_code.code)

        assert exc_info.value.details['expired_at'] == expired_at.isoformat()

    def test_used_takes_precedence_over_expired(self, qr_code):
        QRCode.objects.filter(id=qr_code.id).update(
            is_used=True,
            used_at=timezone.now(),
            expires_at=timezone.now() - timedelta(minutes=1),
        )

        with pytest.raises(QRCodeAlreadyUsedError):
            resolve_qr_code(qr_code.code)


@pytest.mark.django_db
class TestValidateQRCode:

    def test_returns_employee_preview(self, supplier_user, supplier, qr_code, qr_payload):
        validation = validate_qr_code(user=supplier_user, payload=qr_payload)

        assert validation.qr_code == qr_code
        assert validation.employee_name == 'Abebe Kebede'
        assert validation.employee_code == 'EMP-001'
        assert validation.current_balance == 10
        assert validation.expires_at == qr_code.expires_at

    def test_requires_supplier_profile(self, employee_user, qr_payload):
        with pytest.raises(SupplierNotFoundError):
            validate_qr_code(user=employee_user, payload=qr_payload)

    def test_unverified_supplier_is_refused(self, supplier_user, supplier, qr_payload):
        supplier.is_verified = False
        supplier.save()

        with pytest.raises(SupplierNotEligibleError):
            validate_qr_code(user=supplier_user, payload=qr_payload)

    def test_does_not_consume_code(self, supplier_user, supplier, qr_code, qr_payload):
        validate_qr_code(user=supplier_user, payload=qr_payload)

        qr_code.refresh_from_db()
        assert qr_code.is_used is False
