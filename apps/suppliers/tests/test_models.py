from unittest.mock import patch

import pytest
from django.contrib.admin.sites import AdminSite
from django.core.exceptions import ValidationError
from django.test import RequestFactory

from apps.suppliers.admin import SupplierAdmin
from apps.suppliers.models import Supplier


def make_supplier(user, **kwargs):
    fields = {
        'business_name': 'Main Canteen',
        'address': 'Bole Road 12',
        'latitude': 9.03,
        'longitude': 38.74,
    }
    fields.update(kwargs)
    return Supplier.objects.create(user=user, **fields)


@pytest.mark.django_db
class TestSupplier:

    def test_defaults(self, supplier_user):
        supplier = make_supplier(supplier_user)

        assert supplier.location_radius == 500
        assert supplier.is_active is True
        assert supplier.is_verified is False

    def test_new_supplier_cannot_charge_until_verified(self, supplier_user):
        supplier = make_supplier(supplier_user)
        assert supplier.can_charge is False

        supplier.is_verified = True
        assert supplier.can_charge is True

    def test_inactive_supplier_cannot_charge(self, supplier_user):
        supplier = make_supplier(supplier_user, is_verified=True, is_active=False)

        assert supplier.can_charge is False

    def test_latitude_is_validated(self, supplier_user):
        supplier = Supplier(
            user=supplier_user,
            business_name='Nowhere',
            address='-',
            latitude=95.0,
            longitude=0.0,
        )

        with pytest.raises(ValidationError) as exc_info:
            supplier.full_clean()

        assert 'latitude' in exc_info.value.message_dict


@pytest.mark.django_db
class TestSupplierAdminActions:

    @pytest.fixture
    def model_admin(self):
        return SupplierAdmin(Supplier, AdminSite())

    def test_verify_then_deactivate(self, model_admin, supplier_user):
        request = RequestFactory().post('/admin/suppliers/supplier/')
        supplier = make_supplier(supplier_user)

        with patch.object(model_admin, 'message_user') as message_user:
            model_admin.verify(request, Supplier.objects.all())
            model_admin.deactivate(request, Supplier.objects.all())

        supplier.refresh_from_db()
        assert supplier.is_verified is True
        assert supplier.is_active is False
        assert message_user.call_args_list[0].args[1] == 'Verified 1 supplier(s).'
