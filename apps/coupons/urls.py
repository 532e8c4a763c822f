from django.urls import path
from . import views

app_name = 'coupons'

urlpatterns = [
    # QR codes
    path('qr-codes/', views.generate_qr_code, name='qr-code-generate'),
    path('qr-codes/validate/', views.validate_qr, name='qr-code-validate'),

    # Transactions
    path('transactions/', views.create_transaction, name='transaction-create'),
    path('transactions/pending/', views.pending_transactions, name='transaction-pending'),
    path('transactions/mine/', views.my_transactions, name='transaction-mine'),
    path('transactions/supplier/', views.supplier_transactions, name='transaction-supplier'),
    path(
        'transactions/<uuid:transaction_id>/resolve/',
        views.resolve,
        name='transaction-resolve'
    ),
]
