from django.urls import path

from .views import CreateOrderView, KeyView, PaymentStatusView, VerifyPaymentView

urlpatterns = [
    path("payments/create-order/", CreateOrderView.as_view(), name="payment-create-order"),
    path("payments/verify-payment/", VerifyPaymentView.as_view(), name="payment-verify"),
    path("payments/status/<str:payment_id>/", PaymentStatusView.as_view(), name="payment-status"),
    path("payments/key/", KeyView.as_view(), name="payment-key"),
]
