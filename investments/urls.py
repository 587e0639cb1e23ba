from django.urls import path

from .views import (
    InvestmentListCreateView,
    InvestmentDetailView,
    InitiatePaymentView,
    ConfirmPaymentView,
    AdminConfirmPaymentView,
)

urlpatterns = [
    path("", InvestmentListCreateView.as_view(), name="investment-list"),
    path("<uuid:investment_id>/", InvestmentDetailView.as_view(), name="investment-detail"),
    path("<uuid:investment_id>/pay/", InitiatePaymentView.as_view(), name="investment-pay"),
    path("<uuid:investment_id>/confirm/", ConfirmPaymentView.as_view(), name="investment-confirm"),
    path(
        "<uuid:investment_id>/admin-confirm/",
        AdminConfirmPaymentView.as_view(),
        name="investment-admin-confirm",
    ),
]
