# users/urls_kyc.py
from django.urls import path

from .views import ApproveKYCView, KYCQueueView, KYCStatusView, RejectKYCView

urlpatterns = [
    path("status/", KYCStatusView.as_view(), name="kyc-status"),
    path("queue/", KYCQueueView.as_view(), name="kyc-queue"),
    path("<int:user_id>/approve/", ApproveKYCView.as_view(), name="kyc-approve"),
    path("<int:user_id>/reject/", RejectKYCView.as_view(), name="kyc-reject"),
]
