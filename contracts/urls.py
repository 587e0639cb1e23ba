from django.urls import path

from .views import (
    GenerateContractView,
    ContractDetailView,
    ContractByInvestmentView,
    SignContractView,
    DownloadContractView,
    CompleteContractView,
    CancelContractView,
)

urlpatterns = [
    path("generate/", GenerateContractView.as_view(), name="contract-generate"),
    path(
        "by-investment/<uuid:investment_id>/",
        ContractByInvestmentView.as_view(),
        name="contract-by-investment",
    ),
    path("<uuid:contract_id>/", ContractDetailView.as_view(), name="contract-detail"),
    path("<uuid:contract_id>/sign/", SignContractView.as_view(), name="contract-sign"),
    path("<uuid:contract_id>/download/", DownloadContractView.as_view(), name="contract-download"),
    path("<uuid:contract_id>/complete/", CompleteContractView.as_view(), name="contract-complete"),
    path("<uuid:contract_id>/cancel/", CancelContractView.as_view(), name="contract-cancel"),
]
