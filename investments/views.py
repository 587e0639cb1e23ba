from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework.pagination import LimitOffsetPagination
from rest_framework import status

from . import services
from .serializers import (
    ConfirmPaymentSerializer,
    InitiatePaymentSerializer,
    InvestmentCreateSerializer,
    InvestmentSerializer,
)


class InvestmentListCreateView(APIView):
    """
    GET  /api/investments/              own investments
    GET  /api/investments/?project=<id> a project's investments (owner/admin)
    POST /api/investments/              { project_id, amount, payment_method }
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        qs = services.list_investments(request.user, project_id=request.query_params.get("project"))

        paginator = LimitOffsetPagination()
        paginator.default_limit = 20
        page = paginator.paginate_queryset(qs, request)
        serializer = InvestmentSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    def post(self, request):
        serializer = InvestmentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        investment = services.create_investment(
            request.user,
            data["project_id"],
            data["amount"],
            payment_method=data["payment_method"],
        )
        return Response(InvestmentSerializer(investment).data, status=status.HTTP_201_CREATED)


class InvestmentDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, investment_id):
        investment = services.view_investment(request.user, investment_id)
        return Response(InvestmentSerializer(investment).data)


class InitiatePaymentView(APIView):
    """
    POST /api/investments/<id>/pay/
    Returns the gateway reference and the redirect for the confirmation step.
    """
    permission_classes = [IsAuthenticated]
    throttle_scope = "payment"

    def post(self, request, investment_id):
        serializer = InitiatePaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        investment, result = services.initiate_payment(
            request.user,
            investment_id,
            payment_method=serializer.validated_data.get("payment_method"),
        )
        return Response({
            "success": True,
            "message": result.message,
            "payment_reference": result.payment_reference,
            "redirect_url": result.redirect_url,
            "investment": InvestmentSerializer(investment).data,
        })


class ConfirmPaymentView(APIView):
    """POST /api/investments/<id>/confirm/  { payment_reference }"""
    permission_classes = [IsAuthenticated]
    throttle_scope = "payment"

    def post(self, request, investment_id):
        serializer = ConfirmPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        investment, applied = services.confirm_payment(
            request.user,
            investment_id,
            payment_reference=serializer.validated_data.get("payment_reference") or None,
        )
        return Response({
            "success": True,
            "applied": applied,
            "message": "Payment confirmed" if applied else "Payment was already confirmed",
            "investment": InvestmentSerializer(investment).data,
        })


class AdminConfirmPaymentView(APIView):
    """POST /api/investments/<id>/admin-confirm/  (admin reconciliation)"""
    permission_classes = [IsAuthenticated]

    def post(self, request, investment_id):
        serializer = ConfirmPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        investment, applied = services.admin_confirm_payment(
            request.user,
            investment_id,
            payment_reference=serializer.validated_data.get("payment_reference") or None,
        )
        return Response({
            "success": True,
            "applied": applied,
            "investment": InvestmentSerializer(investment).data,
        })
