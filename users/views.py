# users/views.py

from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.pagination import LimitOffsetPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView
from django.contrib.auth import get_user_model

from core.policies import MarketplacePolicy

from . import services
from .serializers import (
    KYCStatusSerializer,
    RejectKYCSerializer,
    UpdateProfileSerializer,
    UserSerializer,
)

User = get_user_model()


class UserViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Standard User API.
    Users only ever see themselves; admins can look anyone up.
    """
    queryset = User.objects.all()
    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        if MarketplacePolicy.is_admin(self.request.user):
            return super().get_queryset().order_by('id')
        return User.objects.filter(pk=self.request.user.pk)

    @action(detail=False, methods=['get', 'patch'])
    def me(self, request):
        """
        GET /api/users/me/
        PATCH /api/users/me/
        """
        if request.method == 'PATCH':
            serializer = UpdateProfileSerializer(request.user, data=request.data, partial=True)
            serializer.is_valid(raise_exception=True)
            serializer.save()
        return Response(UserSerializer(request.user).data)


# ─────────────────────────────────────────────────────────────
# KYC review
# ─────────────────────────────────────────────────────────────

class KYCStatusView(APIView):
    """GET /api/kyc/status/  the caller's own review state"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response({"success": True, **KYCStatusSerializer(request.user).data})


class KYCQueueView(APIView):
    """GET /api/kyc/queue/  (admin)"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        qs = services.kyc_queue(request.user)

        paginator = LimitOffsetPagination()
        paginator.default_limit = 50
        page = paginator.paginate_queryset(qs, request)
        return paginator.get_paginated_response(UserSerializer(page, many=True).data)


class ApproveKYCView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, user_id):
        user = services.approve_kyc(request.user, user_id)
        return Response({
            "success": True,
            "message": "KYC approved successfully",
            "user": UserSerializer(user).data,
        })


class RejectKYCView(APIView):
    """POST /api/kyc/<user_id>/reject/  { reason }"""
    permission_classes = [IsAuthenticated]

    def post(self, request, user_id):
        serializer = RejectKYCSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = services.reject_kyc(request.user, user_id, serializer.validated_data["reason"])
        return Response({
            "success": True,
            "message": "KYC rejected successfully",
            "user": UserSerializer(user).data,
        })
